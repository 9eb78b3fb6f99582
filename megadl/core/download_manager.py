"""
The main orchestrator: validates the links, then routes each one to the file
downloader or the folder sync engine, one after the other.
"""

import logging

from rich.console import Console
from rich.markup import escape

from megadl.api.session import MegaSession
from megadl.cli.progress_manager import ProgressReporter
from megadl.exceptions import MegadlError, UsageError
from megadl.models.config import DownloadConfig
from megadl.models.references import FileRef, FolderRef, Reference
from megadl.models.stats import DownloadStats
from megadl.utils.links import classify_link

from .file_downloader import FileDownloader
from .retry import RetryPolicy
from .tree_sync import TreeSyncEngine

log = logging.getLogger(__name__)


def prepare_references(links: list[str], stream: bool) -> list[Reference | None]:
    """
    Classifies every link and enforces the usage rules.

    Must run before any network activity. Invalid links are returned as None
    so the caller can warn about them in order.

    Raises:
        UsageError: If no links are given, or stream mode is combined with
            several links or with a folder link.
    """
    if not links:
        raise UsageError("No links specified for download!")
    if stream and len(links) != 1:
        raise UsageError("Can't stream from multiple files!")

    references = [classify_link(link) for link in links]
    if stream and any(isinstance(ref, FolderRef) for ref in references):
        raise UsageError("Can't stream from a directory!")
    return references


class DownloadManager:
    """Orchestrates the entire download process."""

    def __init__(
        self,
        config: DownloadConfig,
        session: MegaSession,
        reporter: ProgressReporter,
        names_console: Console | None = None,
    ):
        self.config = config
        self.session = session
        self.reporter = reporter
        self.stats = DownloadStats()
        self.policy = RetryPolicy(config.max_attempts, config.initial_backoff)
        self.file_downloader = FileDownloader(
            session, reporter, self.policy, config, self.stats, names_console
        )
        self.tree_sync = TreeSyncEngine(
            session, reporter, self.policy, config, self.stats, names_console
        )

    async def run(self, links: list[str]) -> int:
        """
        Processes all links in order.

        Returns:
            0 when every valid link was downloaded completely, 1 otherwise.
        """
        references = prepare_references(links, self.config.stream)
        self.session.subscribe_status(self.reporter)

        status = 0
        for link, ref in zip(links, references):
            if ref is None:
                log.warning(
                    "[yellow]WARNING: Skipping invalid Mega download link: "
                    f"{escape(link)}[/yellow]"
                )
                self.stats.links_skipped_invalid += 1
                continue

            if isinstance(ref, FileRef):
                ok = await self._process_file(ref)
            else:
                ok = await self._process_folder(ref)

            if not ok:
                self.stats.links_failed += 1
                status = 1
        return status

    async def _process_file(self, ref: FileRef) -> bool:
        destination = None if self.config.stream else self.config.path
        try:
            await self.file_downloader.download(ref, destination)
        except Exception:
            # run_with_retry already logged every failed attempt.
            self.stats.files_failed += 1
            return False
        return True

    async def _process_folder(self, ref: FolderRef) -> bool:
        try:
            return await self.tree_sync.sync_folder(ref, self.config.path)
        except MegadlError as e:
            log.error(f"[red]ERROR: {escape(str(e))}[/red]")
            return False
