"""
Downloads a single exported file, retrying transient failures.
"""

import logging

from rich.console import Console
from rich.markup import escape

from megadl.api.session import MegaSession
from megadl.cli.progress_manager import ProgressReporter
from megadl.exceptions import TransferError
from megadl.models.config import DownloadConfig
from megadl.models.references import FileRef
from megadl.models.stats import DownloadStats

from .retry import RetryPolicy, run_with_retry

log = logging.getLogger(__name__)


class FileDownloader:
    """Fetches file links, to a local path or to standard output."""

    def __init__(
        self,
        session: MegaSession,
        reporter: ProgressReporter,
        policy: RetryPolicy,
        config: DownloadConfig,
        stats: DownloadStats,
        names_console: Console | None = None,
    ):
        self.session = session
        self.reporter = reporter
        self.policy = policy
        self.config = config
        self.stats = stats
        self.names_console = names_console

    async def download(self, ref: FileRef, destination: str | None) -> str:
        """
        Downloads the file behind ``ref``.

        Args:
            ref: The parsed file link.
            destination: Local directory or file name, or None to stream the
                content to standard output.

        Returns:
            The name of the downloaded file as reported by the session.

        Raises:
            The last error of the session once retrying is exhausted or the
            error is permanent.
        """
        self.reporter.reset()
        description = f"'{ref.link or ref.handle}'"

        async def attempt() -> None:
            try:
                await self.session.fetch_by_reference(ref.handle, ref.key, destination)
            except Exception as e:
                # Bytes already on stdout cannot be taken back, so no retry.
                if destination is None and self.reporter.bytes_streamed:
                    raise TransferError(
                        f"{e} (streamed output is incomplete after "
                        f"{self.reporter.bytes_streamed} bytes)"
                    ) from e
                raise
            if self.reporter.stream_error is not None:
                raise TransferError(
                    f"Can't write to standard output: {self.reporter.stream_error}"
                )

        await run_with_retry(
            attempt,
            self.policy,
            description,
            on_failure=self.reporter.clear,
        )

        # The session announces the real name while transferring.
        name = self.reporter.current_file or ref.handle
        size = self.reporter.current_size
        self.reporter.clear()

        if self.config.show_progress:
            log.info(f"[green]Downloaded {escape(name)}[/green]")
        if self.config.show_names and self.names_console:
            self.names_console.print(name, markup=False, highlight=False)

        self.stats.record_download(name, size)
        return name
