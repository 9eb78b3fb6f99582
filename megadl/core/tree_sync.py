"""
Mirrors an exported folder onto the local filesystem.
"""

import logging
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from megadl.api.session import MegaSession
from megadl.cli.progress_manager import ProgressReporter
from megadl.exceptions import (
    LocalConflictError,
    SessionError,
    StructuralAnomalyError,
)
from megadl.models.config import DownloadConfig
from megadl.models.local import LocalTarget
from megadl.models.references import FolderRef
from megadl.models.remote import RemoteNode
from megadl.models.stats import DownloadStats
from megadl.utils.formatting import join_remote_path
from megadl.utils.path import local_child_path

from .retry import RetryPolicy, run_with_retry

log = logging.getLogger(__name__)


class TreeSyncEngine:
    """
    Walks a remote folder and recreates it locally.

    Directories are created when missing and reused when present; files are
    only ever created, never overwritten. A failing entry does not stop the
    walk: every sibling is still visited and the failure is reported through
    the boolean result of each step.
    """

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

    async def sync_folder(self, ref: FolderRef, local_root: str | Path) -> bool:
        """
        Opens the exported folder behind ``ref`` and mirrors it into ``local_root``.

        The children of the folder's single root node are placed directly
        inside ``local_root``, which must already be a directory.

        Raises:
            SessionError: If the folder cannot be opened.
            StructuralAnomalyError: If the folder has no or several root nodes.
            LocalConflictError: If ``local_root`` is not an existing directory.
        """
        self.reporter.reset()
        try:
            await self.session.open_shared_folder(ref.handle, ref.key)
        except SessionError:
            raise
        except Exception as e:
            raise SessionError(
                f"Can't open folder '{ref.link or ref.handle}': {e}"
            ) from e
        # Opening a folder replaces the session state, subscribe again.
        self.session.subscribe_status(self.reporter)

        roots = self.session.list_root()
        if len(roots) != 1:
            raise StructuralAnomalyError(
                f"Exported folder has {len(roots)} top-level nodes, expected exactly one."
            )
        root = roots[0]

        local = LocalTarget.probe(local_root)
        if not local.is_dir:
            raise LocalConflictError(f"{local_root} must be a directory")

        return await self.sync_dir(root, local, self.session.node_path(root))

    async def sync_dir(
        self, node: RemoteNode, local: LocalTarget, remote_path: str
    ) -> bool:
        """Mirrors ``node`` and its whole subtree. Returns False if anything failed."""
        if not local.exists:
            if self.config.show_progress:
                log.info(f"D {escape(str(local))}")
            try:
                local.path.mkdir()
            except OSError as e:
                log.error(
                    f"[red]ERROR: Can't create local directory {escape(str(local))}: "
                    f"{escape(str(e))}[/red]"
                )
                return False
            self.stats.directories_created += 1
        elif not local.is_dir:
            log.error(
                f"[red]ERROR: Can't create local directory {escape(str(local))}: "
                "file exists[/red]"
            )
            return False

        try:
            children = self.session.list_children(node)
        except Exception as e:
            log.error(
                f"[red]ERROR: Can't list {escape(remote_path)}: {escape(str(e))}[/red]"
            )
            return False

        status = True
        for child in children:
            child_local = LocalTarget.probe(local_child_path(local.path, child.name))
            child_remote = join_remote_path(remote_path, child.name)

            if child.is_dir:
                ok = await self.sync_dir(child, child_local, child_remote)
            else:
                ok = await self.sync_file(child, child_local, child_remote)
            if not ok:
                status = False

        return status

    async def sync_file(
        self, node: RemoteNode, local: LocalTarget, remote_path: str
    ) -> bool:
        """Downloads one file of the folder, unless something already exists there."""
        if local.exists:
            log.error(f"[red]ERROR: File already exists at {escape(str(local))}[/red]")
            self.stats.files_skipped_exists += 1
            return False

        if self.config.show_progress:
            log.info(f"F {escape(str(local))}")

        try:
            await run_with_retry(
                lambda: self.session.fetch_object(str(local.path), remote_path),
                self.policy,
                remote_path,
                on_failure=self.reporter.clear,
            )
        except Exception:
            # Already reported by run_with_retry.
            self.stats.files_failed += 1
            return False
        finally:
            self.reporter.clear()

        if self.config.show_names and self.names_console:
            self.names_console.print(str(local), markup=False, highlight=False)

        self.stats.record_download(node.name, node.size)
        return True
