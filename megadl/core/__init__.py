"""
Core application engine for orchestrating the download process.

This package contains the primary logic. The `DownloadManager` routes each
link, delegating single files to the `FileDownloader` and exported folders to
the `TreeSyncEngine`. Both share one `RetryPolicy`.
"""

from .download_manager import DownloadManager, prepare_references
from .file_downloader import FileDownloader
from .retry import RetryDecision, RetryPolicy, classify_error, run_with_retry
from .tree_sync import TreeSyncEngine

__all__ = [
    "DownloadManager",
    "FileDownloader",
    "RetryDecision",
    "RetryPolicy",
    "TreeSyncEngine",
    "classify_error",
    "prepare_references",
    "run_with_retry",
]
