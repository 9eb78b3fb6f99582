"""
Counters for a download session.
"""

import time
from dataclasses import dataclass, field


@dataclass
class DownloadStats:
    """Tracks what a run downloaded, created, skipped and failed."""

    files_downloaded: int = 0
    files_failed: int = 0
    files_skipped_exists: int = 0
    directories_created: int = 0
    links_skipped_invalid: int = 0
    links_failed: int = 0
    bytes_downloaded: int = 0
    downloaded_names: list[str] = field(default_factory=list)
    start_time: float = field(default_factory=time.monotonic, repr=False)

    def record_download(self, name: str, size: int = 0) -> None:
        self.files_downloaded += 1
        self.bytes_downloaded += size
        self.downloaded_names.append(name)

    @property
    def elapsed_seconds(self) -> float:
        return time.monotonic() - self.start_time

    @property
    def has_failures(self) -> bool:
        return bool(self.files_failed or self.files_skipped_exists or self.links_failed)
