"""
Existence probes for local filesystem targets.
"""

import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class LocalState(Enum):
    MISSING = "missing"
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class LocalTarget:
    """
    A local path together with what was found there when it was probed.

    The state is a snapshot: callers probe again right before creating
    anything instead of reusing an old target.
    """

    path: Path
    state: LocalState

    @classmethod
    def probe(cls, path: str | os.PathLike) -> "LocalTarget":
        """Checks the path without following symlinks."""
        path = Path(path)
        try:
            mode = path.lstat().st_mode
        except FileNotFoundError:
            return cls(path, LocalState.MISSING)
        if stat.S_ISDIR(mode):
            return cls(path, LocalState.DIRECTORY)
        # Anything else (regular file, symlink, socket, ...) is an existing non-directory.
        return cls(path, LocalState.FILE)

    @property
    def exists(self) -> bool:
        return self.state is not LocalState.MISSING

    @property
    def is_dir(self) -> bool:
        return self.state is LocalState.DIRECTORY

    def __str__(self) -> str:
        return str(self.path)
