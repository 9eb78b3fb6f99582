"""
Utilities for mapping remote names onto local paths.
"""

from pathlib import Path

from pathvalidate import sanitize_filename


def local_child_path(parent: Path, remote_name: str) -> Path:
    """
    Returns the local path for a remote child entry.

    The remote name is sanitized so it stays a single path component inside
    ``parent`` ('..', separators and reserved characters are neutralized).
    """
    name = sanitize_filename(remote_name, platform="auto")
    if not name or name in (".", ".."):
        name = "_" * max(len(remote_name), 1)
    return parent / name
