"""
Typed references to remote objects, as decoded from share links.
"""

from dataclasses import dataclass, field
from enum import Enum

HANDLE_LENGTH = 8
FILE_KEY_LENGTH = 43
FOLDER_KEY_LENGTH = 22


class ReferenceKind(Enum):
    FILE = "file"
    FOLDER = "folder"


@dataclass(frozen=True)
class FileRef:
    """A link to a single exported file."""

    handle: str
    key: str
    link: str = field(default="", compare=False)

    kind = ReferenceKind.FILE


@dataclass(frozen=True)
class FolderRef:
    """A link to an exported folder."""

    handle: str
    key: str
    link: str = field(default="", compare=False)

    kind = ReferenceKind.FOLDER


Reference = FileRef | FolderRef
