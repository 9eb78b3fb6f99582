"""
Remote filesystem nodes and the status events a session pushes during a transfer.
"""

from dataclasses import dataclass
from enum import Enum


class NodeKind(Enum):
    FILE = 0
    DIRECTORY = 1


@dataclass(frozen=True)
class RemoteNode:
    """
    One entry of the remote tree.

    Nodes belong to the session; children are listed lazily through
    ``session.list_children(node)`` rather than stored here.
    """

    name: str
    kind: NodeKind
    handle: str = ""
    size: int = 0

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY


@dataclass(frozen=True)
class ProgressEvent:
    """Bytes transferred so far for the active file."""

    bytes_done: int
    bytes_total: int


@dataclass(frozen=True)
class FileInfoEvent:
    """Announces the resolved name of the file being transferred."""

    name: str
    size: int = 0


@dataclass(frozen=True)
class RawDataEvent:
    """A chunk of decrypted file content, delivered in stream mode."""

    data: bytes


StatusEvent = ProgressEvent | FileInfoEvent | RawDataEvent
