"""
Data Models Layer.

This package contains the Pydantic configuration model and the dataclasses
that describe links, remote nodes, local targets and transfer status events.
"""

from .config import STDOUT_PATH, DownloadConfig
from .local import LocalState, LocalTarget
from .references import FileRef, FolderRef, Reference, ReferenceKind
from .remote import (
    FileInfoEvent,
    NodeKind,
    ProgressEvent,
    RawDataEvent,
    RemoteNode,
    StatusEvent,
)
from .stats import DownloadStats

__all__ = [
    "DownloadConfig",
    "DownloadStats",
    "FileInfoEvent",
    "FileRef",
    "FolderRef",
    "LocalState",
    "LocalTarget",
    "NodeKind",
    "ProgressEvent",
    "RawDataEvent",
    "Reference",
    "ReferenceKind",
    "RemoteNode",
    "STDOUT_PATH",
    "StatusEvent",
]
