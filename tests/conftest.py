"""
Pytest configuration and fixtures for megadl tests.
"""

import io
import itertools
from pathlib import Path

import pytest
from rich.console import Console

from megadl.cli.progress_manager import ProgressReporter
from megadl.exceptions import ErrorKind, TransferError
from megadl.models.config import DownloadConfig
from megadl.models.remote import (
    FileInfoEvent,
    NodeKind,
    ProgressEvent,
    RawDataEvent,
    RemoteNode,
)

FILE_HANDLE = "AAAAAAAA"
FILE_KEY = "k" * 43
FOLDER_HANDLE = "BBBBBBBB"
FOLDER_KEY = "f" * 22

FILE_LINK = f"https://mega.nz/#!{FILE_HANDLE}!{FILE_KEY}"
FOLDER_LINK = f"https://mega.nz/#F!{FOLDER_HANDLE}!{FOLDER_KEY}"


class FakeSession:
    """
    In-memory session backend.

    Exported files are registered with ``add_file``; exported folders with
    ``add_folder`` from a nested dict where bytes values are files and dict
    values are directories. ``failures`` maps a handle or remote path to the
    exceptions raised by its next fetches, in order.
    """

    def __init__(self):
        self.files: dict[tuple[str, str], tuple[str, bytes]] = {}
        self.folders: dict[tuple[str, str], RemoteNode] = {}
        self.failures: dict[str, list[Exception]] = {}
        self.calls: list[tuple] = []
        self.subscriptions = 0
        self.closed = False
        self.extra_roots: list[RemoteNode] = []

        self._callback = None
        self._handles = (f"N{i:07d}" for i in itertools.count())
        self._children: dict[str, list[RemoteNode]] = {}
        self._paths: dict[str, str] = {}
        self._contents: dict[str, bytes] = {}
        self._root: RemoteNode | None = None

    # --- setup helpers ---

    def add_file(self, handle: str, key: str, name: str, content: bytes) -> None:
        self.files[(handle, key)] = (name, content)

    def add_folder(self, handle: str, key: str, name: str, tree: dict) -> RemoteNode:
        root = self._build(name, tree, "")
        self.folders[(handle, key)] = root
        return root

    def _build(self, name: str, tree: dict, parent_path: str) -> RemoteNode:
        node = RemoteNode(name, NodeKind.DIRECTORY, next(self._handles))
        path = f"{parent_path}/{name}"
        self._paths[node.handle] = path
        children = []
        for child_name, value in tree.items():
            if isinstance(value, dict):
                children.append(self._build(child_name, value, path))
            else:
                child = RemoteNode(
                    child_name, NodeKind.FILE, next(self._handles), len(value)
                )
                self._paths[child.handle] = f"{path}/{child_name}"
                self._contents[f"{path}/{child_name}"] = value
                children.append(child)
        self._children[node.handle] = children
        return node

    def fail(self, target: str, *errors: Exception) -> None:
        self.failures.setdefault(target, []).extend(errors)

    def fail_midway(self, handle: str, *errors: Exception) -> None:
        """Next streamed fetches of ``handle`` fail after the first chunk."""
        self.fail(f"midway {handle}", *errors)

    def fail_listing(self, remote_path: str, *errors: Exception) -> None:
        self.fail(f"list {remote_path}", *errors)

    def _maybe_fail(self, target: str) -> None:
        if pending := self.failures.get(target):
            raise pending.pop(0)

    def _emit(self, event) -> None:
        if self._callback:
            self._callback(event)

    def _transfer(
        self, name: str, content: bytes, local_path: Path | None, fail_key: str = ""
    ) -> None:
        self._emit(FileInfoEvent(name, len(content)))
        self._emit(ProgressEvent(0, len(content)))
        if local_path is None:
            for i in range(0, len(content), 4):
                self._emit(RawDataEvent(content[i : i + 4]))
                if fail_key:
                    self._maybe_fail(fail_key)
        else:
            local_path.write_bytes(content)
        self._emit(ProgressEvent(len(content), len(content)))

    # --- session interface ---

    async def fetch_by_reference(self, handle, key, destination):
        self.calls.append(("fetch_by_reference", handle, key, destination))
        self._maybe_fail(handle)
        if (handle, key) not in self.files:
            raise TransferError("File not found", ErrorKind.NOT_FOUND)
        name, content = self.files[(handle, key)]
        if destination is None:
            self._transfer(name, content, None, fail_key=f"midway {handle}")
            return
        target = Path(destination)
        if target.is_dir():
            target = target / name
        self._transfer(name, content, target)

    async def fetch_object(self, local_path, remote_path):
        self.calls.append(("fetch_object", local_path, remote_path))
        self._maybe_fail(remote_path)
        content = self._contents[remote_path]
        self._transfer(remote_path.rsplit("/", 1)[-1], content, Path(local_path))

    async def open_shared_folder(self, handle, key):
        self.calls.append(("open_shared_folder", handle, key))
        self._maybe_fail(handle)
        if (handle, key) not in self.folders:
            raise TransferError("Folder not found", ErrorKind.NOT_FOUND)
        self._root = self.folders[(handle, key)]

    def list_root(self):
        roots = [self._root] if self._root else []
        return roots + self.extra_roots

    def list_children(self, node):
        self._maybe_fail(f"list {self._paths[node.handle]}")
        return list(self._children.get(node.handle, []))

    def node_path(self, node):
        return self._paths[node.handle]

    def subscribe_status(self, callback):
        self.subscriptions += 1
        self._callback = callback

    async def close(self):
        self.closed = True


def make_session(config) -> FakeSession:
    """Session factory importable as 'conftest:make_session'."""
    return FakeSession()


async def make_session_async(config) -> FakeSession:
    return FakeSession()


def make_broken_session(config):
    raise RuntimeError("backend unavailable")


@pytest.fixture
def session() -> FakeSession:
    """Provide an empty fake session."""
    return FakeSession()


@pytest.fixture
def config(tmp_path) -> DownloadConfig:
    """Download config writing into a temporary directory, without backoff waits."""
    return DownloadConfig(path=str(tmp_path), initial_backoff=0.0, no_progress=True)


@pytest.fixture
def quiet_console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False)


@pytest.fixture
def reporter(quiet_console) -> ProgressReporter:
    return ProgressReporter(quiet_console, show_progress=False)
