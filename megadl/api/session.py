"""
The interface a remote session backend must provide.

Authentication, request signing, chunked transfer and decryption all live in
the backend. This package only drives a session through the calls below.
"""

from typing import Callable, Protocol, runtime_checkable

from megadl.models.remote import RemoteNode, StatusEvent

StatusCallback = Callable[[StatusEvent], None]


@runtime_checkable
class MegaSession(Protocol):
    """
    A live session against the remote storage.

    Failures are reported by raising ``megadl.exceptions.TransferError`` with
    an ``ErrorKind``; raw aiohttp, timeout and connection errors are also
    accepted and treated as network failures.
    """

    async def fetch_by_reference(
        self, handle: str, key: str, destination: str | None
    ) -> None:
        """
        Downloads an exported file.

        ``destination`` is a local directory or file name; None streams the
        content as RawDataEvent status events instead of writing a file.
        """
        ...

    async def fetch_object(self, local_path: str, remote_path: str) -> None:
        """Downloads the node at ``remote_path`` of the opened folder to ``local_path``."""
        ...

    async def open_shared_folder(self, handle: str, key: str) -> None:
        """Loads the filesystem of an exported folder into the session."""
        ...

    def list_root(self) -> list[RemoteNode]:
        """Top-level nodes of the opened folder."""
        ...

    def list_children(self, node: RemoteNode) -> list[RemoteNode]:
        ...

    def node_path(self, node: RemoteNode) -> str:
        """Absolute remote path of ``node``, as accepted by fetch_object."""
        ...

    def subscribe_status(self, callback: StatusCallback) -> None:
        """Registers the status callback, replacing any previous one."""
        ...

    async def close(self) -> None:
        ...
