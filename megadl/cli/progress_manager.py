"""
Renders transfer status events pushed by the session: a single in-place
progress line for the active file, or raw bytes on standard output in stream
mode.
"""

import logging
from typing import BinaryIO

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

from megadl.models.remote import (
    FileInfoEvent,
    ProgressEvent,
    RawDataEvent,
    StatusEvent,
)

log = logging.getLogger("megadl")


class ProgressReporter:
    """
    Status subscriber for a session, and the shared transfer context.

    The reporter is called synchronously once per status event. It keeps the
    name of the file currently being transferred, which the downloaders read
    back for their success messages. It never raises.
    """

    MAX_DESCRIPTION = 50

    def __init__(
        self,
        console: Console,
        show_progress: bool = True,
        stream: bool = False,
        output: BinaryIO | None = None,
    ):
        self.console = console
        self.show_progress = show_progress
        self.stream = stream
        self.output = output
        self.current_file: str | None = None
        self.current_size: int = 0
        # Bytes written to the output since the last reset(), across attempts.
        self.bytes_streamed: int = 0
        # First write failure on the output; later data is dropped.
        self.stream_error: OSError | None = None

        self._progress: Progress | None = None
        self._task_id: TaskID | None = None

    def __call__(self, event: StatusEvent) -> None:
        try:
            self.handle(event)
        except Exception:
            log.debug("Status callback failed", exc_info=True)

    def handle(self, event: StatusEvent) -> None:
        if isinstance(event, RawDataEvent):
            if self.stream and self.output is not None:
                self._write(event.data)
        elif isinstance(event, FileInfoEvent):
            self.current_file = event.name
            self.current_size = event.size
        elif isinstance(event, ProgressEvent):
            if self.show_progress:
                self._render(event)

    def reset(self) -> None:
        """Forgets the current file name before a new top-level transfer."""
        self.clear()
        self.current_file = None
        self.current_size = 0
        self.bytes_streamed = 0
        self.stream_error = None

    def _write(self, data: bytes) -> None:
        if self.stream_error is not None:
            return
        try:
            self.output.write(data)
            self.output.flush()
        except OSError as e:
            self.stream_error = e
            log.error(
                f"[red]ERROR: Can't write to standard output: {escape(str(e))}[/red]"
            )
            return
        self.bytes_streamed += len(data)

    def clear(self) -> None:
        """Removes the progress line, if one is displayed."""
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task_id = None

    def _make_progress(self) -> Progress:
        return Progress(
            TextColumn("[progress.description]{task.description}", justify="left"),
            BarColumn(bar_width=30),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            "•",
            TimeRemainingColumn(),
            console=self.console,
            transient=True,
            auto_refresh=False,
            redirect_stdout=False,
        )

    def _describe(self) -> str:
        name = self.current_file or "..."
        if len(name) > self.MAX_DESCRIPTION:
            name = "…" + name[-(self.MAX_DESCRIPTION - 1) :]
        return escape(name)

    def _render(self, event: ProgressEvent) -> None:
        if self._progress is None:
            self._progress = self._make_progress()
            self._progress.start()
            self._task_id = self._progress.add_task(
                self._describe(), total=event.bytes_total or None
            )
        self._progress.update(
            self._task_id,
            description=self._describe(),
            completed=event.bytes_done,
            total=event.bytes_total or None,
        )
        self._progress.refresh()
