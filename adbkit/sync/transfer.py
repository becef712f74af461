"""Progress-tracking streams for sync push and pull transfers."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class TransferStats:
    bytes_transferred: int = 0


class Transfer:
    """Counts bytes written through it and notifies registered handlers.

    Events: ``progress`` (with a TransferStats) on every write, ``cancel``
    when cancelled.
    """

    def __init__(self, reader=None, writer=None):
        self.reader = reader
        self.writer = writer
        self._bytes_transferred = 0
        self._handlers: dict[str, list[Callable[[Any], None]]] = defaultdict(list)

    @property
    def stats(self) -> TransferStats:
        return TransferStats(self._bytes_transferred)

    @property
    def bytes_transferred(self) -> int:
        return self._bytes_transferred

    def write(self, data: bytes) -> int:
        """Count ``data``, report progress, and forward it to the writer if there is one."""
        self._bytes_transferred += len(data)
        self._emit("progress", self.stats)
        if self.writer is not None:
            return self.writer.write(data)
        return len(data)

    def read(self, size: int = -1) -> bytes:
        """Read from the reader; without one the stream is empty."""
        if self.reader is None:
            return b""
        return self.reader.read(size)

    def cancel(self) -> None:
        self._emit("cancel", None)

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self._handlers[event].append(handler)

    def _emit(self, event: str, data: Any) -> None:
        for handler in list(self._handlers.get(event, ())):
            handler(data)


class PullTransfer(Transfer):
    """A transfer of a file from the device."""


class PushTransfer(Transfer):
    """A transfer of a file to the device."""