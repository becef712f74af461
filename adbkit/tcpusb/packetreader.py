"""Splitting a byte stream into ADB transport packets."""

from __future__ import annotations

import struct
from collections import defaultdict
from typing import Any, Callable

from .packet import Packet

_HEADER = struct.Struct("<6I")
_READ_SIZE = 16384


class PacketReaderError(ValueError):
    """A packet read from the stream failed verification."""

    message = "Packet error"

    def __init__(self, packet: Packet):
        super().__init__(self.message)
        self.packet = packet


class ChecksumError(PacketReaderError):
    """The payload does not match the checksum in the header."""

    message = "Checksum mismatch"


class MagicError(PacketReaderError):
    """The magic field is not the complement of the command."""

    message = "Magic value mismatch"


class PacketReader:
    """Reads packets from a binary stream and reports them to handlers.

    Events: ``packet`` with each Packet, ``end`` when the stream is exhausted,
    ``error`` with the exception that stopped reading.
    """

    def __init__(self, stream):
        self._stream = stream
        self._buffer = bytearray()
        self._pending: Packet | None = None
        self._handlers: dict[str, list[Callable[[Any], None]]] = defaultdict(list)

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        """Register ``handler`` for ``event``."""
        self._handlers[event].append(handler)

    def run(self) -> None:
        """Read until the stream ends or a bad packet arrives."""
        try:
            while True:
                chunk = self._stream.read(_READ_SIZE)
                if not chunk:
                    self._emit("end", None)
                    return
                self._buffer += chunk
                self._drain()
        except (ValueError, OSError) as exc:
            self._emit("error", exc)

    def _drain(self) -> None:
        while True:
            if self._pending is not None:
                packet = self._pending
                if len(self._buffer) < packet.length:
                    return
                packet.data = bytes(self._buffer[: packet.length])
                del self._buffer[: packet.length]
                self._pending = None
                if not packet.verify_checksum():
                    raise ChecksumError(packet)
                self._emit("packet", packet)
            else:
                if len(self._buffer) < _HEADER.size:
                    return
                fields = _HEADER.unpack_from(self._buffer)
                del self._buffer[: _HEADER.size]
                packet = Packet(*fields)
                if not packet.verify_magic():
                    raise MagicError(packet)
                if packet.length == 0:
                    self._emit("packet", packet)
                else:
                    self._pending = packet

    def close(self) -> None:
        """Close the underlying stream if it can be closed."""
        close = getattr(self._stream, "close", None)
        if close is not None:
            close()

    def _emit(self, event: str, data: Any) -> None:
        for handler in list(self._handlers.get(event, ())):
            handler(data)