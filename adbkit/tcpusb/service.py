"""One ADB stream opened by a client over a transport socket."""

from __future__ import annotations

import queue
import threading
from collections import defaultdict
from typing import Any, Callable

from .packet import Command, Packet, assemble

_READ_SIZE = 16384


class ServiceError(RuntimeError):
    """A packet arrived that the service cannot accept."""


class _LoopbackPipe:
    """In-memory pipe: what is written can be read back; close ends reading."""

    def __init__(self):
        self._queue: queue.Queue[bytes | None] = queue.Queue()
        self._pending = b""
        self._closed = False

    def write(self, data: bytes) -> int:
        if self._closed:
            raise BrokenPipeError("write on closed pipe")
        if data:
            self._queue.put(bytes(data))
        return len(data)

    def read(self, size: int = -1) -> bytes:
        if not self._pending:
            chunk = self._queue.get()
            if chunk is None:
                self._queue.put(None)
                return b""
            self._pending = chunk
        if size is None or size < 0:
            size = len(self._pending)
        out, self._pending = self._pending[:size], self._pending[size:]
        return out

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put(None)


def _loopback(_service_name: str) -> _LoopbackPipe:
    return _LoopbackPipe()


class Service:
    """Relays one stream between a transport socket and a local transport.

    ``transport_factory`` receives the requested service name and returns an
    object with ``read``, ``write`` and optionally ``close``; by default data
    written to the stream is echoed back. Events: ``end`` and ``error``.
    """

    def __init__(
        self,
        client: Any,
        serial: str,
        local_id: int,
        remote_id: int,
        socket,
        transport_factory: Callable[[str], Any] | None = None,
    ):
        self.client = client
        self.serial = serial
        self.local_id = local_id
        self.remote_id = remote_id
        self._socket = socket
        self._factory = transport_factory or _loopback
        self._transport = None
        self._opened = False
        self._ended = False
        self._need_ack = False
        self._lock = threading.RLock()
        self._cond = threading.Condition(self._lock)
        self._handlers: dict[str, list[Callable[[Any], None]]] = defaultdict(list)

    @property
    def is_ended(self) -> bool:
        with self._lock:
            return self._ended

    @property
    def is_opened(self) -> bool:
        with self._lock:
            return self._opened

    def end(self) -> None:
        """Close the transport and tell the peer the stream is closed."""
        with self._cond:
            if self._ended:
                return
            self._ended = True
            close = getattr(self._transport, "close", None)
            if close is not None:
                close()
            local_id = self.local_id if self._opened else 0
            self._cond.notify_all()
            try:
                self._socket.write(assemble(Command.CLSE, local_id, self.remote_id))
            finally:
                self._emit("end", None)

    def handle(self, packet: Packet) -> None:
        """Process one packet addressed to this stream."""
        with self._cond:
            if self._ended:
                return
            if packet.command == Command.OPEN:
                self._handle_open(packet)
            elif packet.command == Command.OKAY:
                self._require_open("OKAY")
                self._need_ack = False
                self._cond.notify_all()
            elif packet.command == Command.WRTE:
                self._require_open("WRTE")
                if packet.data:
                    self._transport.write(packet.data)
                self._socket.write(assemble(Command.OKAY, self.local_id, self.remote_id))
            elif packet.command == Command.CLSE:
                self._require_open("CLSE")
                self.end()
            else:
                raise ServiceError(f"Unexpected packet {packet.command}")

    def _require_open(self, name: str) -> None:
        if not self._opened or self._transport is None:
            raise ServiceError(f"Premature {name} packet")

    def _handle_open(self, packet: Packet) -> None:
        data = packet.data or b""
        if len(data) < 1:
            raise ServiceError("empty service name")
        name = data[:-1].decode("utf-8", errors="replace")
        self._transport = self._factory(name)
        self._socket.write(assemble(Command.OKAY, self.local_id, self.remote_id))
        self._opened = True
        threading.Thread(target=self._read_loop, daemon=True).start()

    def _read_loop(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: not self._need_ack or self._ended)
                if self._ended:
                    return
                transport = self._transport
            try:
                chunk = transport.read(_READ_SIZE)
            except (OSError, ValueError) as exc:
                self._emit("error", exc)
                self.end()
                return
            if not chunk:
                self.end()
                return
            with self._cond:
                if self._ended:
                    return
                try:
                    self._socket.write(
                        assemble(Command.WRTE, self.local_id, self.remote_id, chunk)
                    )
                except OSError as exc:
                    failed = exc
                else:
                    self._need_ack = True
                    continue
            self._emit("error", failed)
            self.end()
            return

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        """Register ``handler`` for ``event``."""
        with self._lock:
            self._handlers[event].append(handler)

    def _emit(self, event: str, data: Any) -> None:
        with self._lock:
            handlers = list(self._handlers.get(event, ()))
        for handler in handlers:
            handler(data)