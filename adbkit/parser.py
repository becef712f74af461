"""Reading ADB replies from a binary stream."""

from __future__ import annotations

import re
from typing import BinaryIO, Pattern

from .protocol import decode_length

_CHUNK = 65536


class FailError(Exception):
    """The server answered FAIL with a message."""

    def __init__(self, message: str):
        super().__init__(f"Failure: '{message}'")
        self.message = message


class PrematureEOFError(EOFError):
    """The stream ended before the requested number of bytes arrived."""

    def __init__(self, missing_bytes: int):
        super().__init__(
            f"Premature end of stream, needed {missing_bytes} more bytes"
        )
        self.missing_bytes = missing_bytes


class UnexpectedDataError(ValueError):
    """The stream held something other than what was expected."""

    def __init__(self, unexpected: str, expected: str):
        super().__init__(f"Unexpected '{unexpected}', was expecting {expected}")
        self.unexpected = unexpected
        self.expected = expected


class Parser:
    """Reads fixed-size fields, framed values and lines from a binary stream."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self.ended = False

    def end(self) -> None:
        """Close the underlying stream once."""
        if self.ended:
            return
        self.ended = True
        close = getattr(self._stream, "close", None)
        if close is not None:
            close()

    def raw(self) -> BinaryIO:
        """Return the underlying stream."""
        return self._stream

    def read_all(self) -> bytes:
        """Read until the stream ends."""
        parts = []
        while chunk := self._stream.read(_CHUNK):
            parts.append(chunk)
        self.ended = True
        return b"".join(parts)

    def read_ascii(self, length: int) -> str:
        """Read ``length`` bytes as text."""
        return self.read_bytes(length).decode("latin-1")

    def read_bytes(self, length: int) -> bytes:
        """Read exactly ``length`` bytes or raise PrematureEOFError."""
        if length == 0:
            return b""
        buffer = bytearray()
        while len(buffer) < length:
            chunk = self._stream.read(length - len(buffer))
            if not chunk:
                raise PrematureEOFError(length - len(buffer))
            buffer += chunk
        return bytes(buffer)

    def read_byte_flow(self, length: int, target) -> None:
        """Copy exactly ``length`` bytes into ``target`` as they arrive."""
        remaining = length
        while remaining > 0:
            chunk = self._stream.read(min(remaining, _CHUNK))
            if not chunk:
                raise PrematureEOFError(remaining)
            target.write(chunk)
            remaining -= len(chunk)

    def read_error(self) -> FailError:
        """Read a framed FAIL message and return it as a FailError."""
        return FailError(self.read_value().decode("utf-8", errors="replace"))

    def read_value(self) -> bytes:
        """Read a value prefixed with its four-digit hex length."""
        length = decode_length(self.read_ascii(4))
        return self.read_bytes(length)

    def read_until(self, code: int) -> bytes:
        """Read up to the byte ``code``; the delimiter is consumed but not returned."""
        buffer = bytearray()
        while True:
            byte = self.read_bytes(1)
            if byte[0] == code:
                return bytes(buffer)
            buffer += byte

    def search_line(self, pattern: str | Pattern[str]) -> re.Match[str]:
        """Read lines until one matches ``pattern`` and return the match."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        while True:
            line = self.read_line().decode("utf-8", errors="replace")
            match = regex.search(line)
            if match is not None:
                return match

    def read_line(self) -> bytes:
        """Read one line without its trailing newline or carriage return."""
        line = self.read_until(0x0A)
        if line.endswith(b"\r"):
            line = line[:-1]
        return line

    def unexpected(self, data: bytes | str, expected: str) -> UnexpectedDataError:
        """Build the error for data that was not what the caller expected."""
        text = data.decode("latin-1") if isinstance(data, (bytes, bytearray)) else data
        return UnexpectedDataError(text, expected)