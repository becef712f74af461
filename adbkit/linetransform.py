"""Conversion of CRLF line endings produced by some device shells."""

from __future__ import annotations

from typing import BinaryIO


class LineTransform:
    """Turns CRLF into LF across a sequence of chunks.

    With ``auto_detect`` the first byte of the stream decides: a leading LF
    means no conversion is needed and one byte is skipped, otherwise two bytes
    are skipped and conversion stays on.
    """

    def __init__(self, auto_detect: bool = False):
        self._auto_detect = auto_detect
        self._transform_needed = True
        self._skip_bytes = 0
        self._saved_r: bytes | None = None

    def transform(self, chunk: bytes) -> bytes:
        """Convert one chunk; a trailing CR is held back until the next chunk."""
        if not chunk:
            return bytes(chunk)

        if self._auto_detect:
            if chunk[0] == 0x0A:
                self._transform_needed = False
                self._skip_bytes = 1
            else:
                self._skip_bytes = 2
            self._auto_detect = False

        if self._skip_bytes > 0:
            skip = min(len(chunk), self._skip_bytes)
            chunk = chunk[skip:]
            self._skip_bytes -= skip

        if not chunk or not self._transform_needed:
            return bytes(chunk)

        result = bytearray()
        if self._saved_r is not None:
            if chunk[0] != 0x0A:
                result += self._saved_r
            self._saved_r = None

        if chunk.endswith(b"\r"):
            self._saved_r = b"\r"
            chunk = chunk[:-1]
        result += bytes(chunk).replace(b"\r\n", b"\n")
        return bytes(result)

    def flush(self) -> bytes:
        """Return any held-back CR."""
        saved, self._saved_r = self._saved_r, None
        return saved or b""


class TransformReader:
    """A readable stream that converts line endings of another stream."""

    def __init__(self, stream: BinaryIO, auto_detect: bool = False):
        self._stream = stream
        self._transform = LineTransform(auto_detect)

    def read(self, size: int = 4096) -> bytes:
        """Return the next converted chunk, or b"" once the stream is exhausted."""
        while True:
            chunk = self._stream.read(size)
            if not chunk:
                return self._transform.flush()
            converted = self._transform.transform(chunk)
            if converted:
                return converted

    def __iter__(self):
        while chunk := self.read():
            yield chunk


class TransformWriter:
    """A writable stream that converts line endings before passing data on."""

    def __init__(self, stream, auto_detect: bool = False):
        self._stream = stream
        self._transform = LineTransform(auto_detect)

    def write(self, data: bytes) -> int:
        """Convert and forward ``data``; returns the number of input bytes consumed."""
        converted = self._transform.transform(data)
        if converted:
            self._stream.write(converted)
        return len(data)

    def close(self) -> None:
        """Write any held-back CR and close the underlying stream if it can be closed."""
        flushed = self._transform.flush()
        if flushed:
            self._stream.write(flushed)
        close = getattr(self._stream, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "TransformWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()