"""Length-prefixed framing used by the ADB host protocol and its sync sub-protocol."""

from __future__ import annotations

import re

OKAY = "OKAY"
FAIL = "FAIL"
STAT = "STAT"
LIST = "LIST"
DENT = "DENT"
RECV = "RECV"
DATA = "DATA"
DONE = "DONE"
SEND = "SEND"
QUIT = "QUIT"

_HEX_NUMBER = re.compile(r"[+-]?[0-9A-Fa-f]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class ProtocolError(ValueError):
    """Raised when data does not follow the ADB framing rules."""


def _as_text(value: str | bytes | bytearray) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1")
    return value


def decode_length(length: str | bytes) -> int:
    """Decode a hexadecimal length field into an integer."""
    text = _as_text(length)
    if not _HEX_NUMBER.fullmatch(text):
        raise ProtocolError(f"failed to decode length: invalid syntax {text!r}")
    value = int(text, 16)
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ProtocolError(f"failed to decode length: value out of range {text!r}")
    return value


def encode_length(length: int) -> str:
    """Encode a length as at least four upper-case hexadecimal digits."""
    return f"{length:04X}"


def encode_data(data: bytes | bytearray | None = None) -> bytes:
    """Prefix ``data`` with its encoded length."""
    payload = bytes(data or b"")
    return encode_length(len(payload)).encode("ascii") + payload


def decode_data(data: bytes | bytearray) -> bytes:
    """Strip the length prefix from ``data`` and return the payload it announces."""
    if len(data) < 4:
        raise ProtocolError("data too short for protocol decode")
    length = decode_length(bytes(data[:4]))
    if len(data) < 4 + length:
        raise ProtocolError(
            f"incomplete data: expected {length} bytes, got {len(data) - 4}"
        )
    return bytes(data[4 : 4 + length])


def encode_message(cmd: str, *args: str) -> bytes:
    """Join a command and its arguments with ':' and frame the result."""
    return encode_data(":".join((cmd, *args)).encode("utf-8"))


def validate_response(response: bytes | bytearray, expected: str) -> None:
    """Check that ``response`` starts with the four-letter ``expected`` reply."""
    if len(response) < 4:
        raise ProtocolError("response too short")
    got = bytes(response[:4]).decode("latin-1")
    if got != expected:
        raise ProtocolError(f"unexpected response: got {got}, want {expected}")


def format_sync(cmd: str, length: int) -> bytes:
    """Build an eight-byte sync header: four command bytes and a four-digit hex length."""
    cmd_part = cmd.encode("latin-1")[:4].ljust(4, b"\0")
    length_part = f"{length:04x}".encode("ascii")[:4].ljust(4, b"\0")
    return cmd_part + length_part


def parse_sync_response(response: bytes | bytearray) -> tuple[str, int]:
    """Split a sync header into its command and length."""
    if len(response) < 8:
        raise ProtocolError("sync response too short")
    cmd = bytes(response[:4]).decode("latin-1")
    try:
        length = decode_length(bytes(response[4:8]))
    except ProtocolError as exc:
        raise ProtocolError(f"invalid sync response length: {exc}") from exc
    return cmd, length


def format_sync_request(cmd: str, path: str) -> bytes:
    """Build a sync request carrying ``path`` as its argument."""
    encoded_path = path.encode("utf-8")
    return format_sync(cmd, len(encoded_path)) + encoded_path


def encode_string(s: str) -> bytes:
    """Frame a text string for transmission."""
    return encode_data(s.encode("utf-8"))


def decode_string(data: bytes | bytearray) -> str:
    """Decode a framed text string."""
    return decode_data(data).decode("utf-8")