"""ADB transport packets: 24-byte little-endian header followed by an optional payload."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

_HEADER = struct.Struct("<6I")
HEADER_SIZE = _HEADER.size
_UINT32 = 0xFFFFFFFF


class Command(IntEnum):
    """Transport packet commands; each value is its four ASCII letters little-endian."""

    SYNC = 0x434E5953
    CNXN = 0x4E584E43
    OPEN = 0x4E45504F
    OKAY = 0x59414B4F
    CLSE = 0x45534C43
    WRTE = 0x45545257
    AUTH = 0x48545541


class PacketError(ValueError):
    """Raised when bytes cannot be parsed as a packet."""


def checksum(data: bytes | None) -> int:
    """Sum of the payload bytes, wrapped to 32 bits."""
    return sum(data or b"") & _UINT32


def magic(command: int) -> int:
    """Bitwise complement of the command, as a 32-bit value."""
    return ~command & _UINT32


@dataclass
class Packet:
    command: int
    arg0: int
    arg1: int
    length: int
    check: int
    magic: int
    data: bytes | None = None

    def verify_checksum(self) -> bool:
        return self.check == checksum(self.data)

    def verify_magic(self) -> bool:
        return self.magic == magic(self.command)

    def __str__(self) -> str:
        try:
            name = Command(self.command).name
        except ValueError:
            name = "UNKNOWN"
        return f"{name} arg0={self.arg0} arg1={self.arg1} length={self.length}"


def create_packet(command: int, arg0: int, arg1: int, data: bytes | None = None) -> Packet:
    """Build a packet with length, checksum and magic filled in."""
    return Packet(
        command=command,
        arg0=arg0,
        arg1=arg1,
        length=len(data or b""),
        check=checksum(data),
        magic=magic(command),
        data=data,
    )


def assemble(command: int, arg0: int, arg1: int, data: bytes | None = None) -> bytes:
    """Serialise a packet to its wire form."""
    payload = bytes(data or b"")
    header = _HEADER.pack(
        command, arg0, arg1, len(payload), checksum(payload), magic(command)
    )
    return header + payload


def swap32(n: int) -> int:
    """Reverse the byte order of a 32-bit value."""
    return (
        ((n & 0xFF) << 24)
        | ((n & 0xFF00) << 8)
        | ((n & 0xFF0000) >> 8)
        | ((n & 0xFF000000) >> 24)
    )


def parse(data: bytes) -> Packet:
    """Parse one packet from the start of ``data``."""
    if len(data) < HEADER_SIZE:
        raise PacketError("packet too short")
    command, arg0, arg1, length, check, packet_magic = _HEADER.unpack_from(data)
    payload = None
    if length > 0:
        if len(data) < HEADER_SIZE + length:
            raise PacketError("packet incomplete")
        payload = bytes(data[HEADER_SIZE : HEADER_SIZE + length])
    return Packet(command, arg0, arg1, length, check, packet_magic, payload)