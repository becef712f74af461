"""Parsing of ADB-generated RSA public keys."""

from __future__ import annotations

import base64
import binascii
import hashlib
import struct
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .fingerprint import add_key_info

_SUPPORTED_EXPONENTS = (3, 65537)


class PublicKeyError(ValueError):
    """Raised when data is not a valid ADB public key."""


@dataclass(frozen=True)
class AdbPublicKey:
    """An RSA public key together with its ADB fingerprint and comment."""

    n: int
    e: int
    fingerprint: str
    comment: str = ""

    def public_key(self) -> rsa.RSAPublicKey:
        """Return the key as a cryptography RSA public key."""
        try:
            return rsa.RSAPublicNumbers(self.e, self.n).public_key()
        except ValueError as exc:
            raise PublicKeyError(f"invalid RSA key: {exc}") from exc


def parse_public_key(data: bytes | str) -> AdbPublicKey:
    """Parse base64 key data, optionally followed by a NUL and a comment."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data:
        raise PublicKeyError("invalid public key: empty data")

    parts = bytes(data).split(b"\0")
    encoded = parts[0].replace(b"\r", b"").replace(b"\n", b"")
    try:
        raw = base64.b64decode(encoded, validate=True)
    except binascii.Error as exc:
        raise PublicKeyError(f"failed to decode base64: {exc}") from exc

    comment = ""
    if len(parts) > 1:
        comment = parts[1].decode("utf-8", errors="replace").strip()
    return _from_struct(raw, comment)


def _from_struct(raw: bytes, comment: str) -> AdbPublicKey:
    if len(raw) < 4:
        raise PublicKeyError("invalid public key")
    (words,) = struct.unpack_from("<I", raw)
    expected = 4 + 4 + words * 4 + words * 4 + 4
    if len(raw) != expected:
        raise PublicKeyError("invalid public key length")

    offset = 8
    n = int.from_bytes(raw[offset : offset + words * 4], "little")
    offset += words * 8
    (e,) = struct.unpack_from("<I", raw, offset)
    if e not in _SUPPORTED_EXPONENTS:
        raise PublicKeyError(
            f"invalid exponent {e}, only 3 and 65537 are supported"
        )

    fingerprint = hashlib.md5(raw).hexdigest()
    add_key_info(fingerprint, comment)
    return AdbPublicKey(n=n, e=e, fingerprint=fingerprint, comment=comment)


def public_key_to_pem(key: AdbPublicKey) -> str:
    """Encode the key as a PEM SubjectPublicKeyInfo block."""
    return (
        key.public_key()
        .public_bytes(
            serialization.Encoding.PEM,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode("ascii")
    )


def public_key_to_openssh(key: AdbPublicKey, comment: str = "") -> str:
    """Encode the key as an OpenSSH public key line with an optional comment."""
    line = (
        key.public_key()
        .public_bytes(
            serialization.Encoding.OpenSSH,
            serialization.PublicFormat.OpenSSH,
        )
        .decode("ascii")
    )
    return f"{line} {comment}" if comment else line