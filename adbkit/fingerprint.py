"""Registry of public key fingerprints and the comments attached to them."""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyInfo:
    fingerprint: str
    comment: str


_registry: dict[str, KeyInfo] = {}
_lock = threading.Lock()


def add_key_info(fingerprint: bytes | str, comment: str) -> KeyInfo:
    """Record ``comment`` for a fingerprint; raw digest bytes are hex-encoded first."""
    if isinstance(fingerprint, (bytes, bytearray)):
        fingerprint = bytes(fingerprint).hex()
    info = KeyInfo(fingerprint=fingerprint, comment=comment)
    with _lock:
        _registry[fingerprint] = info
    return info


def get_key_info(fingerprint: str) -> KeyInfo | None:
    """Return the recorded information for ``fingerprint``, or None."""
    with _lock:
        return _registry.get(fingerprint)