"""Optional recording of all protocol traffic to a file or stream.

Recording starts at import time into ``adbkit.dump`` when the ADBKIT_DUMP
environment variable is set.
"""

from __future__ import annotations

import os
import threading

_DEFAULT_DUMP_FILE = "adbkit.dump"

_lock = threading.Lock()
_enabled = False
_file = None
_writer = None


def _open(path):
    return open(path, "ab")


if os.environ.get("ADBKIT_DUMP"):
    try:
        _file = _open(_DEFAULT_DUMP_FILE)
        _enabled = True
    except OSError:
        _file = None
        _enabled = False


def dump(data: bytes) -> None:
    """Record ``data`` if recording is on."""
    with _lock:
        if not _enabled:
            return
        target = _writer if _writer is not None else _file
        if target is not None:
            target.write(data)


def is_dump_enabled() -> bool:
    """Tell whether recording is on."""
    return _enabled


def set_dump_file(path) -> None:
    """Record into the file at ``path``, appending; raises OSError if it cannot be opened."""
    global _enabled, _file, _writer
    with _lock:
        if _file is not None:
            _file.close()
            _file = None
        try:
            _file = _open(path)
        except OSError:
            _enabled = False
            raise
        _writer = None
        _enabled = True


def dump_to_writer(writer) -> None:
    """Record into ``writer``; passing None turns recording off."""
    global _enabled, _file, _writer
    with _lock:
        if _file is not None:
            _file.close()
            _file = None
        _writer = writer
        _enabled = writer is not None


def close_dump() -> None:
    """Close any dump file and turn recording off."""
    global _enabled, _file, _writer
    with _lock:
        if _file is not None:
            _file.close()
            _file = None
        _writer = None
        _enabled = False


class DumpReader:
    """A readable stream that records everything read through it."""

    def __init__(self, stream):
        self._stream = stream

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        if data:
            dump(data)
        return data


class DumpWriter:
    """A writable stream that records everything written through it."""

    def __init__(self, stream):
        self._stream = stream

    def write(self, data: bytes):
        dump(data)
        return self._stream.write(data)