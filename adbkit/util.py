"""Small file and formatting helpers."""

from __future__ import annotations

import os
import shutil
import stat

from .parser import Parser

_UNIT = 1024
_PREFIXES = "KMGTPE"


def read_all(stream) -> bytes:
    """Read a binary stream until it ends."""
    return Parser(stream).read_all()


def copy_file(src, dst) -> None:
    """Copy the contents of ``src`` into ``dst``, creating or truncating it."""
    with open(src, "rb") as source, open(dst, "wb") as target:
        shutil.copyfileobj(source, target)


def copy_dir(src, dst) -> None:
    """Recursively copy directory ``src`` to ``dst``."""
    mode = stat.S_IMODE(os.stat(src).st_mode)
    os.makedirs(dst, mode=mode, exist_ok=True)
    with os.scandir(src) as entries:
        for entry in entries:
            target = os.path.join(dst, entry.name)
            if entry.is_dir(follow_symlinks=False):
                copy_dir(entry.path, target)
            else:
                copy_file(entry.path, target)


def format_size(size: int) -> str:
    """Format a byte count with binary units, e.g. ``1.5 KB``."""
    if size < _UNIT:
        return f"{size} B"
    div, exp = _UNIT, 0
    n = size // _UNIT
    while n >= _UNIT:
        div *= _UNIT
        exp += 1
        n //= _UNIT
    return f"{size / div:.1f} {_PREFIXES[exp]}B"


def is_valid_path(path: str) -> bool:
    """A path is valid when it is non-empty and contains no NUL character."""
    return bool(path) and "\0" not in path


def sanitize_path(path: str) -> str:
    """Return the shortest equivalent form of ``path``."""
    cleaned = os.path.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned