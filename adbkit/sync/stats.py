"""File status information as reported by the sync protocol."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

S_IFMT = 0o170000
S_IFSOCK = 0o140000
S_IFLNK = 0o120000
S_IFREG = 0o100000
S_IFBLK = 0o060000
S_IFDIR = 0o040000
S_IFCHR = 0o020000
S_IFIFO = 0o010000
S_ISUID = 0o004000
S_ISGID = 0o002000
S_ISVTX = 0o001000
S_IRWXU = 0o0700
S_IRUSR = 0o0400
S_IWUSR = 0o0200
S_IXUSR = 0o0100
S_IRWXG = 0o0070
S_IRGRP = 0o0040


@dataclass
class Stats:
    """Mode, size and modification time of a remote file."""

    mode: int
    size: int
    mtime: datetime

    def _file_type(self) -> int:
        return self.mode & S_IFMT

    def is_socket(self) -> bool:
        return self._file_type() == S_IFSOCK

    def is_symlink(self) -> bool:
        return self._file_type() == S_IFLNK

    def is_regular(self) -> bool:
        return self._file_type() == S_IFREG

    def is_block(self) -> bool:
        return self._file_type() == S_IFBLK

    def is_dir(self) -> bool:
        return self._file_type() == S_IFDIR

    def is_character(self) -> bool:
        return self._file_type() == S_IFCHR

    def is_fifo(self) -> bool:
        return self._file_type() == S_IFIFO

    def is_setuid(self) -> bool:
        return (self.mode & S_ISUID) != 0

    def is_setgid(self) -> bool:
        return (self.mode & S_ISGID) != 0

    def is_sticky(self) -> bool:
        return (self.mode & S_ISVTX) != 0

    def user_permissions(self) -> int:
        return (self.mode & S_IRWXU) >> 6

    def group_permissions(self) -> int:
        return (self.mode & S_IRWXG) >> 3

    def other_permissions(self) -> int:
        return self.mode & 0o007

    def has_user_read(self) -> bool:
        return (self.mode & S_IRUSR) != 0

    def has_user_write(self) -> bool:
        return (self.mode & S_IWUSR) != 0

    def has_user_execute(self) -> bool:
        return (self.mode & S_IXUSR) != 0

    def has_group_read(self) -> bool:
        return (self.mode & S_IRGRP) != 0

    def is_file(self) -> bool:
        """True when the 0x8000 bit of the mode is set."""
        return (self.mode & 0x8000) != 0

    def permissions(self) -> int:
        """The nine rwx permission bits."""
        return self.mode & 0x1FF


@dataclass(init=False)
class Entry(Stats):
    """A named directory entry with its status."""

    name: str = ""

    def __init__(self, name: str, mode: int, size: int, mtime: datetime):
        super().__init__(mode, size, mtime)
        self.name = name

    def __str__(self) -> str:
        return self.name