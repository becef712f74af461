"""CPU load sampling from /proc/stat."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from typing import Callable

_FIELDS = (
    "user",
    "nice",
    "system",
    "idle",
    "iowait",
    "irq",
    "softirq",
    "steal",
    "guest",
    "guest_nice",
)
_UINT64 = 2**64 - 1
_DIGITS = re.compile(r"[0-9]+")


class ProcStatError(ValueError):
    """Raised for /proc/stat content that cannot be parsed."""


@dataclass
class CpuStats:
    """Cumulative tick counters of one CPU line."""

    line: str
    user: int = 0
    nice: int = 0
    system: int = 0
    idle: int = 0
    iowait: int = 0
    irq: int = 0
    softirq: int = 0
    steal: int = 0
    guest: int = 0
    guest_nice: int = 0
    total: int = 0


@dataclass
class CpuLoad:
    """Percentages of ticks spent in each state between two samples."""

    user: int = 0
    nice: int = 0
    system: int = 0
    idle: int = 0
    iowait: int = 0
    irq: int = 0
    softirq: int = 0
    steal: int = 0
    guest: int = 0
    guest_nice: int = 0
    total: int = 0


def _parse_uint(text: str) -> int:
    if not _DIGITS.fullmatch(text):
        raise ValueError(f"invalid number {text!r}")
    value = int(text)
    if value > _UINT64:
        raise ValueError(f"value out of range {text!r}")
    return value


class ProcStat:
    """Samples /proc/stat periodically and reports per-CPU load to ``on_load``."""

    def __init__(
        self,
        interval: float = 1.0,
        path: str = "/proc/stat",
        on_load: Callable[[dict[str, CpuLoad]], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ):
        self.interval = interval
        self.path = path
        self.on_load = on_load
        self.on_error = on_error
        self.stats: dict[str, CpuStats] = {}
        self.ignore: dict[str, str] = {}
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    def start(self) -> None:
        """Begin periodic sampling and take a first sample at once."""
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        self.update()

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            self.update()

    def stop(self) -> None:
        """Stop periodic sampling."""
        self._stopped.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def update(self) -> None:
        """Read the stat file and process it; read failures go to ``on_error``."""
        try:
            with open(self.path, encoding="utf-8") as handle:
                data = handle.read()
        except OSError as exc:
            self._error(exc)
            return
        self.parse(data)

    def parse(self, data: str) -> None:
        """Process one snapshot of /proc/stat content."""
        with self._lock:
            new_stats: dict[str, CpuStats] = {}
            for line in data.splitlines():
                if not line.startswith("cpu"):
                    continue
                fields = line.split()
                if len(fields) < 11:
                    continue
                cpu_id = fields[0]
                if self.ignore.get(cpu_id) == line:
                    continue
                try:
                    values = [_parse_uint(field) for field in fields[1:11]]
                except ValueError as exc:
                    self._error(ProcStatError(f"failed to parse CPU data: {exc}"))
                    return
                new_stats[cpu_id] = CpuStats(
                    line, *values, total=sum(values) & _UINT64
                )
            self._calculate_load(new_stats)

    def _calculate_load(self, new_stats: dict[str, CpuStats]) -> None:
        loads: dict[str, CpuLoad] = {}
        found = False
        for cpu_id, current in list(new_stats.items()):
            previous = self.stats.get(cpu_id)
            if previous is None:
                continue
            ticks = (current.total - previous.total) & _UINT64
            if ticks > 0:
                found = True
                scale = 100 / ticks
                loads[cpu_id] = CpuLoad(
                    **{
                        name: int(
                            scale
                            * ((getattr(current, name) - getattr(previous, name)) & _UINT64)
                        )
                        for name in _FIELDS
                    },
                    total=100,
                )
            else:
                self.ignore[cpu_id] = current.line
                del new_stats[cpu_id]

        if found and self.on_load is not None:
            self.on_load(loads)
        self.stats = new_stats

    def _error(self, exc: Exception) -> None:
        if self.on_error is not None:
            self.on_error(exc)