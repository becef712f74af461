"""A counter that wraps back to its minimum after reaching its maximum."""

from __future__ import annotations


class RollingCounter:
    """Yields values in (minimum, maximum], wrapping around when maximum is reached.

    A minimum of 0 is treated as 1.
    """

    def __init__(self, maximum: int, minimum: int = 0):
        if minimum == 0:
            minimum = 1
        self._max = maximum
        self._min = minimum
        self._now = minimum

    def next(self) -> int:
        """Advance and return the new value."""
        if self._now >= self._max:
            self._now = self._min
        self._now += 1
        return self._now

    def __iter__(self):
        return self

    def __next__(self) -> int:
        return self.next()

    def reset(self) -> None:
        """Return to the minimum."""
        self._now = self._min

    @property
    def current(self) -> int:
        return self._now

    @property
    def maximum(self) -> int:
        return self._max

    @maximum.setter
    def maximum(self, value: int) -> None:
        self._max = value
        if self._now > value:
            self._now = self._min

    @property
    def minimum(self) -> int:
        return self._min

    @minimum.setter
    def minimum(self, value: int) -> None:
        self._min = value
        if self._now < value:
            self._now = value