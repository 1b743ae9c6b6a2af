"""Millisecond wall-clock timer."""

from __future__ import annotations

import time
from collections.abc import Callable

from tracekit.common import time_string


class Timer:
    """Measures elapsed time in whole milliseconds."""

    def __init__(self, clock: Callable[[], int] = time.monotonic_ns) -> None:
        self._clock = clock
        self._start = 0
        self.reset()

    def reset(self) -> None:
        """Restart the timer from now."""
        self._start = self._clock()

    def elapsed(self) -> float:
        """Milliseconds since the last reset."""
        return float((self._clock() - self._start) // 1_000_000)

    def elapsed_string(self, precise: bool = False) -> str:
        """Elapsed time as a human-readable string."""
        return time_string(self.elapsed(), precise)

    def lap(self) -> float:
        """Milliseconds since the last reset, then reset."""
        now = self._clock()
        duration = float((now - self._start) // 1_000_000)
        self._start = now
        return duration

    def lap_string(self, precise: bool = False) -> str:
        """Like lap(), as a human-readable string."""
        return time_string(self.lap(), precise)