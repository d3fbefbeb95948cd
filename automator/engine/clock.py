"""Time sources for delayed action scheduling."""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Monotonic time source in seconds."""

    @abstractmethod
    def now(self) -> float:
        """Return the current time."""


class SystemClock(Clock):
    """Clock backed by ``time.monotonic``, the same source asyncio uses."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock(Clock):
    """Clock that only moves when advanced.

    Used to drive delayed actions without waiting on wall-clock time.
    """

    def __init__(self, start: float = 0.0):
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        """Move the clock forward.

        Args:
            seconds: Seconds to advance (non-negative)

        Returns:
            New current time
        """
        if seconds < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += seconds
        return self._now
