"""
Process-local staleness clock.

A ``RefreshableTimer`` remembers when its owner last sampled fresh data so the
owner can decide whether a cached remote result needs re-fetching. It does no
locking of its own; owners serialize access.
"""

import time
from typing import Callable


class RefreshableTimer:
    """
    Records a sample time and reports the age of that sample in seconds.

    Args:
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._sampled_at = clock()

    def sample(self) -> None:
        """Marks 'now' as the moment of the latest fresh data."""
        self._sampled_at = self._clock()

    @property
    def age(self) -> float:
        """Seconds since the last sample (or since construction)."""
        return self._clock() - self._sampled_at

    def __repr__(self) -> str:
        return f"RefreshableTimer(age={self.age:.3f}s)"
