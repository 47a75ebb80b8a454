from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Wall-clock abstraction.

    The session engine only takes timestamp snapshots through this interface,
    so tests can substitute a fake clock and control elapsed time.
    """

    def now(self) -> float:
        """Return seconds since the epoch."""


class RealClock:
    """Production clock backed by time.time()."""

    def now(self) -> float:
        return time.time()
