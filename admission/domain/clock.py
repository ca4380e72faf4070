"""Time sources consumed by the rate limiter."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Capability returning the current time in milliseconds since the epoch."""

    def now(self) -> int: ...


class SystemClock:
    """Wall-clock time source backed by :func:`time.time`."""

    def now(self) -> int:
        return int(time.time() * 1000)
