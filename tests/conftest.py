from __future__ import annotations

from datetime import timedelta

import pytest

from admission.security.rate_limiter import SlidingWindowRateLimiter

MAX_REQUESTS = 10
WINDOW = timedelta(minutes=1)
WINDOW_MS = 60_000
INITIAL_TIME_MS = 1678886400000  # 2023-03-15T13:20:00Z


class FakeClock:
    """Manually driven millisecond clock."""

    def __init__(self, now_ms: int = INITIAL_TIME_MS) -> None:
        self.now_ms = now_ms
        self.calls = 0

    def now(self) -> int:
        self.calls += 1
        return self.now_ms

    def set(self, now_ms: int) -> None:
        self.now_ms = now_ms


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def limiter(clock: FakeClock) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(MAX_REQUESTS, WINDOW, clock)
