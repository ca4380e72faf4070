"""Per-key sliding window counter admission control."""

from .domain.clock import Clock, SystemClock
from .domain.errors import ConfigurationError
from .domain.key_state import KeyStateSnapshot
from .security.rate_limiter import SlidingWindowRateLimiter

__all__ = [
    "Clock",
    "ConfigurationError",
    "KeyStateSnapshot",
    "SlidingWindowRateLimiter",
    "SystemClock",
]
