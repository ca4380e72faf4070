"""In-memory sliding window counter rate limiter implementation."""

from __future__ import annotations

import logging
import math
from datetime import timedelta

from ..domain.clock import Clock, SystemClock
from ..domain.errors import ConfigurationError
from ..domain.key_state import KeyState, KeyStateSnapshot
from ..key_store import KeyStore

logger = logging.getLogger(__name__)

_ONE_MS = timedelta(milliseconds=1)


def weighted_count(previous: int, current: int, elapsed_ms: int, window_ms: int) -> int:
    """Estimate the requests inside the trailing window ending now.

    The previous bucket decays linearly over the current window and its
    contribution is truncated, not rounded.
    """
    weight = max(0.0, 1.0 - elapsed_ms / window_ms)
    return math.floor(previous * weight) + current


class SlidingWindowRateLimiter:
    """Thread-safe two-bucket approximation of a sliding window limit.

    Each key keeps the count for its current window and for the window right
    before it. Windows are anchored at the key's first request and advance in
    whole multiples of the window size.
    """

    def __init__(
        self,
        max_requests: int,
        window_size: timedelta,
        clock: Clock | None = None,
        *,
        store: KeyStore | None = None,
    ) -> None:
        """Validate limits and attach the per-key store.

        Args:
            max_requests: Requests admitted per window; must be positive.
            window_size: Length of one window; must be at least one millisecond.
            clock: Time source in milliseconds. Defaults to :class:`SystemClock`.
            store: Empty store owned by this limiter. Defaults to a new :class:`KeyStore`.

        Raises:
            ConfigurationError: When either limit is not positive.
        """
        if max_requests <= 0:
            raise ConfigurationError(f"max_requests must be positive, got {max_requests}")
        window_ms = window_size // _ONE_MS
        if window_ms <= 0:
            raise ConfigurationError(f"window_size must be at least 1ms, got {window_size}")
        self._max_requests = max_requests
        self._window_ms = window_ms
        self._clock = clock if clock is not None else SystemClock()
        self._store = store if store is not None else KeyStore()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_ms(self) -> int:
        return self._window_ms

    @property
    def tracked_keys(self) -> int:
        """Number of keys currently holding state."""
        return len(self._store)

    def allow_request(self, key: str) -> bool:
        """Return ``True`` when the request for ``key`` is within the limit.

        An admitted request is counted in the key's current window; a denied
        one leaves the state untouched.
        """
        if not key:
            raise ValueError("key must be a non-empty string")
        now = self._clock.now()
        state = self._store.get_or_create(key, now)
        with state.lock:
            if not state.evicted:
                return self._decide(state, now)
        # cleanup reclaimed the state between lookup and lock acquisition
        logger.warning("state for key %r evicted during decision, denying request", key)
        return False

    def _decide(self, state: KeyState, now: int) -> bool:
        """Shift windows if needed and apply the weighted check; caller holds the lock."""
        windows_passed = (now - state.window_start) // self._window_ms
        if windows_passed >= 1:
            if windows_passed >= 2:
                state.previous_count = 0
            else:
                state.previous_count = state.current_count
            state.current_count = 0
            state.window_start += windows_passed * self._window_ms

        estimate = weighted_count(
            state.previous_count,
            state.current_count,
            now - state.window_start,
            self._window_ms,
        )
        if estimate < self._max_requests:
            state.current_count += 1
            return True
        return False

    def cleanup_expired_entries(self) -> None:
        """Evict keys whose window started more than one window ago.

        The eviction decision for each key is taken under that key's lock, so
        an in-flight request either completes first or observes the eviction
        and fails closed.
        """
        cutoff = self._clock.now() - self._window_ms
        evicted = 0
        for key, state in self._store.snapshot():
            with state.lock:
                if state.evicted or state.window_start >= cutoff:
                    continue
                state.evicted = True
                self._store.remove(key, state)
            evicted += 1
        if evicted:
            logger.debug("evicted %d idle rate limit keys, %d remain", evicted, len(self._store))

    def snapshot(self, key: str) -> KeyStateSnapshot | None:
        """Return a consistent copy of the counters for ``key`` if it is tracked."""
        state = self._store.get(key)
        if state is None:
            return None
        with state.lock:
            if state.evicted:
                return None
            return state.to_snapshot()
