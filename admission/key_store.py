"""In-memory registry of per-key limiter state."""

from __future__ import annotations

from threading import Lock

from .domain.key_state import KeyState


class KeyStore:
    """Thread-safe map of key to :class:`KeyState`.

    The store lock only serialises structural changes to the map (insert,
    remove, snapshot). Counter mutations are guarded by each state's own lock,
    so a decision for one key never waits on another key.
    """

    def __init__(self) -> None:
        """Create an empty store owned by a single limiter."""
        self._states: dict[str, KeyState] = {}
        self._lock = Lock()

    def get(self, key: str) -> KeyState | None:
        """Return the live state for ``key`` or ``None``."""
        return self._states.get(key)

    def get_or_create(self, key: str, now: int) -> KeyState:
        """Return the state for ``key``, creating it anchored at ``now`` if absent.

        Concurrent first touches for the same key all observe the same object.
        """
        state = self._states.get(key)
        if state is not None:
            return state
        with self._lock:
            state = self._states.get(key)
            if state is None:
                state = KeyState(window_start=now)
                self._states[key] = state
            return state

    def remove(self, key: str, state: KeyState) -> bool:
        """Drop ``key`` only while it still maps to ``state``.

        Returns ``False`` when the key is absent or already points at a newer
        state, which makes repeated removal a no-op.
        """
        with self._lock:
            if self._states.get(key) is not state:
                return False
            del self._states[key]
            return True

    def snapshot(self) -> list[tuple[str, KeyState]]:
        """Return a point-in-time copy of the entries for iteration."""
        with self._lock:
            return list(self._states.items())

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, key: object) -> bool:
        return key in self._states
