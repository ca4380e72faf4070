from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock


@dataclass(slots=True)
class KeyState:
    """Two-bucket counter state for a single key.

    Every field is guarded by ``lock``. ``evicted`` is flipped by cleanup while
    holding the lock, after which the record is no longer reachable from the
    store and must not admit further requests.
    """

    window_start: int
    current_count: int = 0
    previous_count: int = 0
    evicted: bool = False
    lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def to_snapshot(self) -> KeyStateSnapshot:
        """Copy the counters; callers must hold ``lock``."""
        return KeyStateSnapshot(
            window_start=self.window_start,
            current_count=self.current_count,
            previous_count=self.previous_count,
        )


@dataclass(frozen=True, slots=True)
class KeyStateSnapshot:
    """Read-only view of a key's counters at one instant."""

    window_start: int
    current_count: int
    previous_count: int
