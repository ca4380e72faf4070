"""Error types raised by the admission domain."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when limiter or service settings are out of range."""
