from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
import os

from .domain.errors import ConfigurationError


@dataclass(frozen=True)
class Settings:
    """Runtime configuration values exposed to FastAPI components."""

    app_name: str = os.getenv("APP_NAME", "admission-service")
    version: str = "0.1.0"
    rate_limit_requests: int = int(os.getenv("RATE_LIMIT_REQUESTS", "20"))
    rate_limit_window_seconds: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
    cleanup_interval_seconds: float = float(os.getenv("CLEANUP_INTERVAL_SECONDS", "60"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def rate_limit_window(self) -> timedelta:
        return timedelta(seconds=self.rate_limit_window_seconds)

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` for values the service cannot run with."""
        if self.rate_limit_requests <= 0:
            raise ConfigurationError("RATE_LIMIT_REQUESTS must be positive")
        if self.rate_limit_window_seconds <= 0:
            raise ConfigurationError("RATE_LIMIT_WINDOW_SECONDS must be positive")
        if self.cleanup_interval_seconds <= 0:
            raise ConfigurationError("CLEANUP_INTERVAL_SECONDS must be positive")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings instance for the running process."""
    return Settings()
