"""FastAPI application wiring for the admission service."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .api.routes import router as v1_router
from .config import get_settings
from .core.logging import configure_logging
from .metrics import ADMISSION_CLEANUPS, TRACKED_KEYS
from .security.rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)

settings = get_settings()


async def run_cleanup_loop(limiter: SlidingWindowRateLimiter, interval_seconds: float) -> None:
    """Evict idle keys every ``interval_seconds`` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await asyncio.to_thread(limiter.cleanup_expired_entries)
        except Exception:
            logger.exception("rate limiter cleanup pass failed")
            continue
        ADMISSION_CLEANUPS.inc()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the limiter and run its cleanup schedule for the app lifecycle."""
    settings.validate()
    configure_logging(settings.log_level)
    limiter = SlidingWindowRateLimiter(
        max_requests=settings.rate_limit_requests,
        window_size=settings.rate_limit_window,
    )
    app.state.rate_limiter = limiter
    TRACKED_KEYS.set_function(lambda: limiter.tracked_keys)
    logger.info(
        "rate limiter allows %d requests per %ds, cleanup every %ss",
        settings.rate_limit_requests,
        settings.rate_limit_window_seconds,
        settings.cleanup_interval_seconds,
    )
    cleanup_task = asyncio.create_task(
        run_cleanup_loop(limiter, settings.cleanup_interval_seconds)
    )
    try:
        yield
    finally:
        cleanup_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup_task


app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)


@app.get("/healthz", tags=["health"])
def healthz() -> dict[str, str]:
    """Return a minimal readiness indicator used by orchestration systems."""
    return {"status": "ok"}


app.include_router(v1_router)


@app.get("/metrics")
def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
