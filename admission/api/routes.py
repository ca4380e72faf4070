"""HTTP route definitions for the admission service."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from ..domain.key_state import KeyStateSnapshot
from ..metrics import ADMISSION_CLEANUPS, ADMISSION_DECISIONS
from ..security.rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1")


class AdmissionRequest(BaseModel):
    """Payload naming the key a request is charged against."""

    key: str = Field(..., min_length=1)


class AdmissionResponse(BaseModel):
    """Returned when the request was admitted."""

    key: str
    allowed: bool = True


class KeyStateResponse(BaseModel):
    """Serialised representation of a key's counters."""

    key: str
    window_start: int
    current_count: int
    previous_count: int

    @classmethod
    def from_domain(cls, key: str, snapshot: KeyStateSnapshot) -> "KeyStateResponse":
        """Build a response model from a limiter snapshot."""
        return cls(
            key=key,
            window_start=snapshot.window_start,
            current_count=snapshot.current_count,
            previous_count=snapshot.previous_count,
        )


class CleanupResponse(BaseModel):
    tracked_keys: int


def get_rate_limiter(request: Request) -> SlidingWindowRateLimiter:
    """Resolve the limiter stored on the FastAPI application state."""
    limiter: SlidingWindowRateLimiter = request.app.state.rate_limiter
    return limiter


@router.post("/admissions", response_model=AdmissionResponse)
def admit(
    payload: AdmissionRequest,
    response: Response,
    limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
) -> AdmissionResponse:
    """Charge one request against ``key`` and reject it with 429 when over the limit."""
    limit_header = {"X-RateLimit-Limit": str(limiter.max_requests)}
    if not limiter.allow_request(payload.key):
        ADMISSION_DECISIONS.labels(outcome="denied").inc()
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="rate limited",
            headers=limit_header,
        )
    ADMISSION_DECISIONS.labels(outcome="admitted").inc()
    response.headers.update(limit_header)
    return AdmissionResponse(key=payload.key)


@router.post("/admissions/cleanup", response_model=CleanupResponse)
def cleanup(
    limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
) -> CleanupResponse:
    """Run one eviction pass over idle keys."""
    limiter.cleanup_expired_entries()
    ADMISSION_CLEANUPS.inc()
    logger.info("manual cleanup completed, %d keys tracked", limiter.tracked_keys)
    return CleanupResponse(tracked_keys=limiter.tracked_keys)


@router.get("/admissions/{key}", response_model=KeyStateResponse)
def get_key_state(
    key: str,
    limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
) -> KeyStateResponse:
    """Return the stored counters for ``key``."""
    snapshot = limiter.snapshot(key)
    if snapshot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="key not tracked")
    return KeyStateResponse.from_domain(key, snapshot)
