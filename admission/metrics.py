"""Prometheus metrics for the admission service."""

from __future__ import annotations

from prometheus_client import Counter, Gauge

ADMISSION_DECISIONS = Counter(
    "admission_decisions_total",
    "Admission decisions taken by the rate limiter",
    ["outcome"],
)
ADMISSION_CLEANUPS = Counter(
    "admission_cleanup_runs_total",
    "Cleanup passes over idle rate limit keys",
)
TRACKED_KEYS = Gauge(
    "admission_tracked_keys",
    "Keys currently holding rate limit state",
)
