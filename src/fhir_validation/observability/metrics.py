"""Prometheus metrics for remote resource validation.

Key Responsibilities:
    - Count validation calls by outcome
    - Track the latency of remote validation invocations

Collaborators:
    - Upstream: :class:`~fhir_validation.validation.remote.RemoteValidator`
    - Downstream: Prometheus scrape endpoints exposed by the host service

Thread Safety:
    - Thread-safe: Prometheus client metrics use atomic updates
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from time import perf_counter

import structlog
from prometheus_client import Counter, Histogram

from fhir_validation.config.settings import get_settings

logger = structlog.get_logger(__name__)

OUTCOME_VALID = "valid"
OUTCOME_INVALID = "invalid"
OUTCOME_INVOCATION_FAILED = "invocation_failed"
OUTCOME_MALFORMED_RESPONSE = "malformed_response"

VALIDATION_REQUESTS_TOTAL = Counter(
    "fhir_validation_requests_total",
    "Total number of remote validation calls",
    ["outcome"],
)

VALIDATION_DURATION_SECONDS = Histogram(
    "fhir_validation_duration_seconds",
    "Duration of remote validation function invocations",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 25.0, 30.0],
)


_settings_error_logged = False


def _metrics_enabled() -> bool:
    """Return the configured metrics toggle, defaulting to enabled.

    Broken settings leave metrics on; the failure is logged once per process.
    """
    global _settings_error_logged
    try:
        return get_settings().metrics.enabled
    except (RuntimeError, ValueError) as exc:
        if not _settings_error_logged:
            _settings_error_logged = True
            logger.warning("metrics.settings_unavailable", error=str(exc))
        return True


def record_validation_outcome(outcome: str) -> None:
    """Increment the outcome counter unless metrics are disabled."""
    if _metrics_enabled():
        VALIDATION_REQUESTS_TOTAL.labels(outcome=outcome).inc()


@contextmanager
def observe_invocation() -> Iterator[None]:
    """Record the wall time of the wrapped remote invocation."""
    start = perf_counter()
    try:
        yield
    finally:
        if _metrics_enabled():
            VALIDATION_DURATION_SECONDS.observe(perf_counter() - start)


__all__ = [
    "OUTCOME_INVALID",
    "OUTCOME_INVOCATION_FAILED",
    "OUTCOME_MALFORMED_RESPONSE",
    "OUTCOME_VALID",
    "VALIDATION_DURATION_SECONDS",
    "VALIDATION_REQUESTS_TOTAL",
    "observe_invocation",
    "record_validation_outcome",
]
