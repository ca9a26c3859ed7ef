"""Prometheus metrics for the classroom API."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "classroom_http_requests_total",
    "HTTP requests handled, by route template and status",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "classroom_http_request_duration_seconds",
    "Time spent producing an HTTP response",
    ("method", "route"),
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

LOGIN_COUNTER = Counter(
    "classroom_logins_total",
    "Successful logins",
)

REGISTRATION_COUNTER = Counter(
    "classroom_registrations_total",
    "Accounts created, by role",
    ("role",),
)

SUBMISSION_COUNTER = Counter(
    "classroom_submissions_total",
    "Task submissions accepted",
)

ERROR_COUNTER = Counter(
    "classroom_server_errors_total",
    "Responses that ended with a 5xx status",
    ("method", "route"),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record one finished request."""

    route = route or "unknown"
    method = method or "UNKNOWN"

    REQUEST_COUNT.labels(method=method, route=route, status=str(status_code)).inc()
    REQUEST_LATENCY.labels(method=method, route=route).observe(max(duration_seconds, 0))
    if status_code >= 500:
        ERROR_COUNTER.labels(method=method, route=route).inc()


def increment_login() -> None:
    LOGIN_COUNTER.inc()


def increment_registration(role: str) -> None:
    REGISTRATION_COUNTER.labels(role=role).inc()


def increment_submission() -> None:
    SUBMISSION_COUNTER.inc()
