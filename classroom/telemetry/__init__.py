"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    LOGIN_COUNTER,
    REGISTRATION_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SUBMISSION_COUNTER,
    increment_login,
    increment_registration,
    increment_submission,
    observe_request,
)

__all__ = [
    "ERROR_COUNTER",
    "LOGIN_COUNTER",
    "REGISTRATION_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SUBMISSION_COUNTER",
    "increment_login",
    "increment_registration",
    "increment_submission",
    "observe_request",
]
