"""Telemetry helpers and metrics."""

from .metrics import (
    CREW_ASSIGNMENT_COUNTER,
    CREW_UNAVAILABLE_COUNTER,
    ERROR_COUNTER,
    LOGIN_COUNTER,
    REGISTRATION_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    increment_crew_assignment,
    increment_crew_unavailable,
    increment_login,
    increment_registration,
    observe_request,
)

__all__ = [
    "CREW_ASSIGNMENT_COUNTER",
    "CREW_UNAVAILABLE_COUNTER",
    "ERROR_COUNTER",
    "LOGIN_COUNTER",
    "REGISTRATION_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "increment_crew_assignment",
    "increment_crew_unavailable",
    "increment_login",
    "increment_registration",
    "observe_request",
]
