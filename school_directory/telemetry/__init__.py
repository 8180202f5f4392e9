"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    IMAGE_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SUBMISSION_COUNTER,
    observe_request,
    record_image,
    record_submission,
)

__all__ = [
    "ERROR_COUNTER",
    "IMAGE_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SUBMISSION_COUNTER",
    "observe_request",
    "record_image",
    "record_submission",
]
