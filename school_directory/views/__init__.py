"""Pydantic schemas used as views in the MVC architecture."""

from .common import FailureResponse
from .schools import (
    SCHOOL_FIELDS,
    FieldError,
    SchoolCreatedResponse,
    SchoolListResponse,
    SchoolRecord,
    SchoolSubmission,
    SchoolValidationError,
    validate_school,
)

__all__ = [
    "SCHOOL_FIELDS",
    "FailureResponse",
    "FieldError",
    "SchoolCreatedResponse",
    "SchoolListResponse",
    "SchoolRecord",
    "SchoolSubmission",
    "SchoolValidationError",
    "validate_school",
]
