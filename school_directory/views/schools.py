"""Pydantic schemas for school records.

``SchoolSubmission`` is the single source of field rules. The HTTP handler
and the desktop client both run it through :func:`validate_school`, so the
two sides reject exactly the same input.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

SCHOOL_FIELDS = ("name", "address", "city", "state", "contact", "email_id")

_MESSAGES: dict[tuple[str, str], str] = {
    ("name", "string_too_short"): "School name is required",
    ("name", "string_too_long"): "Name too long",
    ("address", "string_too_short"): "Address is required",
    ("address", "string_too_long"): "Address too long",
    ("city", "string_too_short"): "City is required",
    ("city", "string_too_long"): "City name too long",
    ("state", "string_too_short"): "State is required",
    ("state", "string_too_long"): "State name too long",
    ("contact", "string_too_short"): "Contact number must be at least 10 digits",
    ("contact", "string_too_long"): "Contact number too long",
    ("contact", "string_pattern_mismatch"): "Contact number must contain only digits",
    ("email_id", "string_too_short"): "Email is required",
    ("email_id", "string_too_long"): "Email too long",
    ("email_id", "value_error"): "Invalid email format",
}


class FieldError(BaseModel):
    """A single rejected field and the reason."""

    field: str
    message: str


class SchoolValidationError(ValueError):
    """Raised when a candidate school record breaks one or more field rules."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))


class SchoolSubmission(BaseModel):
    """Validated school record as submitted by a user."""

    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    contact: str = Field(..., min_length=10, max_length=15, pattern=r"^[0-9]+$")
    email_id: str = Field(..., min_length=1, max_length=200)

    @field_validator("email_id")
    @classmethod
    def validate_email_syntax(cls, value: str) -> str:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @property
    def contact_number(self) -> int:
        """Contact digits as stored by the database."""

        return int(self.contact)


def _field_error(error: Mapping[str, Any]) -> FieldError:
    loc = error.get("loc") or ("__root__",)
    field = str(loc[0])
    error_type = error.get("type", "")
    if error_type == "missing":
        error_type = "string_too_short"
    message = _MESSAGES.get((field, error_type), error.get("msg", "Invalid value"))
    return FieldError(field=field, message=message)


def validate_school(data: Mapping[str, Any]) -> SchoolSubmission:
    """Validate raw field values, raising :class:`SchoolValidationError` on failure.

    Only the known record fields are considered; anything else in ``data``
    (an ``image`` entry, for instance) is ignored. Missing fields are
    reported the same way as empty ones.
    """

    candidate = {field: data.get(field) for field in SCHOOL_FIELDS if data.get(field) is not None}
    try:
        return SchoolSubmission.model_validate(candidate)
    except ValidationError as exc:
        raise SchoolValidationError([_field_error(err) for err in exc.errors()]) from None


class SchoolRecord(BaseModel):
    """Serialized representation of a stored school."""

    id: int
    name: str
    address: str
    city: str
    state: str
    contact: int
    image: Optional[str] = None
    email_id: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SchoolCreatedResponse(BaseModel):
    success: bool = True
    message: str = "School added successfully"
    id: int


class SchoolListResponse(BaseModel):
    success: bool = True
    schools: list[SchoolRecord]


__all__ = [
    "SCHOOL_FIELDS",
    "FieldError",
    "SchoolValidationError",
    "SchoolSubmission",
    "validate_school",
    "SchoolRecord",
    "SchoolCreatedResponse",
    "SchoolListResponse",
]
