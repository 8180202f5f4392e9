"""Common response schemas."""

from typing import Optional

from pydantic import BaseModel

from .schools import FieldError


class FailureResponse(BaseModel):
    success: bool = False
    message: str
    errors: Optional[list[FieldError]] = None

    def to_content(self) -> dict:
        return self.model_dump(exclude_none=True)
