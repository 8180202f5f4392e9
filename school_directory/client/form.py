"""State behind the "Add School" form."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from school_directory.views import (
    SCHOOL_FIELDS,
    FieldError,
    SchoolSubmission,
    SchoolValidationError,
    validate_school,
)

from .api import ApiError, DirectoryApi
from .media import SelectedImage, UnsupportedMediaType

logger = logging.getLogger(__name__)

# Pause between the success notice and switching to the listing.
REDIRECT_DELAY_SECONDS = 1.5


@dataclass(slots=True)
class SubmissionOutcome:
    success: bool
    message: str
    school_id: Optional[int] = None
    errors: list[FieldError] = field(default_factory=list)
    redirect_after: Optional[float] = None


class SchoolForm:
    """Field values, tracked image, preview and progress flags for one form.

    The selected image is owned here and only replaced when a selection is
    accepted. Submission reads it from this object, never from whatever
    widget produced it.
    """

    def __init__(self, api: DirectoryApi) -> None:
        self.api = api
        self.values: dict[str, str] = {}
        self.selected_image: Optional[SelectedImage] = None
        self.preview: Optional[str] = None
        self.field_errors: dict[str, str] = {}
        self.drag_active = False
        self.submitting = False
        self.reset()

    def reset(self) -> None:
        self.values = {name: "" for name in SCHOOL_FIELDS}
        self.selected_image = None
        self.preview = None
        self.field_errors = {}

    def set_field(self, name: str, value: str) -> None:
        if name not in SCHOOL_FIELDS:
            raise KeyError(name)
        self.values[name] = value

    # --- Image selection ---------------------------------------------------

    def select_file(self, image: SelectedImage) -> SelectedImage:
        """Accept an image selection or raise without touching current state."""

        if not image.is_image:
            raise UnsupportedMediaType("Please select a valid image file")

        if image.oversized:
            logger.warning("Selected image %s is larger than 10MB", image.filename)
        self.selected_image = image
        self.preview = image.preview_uri()
        return image

    def drag_enter(self) -> None:
        self.drag_active = True

    def drag_leave(self) -> None:
        self.drag_active = False

    def drop(self, files: Sequence[SelectedImage]) -> Optional[SelectedImage]:
        self.drag_active = False
        if not files:
            return None
        return self.select_file(files[0])

    # --- Submission --------------------------------------------------------

    def validate(self) -> Optional[SchoolSubmission]:
        try:
            submission = validate_school(self.values)
        except SchoolValidationError as exc:
            self.field_errors = {error.field: error.message for error in exc.errors}
            return None
        self.field_errors = {}
        return submission

    def submit(self) -> SubmissionOutcome:
        """Validate locally, send the form, and report what happened.

        On success the form is cleared; on failure every value and the
        selected image stay in place for correction.
        """

        if self.submitting:
            return SubmissionOutcome(False, "A submission is already in progress")

        if self.validate() is None:
            errors = [FieldError(field=k, message=v) for k, v in self.field_errors.items()]
            return SubmissionOutcome(False, "Please correct the highlighted fields", errors=errors)

        self.submitting = True
        try:
            school_id = self.api.submit_school(self.values, self.selected_image)
        except ApiError as exc:
            if exc.errors:
                self.field_errors = {error.field: error.message for error in exc.errors}
            return SubmissionOutcome(False, str(exc) or "Failed to add school", errors=exc.errors)
        finally:
            self.submitting = False

        self.reset()
        return SubmissionOutcome(
            True,
            "School added successfully!",
            school_id=school_id,
            redirect_after=REDIRECT_DELAY_SECONDS,
        )


__all__ = ["REDIRECT_DELAY_SECONDS", "SchoolForm", "SubmissionOutcome"]
