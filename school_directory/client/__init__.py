"""Client-side state for the desktop console: API access, form and listing."""

from .api import DEFAULT_BASE_URL, ApiError, DirectoryApi
from .directory import SchoolDirectory, matches
from .form import REDIRECT_DELAY_SECONDS, SchoolForm, SubmissionOutcome
from .media import ADVISED_MAX_IMAGE_BYTES, SelectedImage, UnsupportedMediaType

__all__ = [
    "DEFAULT_BASE_URL",
    "ApiError",
    "DirectoryApi",
    "SchoolDirectory",
    "matches",
    "REDIRECT_DELAY_SECONDS",
    "SchoolForm",
    "SubmissionOutcome",
    "ADVISED_MAX_IMAGE_BYTES",
    "SelectedImage",
    "UnsupportedMediaType",
]
