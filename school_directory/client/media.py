"""Local image selection helpers shared by the form and the console."""

from __future__ import annotations

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ADVISED_MAX_IMAGE_BYTES = 10 * 1024 * 1024


class UnsupportedMediaType(ValueError):
    """Raised when a selected file does not declare an ``image/*`` type."""


@dataclass(frozen=True, slots=True)
class SelectedImage:
    """An image picked by the user, captured in full at selection time."""

    data: bytes
    filename: str
    content_type: Optional[str]

    @classmethod
    def from_path(cls, path: str | Path) -> "SelectedImage":
        file_path = Path(path)
        content_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            data=file_path.read_bytes(),
            filename=file_path.name,
            content_type=content_type,
        )

    @property
    def is_image(self) -> bool:
        return (self.content_type or "").lower().startswith("image/")

    @property
    def oversized(self) -> bool:
        return len(self.data) > ADVISED_MAX_IMAGE_BYTES

    def preview_uri(self) -> str:
        """Return a ``data:`` URI suitable for an inline preview."""

        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


__all__ = [
    "ADVISED_MAX_IMAGE_BYTES",
    "SelectedImage",
    "UnsupportedMediaType",
]
