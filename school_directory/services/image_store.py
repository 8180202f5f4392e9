"""Best-effort persistence of uploaded school images to the public directory."""

from __future__ import annotations

import logging
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from school_directory.config.settings import UploadConfig, settings
from school_directory.telemetry import record_image

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9]")
_MAX_STEM_LENGTH = 50


@dataclass(slots=True)
class UploadedImage:
    """Raw file part pulled from a submission."""

    data: bytes
    filename: Optional[str]
    content_type: Optional[str]


def sanitize_stem(filename: Optional[str]) -> str:
    """Reduce an uploaded filename to a safe, bounded stem."""

    stem = Path(filename or "").stem
    cleaned = _UNSAFE_CHARS.sub("_", stem)[:_MAX_STEM_LENGTH]
    return cleaned or "image"


class ImageStore:
    """Write accepted images under the static directory and return their URL path.

    :meth:`persist` never raises. Anything that prevents the write (wrong media
    type, empty payload, filesystem error) is logged and reported as ``None``
    so the caller can carry on without an image.
    """

    def __init__(self, config: Optional[UploadConfig] = None) -> None:
        self._config = config or settings.uploads

    @property
    def directory(self) -> Path:
        return Path(self._config.directory)

    def extension_for(self, content_type: str) -> str:
        """Map a declared ``image/*`` media type to a file extension."""

        subtype = content_type.split("/", 1)[-1].split(";", 1)[0].strip().lower()
        subtype = self._config.extension_aliases.get(subtype, subtype)
        if subtype in self._config.known_extensions:
            return subtype
        return self._config.default_extension

    def build_filename(self, original_name: Optional[str], content_type: str) -> str:
        timestamp = int(time.time() * 1000)
        suffix = secrets.randbelow(1_000_000)
        return (
            f"{timestamp}_{sanitize_stem(original_name)}_"
            f"{self._config.filename_token}_{suffix:06d}."
            f"{self.extension_for(content_type)}"
        )

    def accepts(self, image: UploadedImage) -> bool:
        content_type = (image.content_type or "").lower()
        if not content_type.startswith("image/"):
            logger.info(
                "Dropping upload %r: unsupported media type %r",
                image.filename,
                image.content_type,
            )
            return False
        if not image.data:
            logger.info("Dropping upload %r: empty payload", image.filename)
            return False
        return True

    def _write(self, filename: str, data: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(self.directory / filename, "xb") as handle:
            handle.write(data)

    async def persist(self, image: Optional[UploadedImage]) -> Optional[str]:
        """Store the image and return its public URL path, or ``None``."""

        if image is None:
            return None

        if not self.accepts(image):
            record_image("dropped")
            return None

        if len(image.data) > self._config.max_bytes:
            logger.warning(
                "Upload %r is %d bytes, above the advised %d byte limit",
                image.filename,
                len(image.data),
                self._config.max_bytes,
            )

        filename = self.build_filename(image.filename, image.content_type or "")
        try:
            await run_in_threadpool(self._write, filename, image.data)
        except OSError:
            logger.exception("Error saving image %r", image.filename)
            record_image("dropped")
            return None

        public_path = f"{self._config.url_prefix.rstrip('/')}/{filename}"
        logger.info("Image saved to: %s", public_path)
        record_image("stored")
        return public_path

    async def discard(self, public_path: Optional[str]) -> None:
        """Remove a previously persisted image; missing files are ignored."""

        if not public_path:
            return
        target = self.directory / Path(public_path).name
        try:
            await run_in_threadpool(target.unlink, missing_ok=True)
        except OSError:
            logger.warning("Could not remove orphaned image %s", target, exc_info=True)


def get_image_store() -> ImageStore:
    """Return the default image store for the configured upload directory."""

    return _DEFAULT_STORE


_DEFAULT_STORE = ImageStore()


__all__ = ["ImageStore", "UploadedImage", "get_image_store", "sanitize_stem"]
