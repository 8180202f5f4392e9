"""Service layer: relational storage and image persistence."""

from .image_store import ImageStore, UploadedImage, get_image_store
from .school_gateway import (
    ConstraintViolation,
    SchoolGateway,
    StorageError,
    StorageUnavailable,
    get_school_gateway,
)

__all__ = [
    "ImageStore",
    "UploadedImage",
    "get_image_store",
    "SchoolGateway",
    "get_school_gateway",
    "StorageError",
    "StorageUnavailable",
    "ConstraintViolation",
]
