"""SQLAlchemy models for the school directory."""

from .base import Base
from .school import School  # noqa: F401

__all__ = ["Base", "School"]
