"""State behind the "Schools" listing: one fetch, then in-memory search."""

from __future__ import annotations

import logging
from typing import Optional

from school_directory.views import SchoolRecord

from .api import ApiError, DirectoryApi

logger = logging.getLogger(__name__)


def matches(school: SchoolRecord, term: str) -> bool:
    """True when name, city or state contains ``term``, ignoring case."""

    needle = term.casefold()
    return any(needle in value.casefold() for value in (school.name, school.city, school.state))


class SchoolDirectory:
    def __init__(self, api: DirectoryApi) -> None:
        self.api = api
        self.schools: list[SchoolRecord] = []
        self.term = ""
        self.loaded = False
        self.error: Optional[str] = None

    def load(self) -> list[SchoolRecord]:
        """Fetch the records on first use; later calls reuse them."""

        if self.loaded:
            return self.visible
        try:
            self.schools = self.api.fetch_schools()
        except ApiError as exc:
            self.error = str(exc)
            logger.warning("Error fetching schools: %s", exc)
            return []

        self.error = None
        self.loaded = True
        return self.visible

    def search(self, term: str) -> list[SchoolRecord]:
        self.term = term
        return self.visible

    @property
    def visible(self) -> list[SchoolRecord]:
        if not self.term:
            return list(self.schools)
        return [school for school in self.schools if matches(school, self.term)]

    def image_bytes(self, school: SchoolRecord) -> Optional[bytes]:
        """Image content for one record, or ``None`` to show a placeholder."""

        if not school.image:
            return None
        try:
            return self.api.fetch_image(school.image)
        except ApiError as exc:
            logger.info("Image for school %s unavailable: %s", school.id, exc)
            return None


__all__ = ["SchoolDirectory", "matches"]
