"""HTTP access to the school directory API for desktop clients."""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional

import requests
from requests import Response, Session
from requests.exceptions import RequestException

from school_directory.views import FieldError, SchoolRecord

from .media import SelectedImage

DEFAULT_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
SCHOOLS_ENDPOINT = "/api/schools"


class ApiError(RuntimeError):
    """Raised when a request fails or the API answers with ``success: false``."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        errors: Optional[list[FieldError]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []


class DirectoryApi:
    """Thin wrapper over a ``requests`` session for the two school endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: Optional[Session] = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}{path}"

    def _perform_request(self, method: str, endpoint: str, **kwargs: Any) -> Response:
        try:
            return self.session.request(
                method=method.upper(),
                url=self.url_for(endpoint),
                timeout=self.timeout,
                **kwargs,
            )
        except RequestException as exc:
            raise ApiError(f"Network error: {exc}") from exc

    @staticmethod
    def _envelope(response: Response, fallback: str) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            raise ApiError(fallback, status_code=response.status_code) from None

        if not isinstance(payload, dict) or not payload.get("success"):
            message = fallback
            errors: list[FieldError] = []
            if isinstance(payload, dict):
                message = payload.get("message") or fallback
                errors = [FieldError.model_validate(item) for item in payload.get("errors") or []]
            raise ApiError(message, status_code=response.status_code, errors=errors)
        return payload

    def submit_school(
        self,
        fields: Mapping[str, str],
        image: Optional[SelectedImage] = None,
    ) -> int:
        """POST a school as multipart form data and return the new id."""

        parts: list[tuple[str, tuple[Optional[str], Any, Optional[str]]]] = [
            (name, (None, value, None)) for name, value in fields.items()
        ]
        if image is not None:
            parts.append(("image", (image.filename, image.data, image.content_type)))

        response = self._perform_request("POST", SCHOOLS_ENDPOINT, files=parts)
        payload = self._envelope(response, "Failed to add school")
        return int(payload["id"])

    def fetch_schools(self) -> list[SchoolRecord]:
        """GET every stored school."""

        response = self._perform_request("GET", SCHOOLS_ENDPOINT)
        payload = self._envelope(response, "Failed to fetch schools")
        return [SchoolRecord.model_validate(item) for item in payload.get("schools", [])]

    def fetch_image(self, path: str) -> bytes:
        """Download a stored image by its public path."""

        response = self._perform_request("GET", path)
        if response.status_code != 200 or not response.content:
            raise ApiError(
                f"Image {path} unavailable",
                status_code=response.status_code,
            )
        return response.content


__all__ = ["ApiError", "DirectoryApi", "DEFAULT_BASE_URL", "SCHOOLS_ENDPOINT"]
