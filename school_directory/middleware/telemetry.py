"""Request metrics labelled by route pattern rather than raw path."""

from __future__ import annotations

import time
from typing import Any, Iterable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from school_directory.telemetry import observe_request

UNMATCHED_ROUTE = "unmatched"


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Collect request metrics for Prometheus.

    Requests served by a mount (the image directory) are labelled with the
    mount prefix and anything no route matched shares ``UNMATCHED_ROUTE``,
    so the label set stays bounded however many files or bad paths are hit.
    """

    def __init__(self, app: ASGIApp, mount_prefixes: Iterable[str] = ()) -> None:
        super().__init__(app)
        self.mount_prefixes = tuple(
            prefix.rstrip("/") for prefix in mount_prefixes if prefix.rstrip("/")
        )

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            observe_request(
                request.method,
                self.resolve_route(request),
                500,
                time.perf_counter() - start_time,
            )
            raise

        observe_request(
            request.method,
            self.resolve_route(request),
            response.status_code,
            time.perf_counter() - start_time,
        )
        return response

    def resolve_route(self, request: Request) -> str:
        scope_route: Any = request.scope.get("route")
        path = getattr(scope_route, "path", None)
        if path:
            return path

        url_path = request.url.path
        for prefix in self.mount_prefixes:
            if url_path == prefix or url_path.startswith(prefix + "/"):
                return prefix
        return UNMATCHED_ROUTE
