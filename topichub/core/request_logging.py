"""HTTP request/response logging middleware."""

from __future__ import annotations

import logging
import os
import time
from typing import Any

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from topichub.core.settings import get_settings

# Probes hit these every few seconds; logging them drowns real traffic.
QUIET_PATHS = frozenset({"/health"})


def _env_bool(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request, tagged with the forwarded user id."""

    def __init__(self, app: FastAPI, user_id_header: str = "X-User-Id") -> None:
        super().__init__(app)
        self.logger = logging.getLogger("topichub.request")
        self.user_id_header = user_id_header

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code: int | None = response.status_code if response else None
            self._log(request, status_code, duration_ms)

    def _log(
        self, request: Request, status_code: int | None, duration_ms: float
    ) -> None:
        failed = status_code is None or status_code >= 500
        if request.url.path in QUIET_PATHS and not failed:
            return

        extra: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "query": request.url.query,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 2),
            "client_ip": request.client.host if request.client else None,
            "user_agent": request.headers.get("user-agent"),
            "user_id": request.headers.get(self.user_id_header),
        }

        log = self.logger.error if failed else self.logger.info
        log(
            "%s %s%s -> %s (%.2fms)",
            request.method,
            request.url.path,
            f"?{request.url.query}" if request.url.query else "",
            status_code,
            duration_ms,
            extra=extra,
        )


def add_request_logging_middleware(app: FastAPI) -> None:
    """Attach request logging middleware (enabled by default)."""

    if not _env_bool("LOG_REQUESTS", default=True):
        return
    app.add_middleware(
        RequestLoggingMiddleware, user_id_header=get_settings().user_id_header
    )
