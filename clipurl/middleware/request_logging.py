"""Request logging middleware."""

import logging
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..models import iso_timestamp


def format_request_line(timestamp: str, method: str, path: str, status: int, elapsed_ms: int) -> str:
    """`[ISO-timestamp] METHOD path - status - elapsedms`"""
    return f"[{timestamp}] {method} {path} - {status} - {elapsed_ms}ms"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per completed request; never alters the request or response."""

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("clipurl.http")

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = int((time.perf_counter() - start) * 1000)

        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        self.logger.info(
            format_request_line(iso_timestamp(), request.method, path, response.status_code, elapsed_ms)
        )
        return response
