"""
Logging setup and request logging middleware.
"""

from __future__ import annotations

import logging
import sys
import time

from starlette.middleware.base import BaseHTTPMiddleware

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("kvrpc.http")


def resolve_level(level: str | int) -> int:
    """Map a level name or number to a logging level; unknown names give INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName((level or "").strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: str | int = "INFO") -> None:
    """Configure the root logger once for the running process."""
    logging.basicConfig(
        level=resolve_level(level),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request."""

    def __init__(self, app, *, service: str) -> None:
        super().__init__(app)
        self._service = service

    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "[%s] %s %s -> %s (%.1f ms)",
            self._service,
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response
