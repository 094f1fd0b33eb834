"""
Invoice Manager Backend — Request Logging Middleware
======================================================

What:  One log line per HTTP request: method, path, status, duration, request id.
How:   Times the downstream call and picks the level from the status code.
Who:   Applied to every request via Starlette middleware.
When:  After RequestIDMiddleware (uses request ID for correlation).

Example line:
    2026-01-15T12:00:00 [INFO] invoices.access: POST /dashboard/invoices 303 12.4ms [a1b2c3d4] from 10.0.0.7

Form bodies are never logged; only the request line and outcome.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("invoices.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status code, duration and client address of each request.

    Levels:
        5xx → ERROR, 4xx → WARNING, everything else (including the 303
        after a saved form) → INFO. /health is not logged.
    """

    SKIP_PATHS = frozenset({"/health"})

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        fields = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "client_ip": request.client.host if request.client else "unknown",
        }
        logger.log(
            _level_for(response.status_code),
            "%(method)s %(path)s %(status)d %(duration_ms).1fms [%(request_id)s] from %(client_ip)s",
            fields,
            extra=fields,
        )
        return response


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO
