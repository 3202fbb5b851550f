"""
Journey Backend — Request Logging Middleware
=============================================

What:  One access-log line per HTTP request with status and duration.
How:   Measures time around call_next and picks the log level from the status:
       5xx → ERROR, 4xx → WARNING, everything else → INFO.

What we log vs what we DON'T log (privacy):
    ✅ Log: method, path, status, duration, IP, request ID
    ❌ Don't log: request bodies (owner and invitee emails are PII)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from journey.middleware.request_id import request_id_var

logger = logging.getLogger("journey.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, duration and client IP of each request."""

    # Probes hit these every few seconds
    QUIET_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            client_ip,
            extra={
                "request_id": request_id_var.get(""),
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
