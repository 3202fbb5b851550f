"""
Journey Backend — Request ID Middleware
========================================

What:  Assigns a correlation ID to each request and echoes it in X-Request-ID.
Why:   Every log line of a request (and of the email task it spawns) carries
       the same ID, and error bodies return it for support.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Reuse the client's X-Request-ID header when present
        2. Otherwise generate a short UUID
        3. Store it in the ContextVar and request.state
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers["X-Request-ID"] = rid
        return response


class RequestIDLogFilter(logging.Filter):
    """Adds `request_id` to every log record so formats can reference it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get("") or "-"
        return True
