"""
Luminar Notes Backend: Request Logging
=======================================

What:  Access logging for every HTTP request, plus the request-scoped logger
       that route handlers receive through dependency injection.
How:   RequestLoggingMiddleware logs method, path, status and duration once
       the response is ready. RequestLoggerAdapter prefixes each message with
       the request ID so handler logs and access logs can be correlated.

Log level by status:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Request bodies are never logged.
"""

import logging
import time
from typing import Any, MutableMapping, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("luminar.access")

QUIET_PATHS = {"/health"}


class RequestLoggerAdapter(logging.LoggerAdapter):
    """
    Logger bound to one request.

    Example:
        log = RequestLoggerAdapter(logging.getLogger("luminar.notes"), {"request_id": "a1b2c3d4"})
        log.info("Note %s saved", note_id)   # → "[a1b2c3d4] Note ... saved"
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        rid = self.extra.get("request_id", "") if self.extra else ""
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("request_id", rid)
        kwargs["extra"] = extra
        return f"[{rid}] {msg}", kwargs


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one line per request: method, path, status, duration, request ID, client.

    Health checks are not logged.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

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
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
