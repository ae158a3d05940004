"""
Postboard — Request Logging Middleware
========================================

What:  One access-log line per request: method, path, status, duration,
       request id, client address and, when a token was verified, the
       caller's user id.
How:   Measures the downstream call with perf_counter and picks the level
       from the status class (5xx ERROR, 4xx WARNING, otherwise INFO).

Never logged: request bodies (passwords), Authorization headers.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from postboard.middleware.request_id import request_id_var

logger = logging.getLogger("postboard.access")

QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        client_ip = request.client.host if request.client else "unknown"
        identity = getattr(request.state, "identity", None)
        user_id = str(identity.id) if identity is not None else "-"
        rid = request_id_var.get("")

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] user=%s from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            user_id,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "user_id": user_id,
            },
        )
        return response
