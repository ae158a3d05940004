"""
Postboard — Request Timeout Middleware
========================================

What:  Bounds the time a single request may spend in the application.
How:   Plain ASGI middleware running the downstream app under
       asyncio.wait_for(). On expiry the handler task is cancelled (its
       session is closed and rolled back) and, if no response has started
       yet, a 504 is returned in the standard error envelope.

Unlike the BaseHTTPMiddleware classes in this package, this one wraps the
raw ASGI call so that cancellation reaches the route handler itself.
"""

import asyncio
import logging

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from postboard.exceptions import RequestTimeoutError
from postboard.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class RequestTimeoutMiddleware:

    def __init__(self, app: ASGIApp, timeout: float = 30.0):
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_tracking), timeout=self.timeout)
        except asyncio.TimeoutError:
            rid = request_id_var.get("")
            logger.error(
                "[%s] %s %s timed out after %.1fs",
                rid,
                scope.get("method", ""),
                scope.get("path", ""),
                self.timeout,
            )
            if response_started:
                # Headers are already on the wire; the connection is cut short
                return

            exc = RequestTimeoutError(timeout=self.timeout)
            response = JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": exc.error_code,
                    "message": exc.message,
                    "details": exc.context,
                    "request_id": rid,
                },
            )
            await response(scope, receive, send)
