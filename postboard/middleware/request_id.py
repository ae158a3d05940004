"""
Postboard — Request ID Middleware
===================================

What:  Gives every request a correlation id and returns it in X-Request-ID.
How:   Reuses a client-supplied X-Request-ID when it is short and printable,
       otherwise generates an 8-character id. The id is stored in a
       ContextVar (read by loggers and exception handlers) and on
       request.state.request_id (read by route handlers).
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

MAX_CLIENT_ID_LENGTH = 64


def _usable(client_id: str | None) -> bool:
    return bool(client_id) and len(client_id) <= MAX_CLIENT_ID_LENGTH and client_id.isprintable()


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        client_id = request.headers.get("X-Request-ID")
        rid = client_id if _usable(client_id) else uuid.uuid4().hex[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
