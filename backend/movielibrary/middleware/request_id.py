"""
MovieLibrary Backend: Correlation ID Middleware
================================================

What:  Gives every request a correlation ID and returns it to the caller.
How:   Takes the ID from X-Correlation-ID (or X-Request-ID) when the caller
       sent one, generates a UUID otherwise, stores it in a ContextVar and
       echoes it in both response headers.
Who:   Applied to every request; read by RequestLoggingMiddleware and the
       exception handlers in main.py.

A caller that tags its requests (a frontend, another service) can find the
matching server log lines and error bodies by its own ID.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(request: Request) -> str:
    """Caller-supplied correlation ID if present and non-blank, else a new UUID."""
    for header in (CORRELATION_ID_HEADER, REQUEST_ID_HEADER):
        value = request.headers.get(header, "").strip()
        if value:
            return value
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request)

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers[CORRELATION_ID_HEADER] = rid
        response.headers[REQUEST_ID_HEADER] = rid
        return response
