"""
Notes API: Request ID Middleware
=================================

What:  Assigns a correlation id to each request and echoes it in the response.
How:   Reuses the client's X-Request-ID when it is a plain token
       (letters, digits, '.', '_', '-', at most 64 characters), otherwise
       generates an 8-character id. The id goes into a ContextVar for the
       access log and error handlers, and into the X-Request-ID header.
When:  Outermost application middleware.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accept_request_id(candidate: str) -> str:
    """Return the client's id if it is safe to log, else a fresh one."""
    if candidate and _VALID_REQUEST_ID.fullmatch(candidate):
        return candidate
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER, ""))
        # Not reset afterwards: the catch-all error handler runs outside this
        # middleware and still logs the id
        request_id_var.set(rid)
        request.state.request_id = rid
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
