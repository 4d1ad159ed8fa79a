"""
Notes API: Request Logging Middleware
======================================

What:  One access-log line per HTTP request on the `notes_api.access` logger.
When:  Inside RequestIDMiddleware, so the request id is already set.

Line format:
    GET /api/notes/{note_id} 404 3.2ms [a1b2c3d4] from 127.0.0.1

The matched route template is logged instead of the raw path, so all
requests for one endpoint share a line shape; unmatched paths are logged
as-is. The `extra` fields carry the same values for structured handlers.

Request bodies and query strings are never logged (they hold note text).
"""

import logging
import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notes_api.config import settings
from notes_api.middleware.request_id import request_id_var

logger = logging.getLogger("notes_api.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


_PATH_PARAM = re.compile(r"\{(\w+)(?::\w+)?\}")


def route_template(request: Request) -> str:
    """
    Matched route template including any mount prefix.

    Depending on the FastAPI release, the route in scope carries either the
    full path ("/api/notes/{note_id}") or only the part inside its router
    ("/notes/{note_id}"). Filling the template with the path params and
    stripping it from the request path yields the prefix in both cases.
    """
    path = request.url.path
    template = getattr(request.scope.get("route"), "path_format", None)
    if not template:
        return path

    params = request.path_params
    rendered = _PATH_PARAM.sub(
        lambda m: str(params.get(m.group(1), m.group(0))), template
    )
    if rendered and path.endswith(rendered):
        return path[: len(path) - len(rendered)] + template
    return template


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, route, status and duration; health probes are skipped."""

    def __init__(self, app, health_path: str = ""):
        super().__init__(app)
        self.health_path = health_path or f"{settings.api_prefix}/health"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path == self.health_path:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        route = route_template(request)
        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            route,
            response.status_code,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "route": route,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
