"""
HTTP request logging middleware.

One ``http_request`` line per gateway call, keyed by the matched route
template (``/api/richlist/{md5}``) so lookups for different tokens group
together. Static asset requests are not logged.
"""

import re
import time
import uuid
from typing import Callable, Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.stdlib.get_logger("ledgerglow.http")

LOGGED_PREFIXES = ("/api", "/healthz")

# A token page waits on up to one logo download per card
SLOW_REQUEST_MS = 2000.0

_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def request_id_for(request: Request) -> str:
    """Caller-supplied ``x-request-id`` when it is safe to echo, else a new one."""
    supplied = request.headers.get("x-request-id", "")
    if _REQUEST_ID.match(supplied):
        return supplied
    return uuid.uuid4().hex[:8]


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def _log_method(status_code: int, duration_ms: float) -> Callable[..., None]:
    if status_code >= 500:
        return logger.error
    if status_code >= 400 or duration_ms >= SLOW_REQUEST_MS:
        return logger.warning
    return logger.info


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the call and log its route, status and timing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith(LOGGED_PREFIXES):
            return await call_next(request)

        request_id = request_id_for(request)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.perf_counter()
        response: Optional[Response] = None
        try:
            response = await call_next(request)
            response.headers["x-request-id"] = request_id
            return response
        finally:
            status_code = response.status_code if response is not None else 500
            duration_ms = round((time.perf_counter() - start) * 1000, 1)
            _log_method(status_code, duration_ms)(
                "http_request",
                method=request.method,
                route=route_template(request),
                query=request.url.query or None,
                status=status_code,
                duration_ms=duration_ms,
                slow=duration_ms >= SLOW_REQUEST_MS,
            )
            structlog.contextvars.unbind_contextvars("request_id")
