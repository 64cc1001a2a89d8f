"""Request ID middleware — one traceable id and one log line per request.

Learn: A caller may send its own X-Request-ID (a proxy or another service
tracing a call through). It is accepted only if it looks like an id:
short, printable, no spaces. Anything else is replaced with a fresh
UUID so log lines can't be stuffed with arbitrary text.

The id is bound to structlog's contextvars, so every log line emitted
while handling the request (auth.login_failed, records.created, ...)
carries it, and it is echoed back in the response header.
"""

import re
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def pick_request_id(incoming: str | None) -> str:
    """Reuse a well-formed incoming id, otherwise mint a new one."""
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request id to the log context and report each request once."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = pick_request_id(request.headers.get(REQUEST_ID_HEADER))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        response: Response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            "http.request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response
