"""Security headers middleware.

Learn: Every response from this API is either a token, a private record,
or an error about one, so the headers below are fixed for all routes:

    X-Content-Type-Options     nosniff      no MIME sniffing of JSON bodies
    X-Frame-Options            DENY         nothing here is meant to be framed
    Referrer-Policy            no-referrer  local ids in URLs stay private
    Cache-Control              no-store     tokens and records never cached

Strict-Transport-Security is only sent when the request itself came in
over HTTPS; sending it on plain HTTP is ignored by browsers anyway.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}

HSTS_MAX_AGE = 31536000  # one year


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp SECURITY_HEADERS (plus HSTS on https) onto every response."""

    def __init__(self, app: ASGIApp, hsts_max_age: int = HSTS_MAX_AGE):
        super().__init__(app)
        self.hsts_value = f"max-age={hsts_max_age}; includeSubDomains"

    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = self.hsts_value
        return response
