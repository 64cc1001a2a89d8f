"""Domain errors and their HTTP translation.

Learn: Services raise these; they never build HTTP responses themselves.
create_app() registers the handlers below so every error leaves the API
as {"error": "<message>"} with the status code the error class declares.

Client-facing messages are deliberately uniform where a difference would
leak information: every auth failure reads the same, and "not found"
is identical whether the record is missing or belongs to someone else.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger()


class BookshelfError(Exception):
    """Base class for all errors that map to an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookshelfError):
    """Input is malformed or violates a field constraint."""

    status_code = 400


class AuthenticationError(BookshelfError):
    """Missing/invalid credentials or token."""

    status_code = 401


class NotFoundError(BookshelfError):
    """Record absent, or not owned by the caller."""

    status_code = 404


class ConflictError(BookshelfError):
    """Uniqueness violation (e.g. username already taken)."""

    status_code = 409


class InternalError(BookshelfError):
    """Hashing, signing, or store failure. Detail stays in the logs."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


def _error_response(status_code: int, message: str, **kwargs) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, **kwargs)


async def handle_bookshelf_error(request: Request, exc: BookshelfError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request.failed", path=request.url.path, error=exc.message)
    else:
        logger.info(
            "request.rejected",
            path=request.url.path,
            status=exc.status_code,
            error=exc.message,
        )

    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return _error_response(exc.status_code, exc.message, headers=headers)


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Rewrite FastAPI's 422 into a 400 that names the violated constraint."""
    errors = exc.errors()
    if not errors:
        return _error_response(400, "Invalid request")

    first = errors[0]
    # loc looks like ("body", 0, "title"); drop the "body"/"path" prefix
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    field = ".".join(loc)
    message = first.get("msg", "Invalid value")
    return _error_response(400, f"{field}: {message}" if field else message)


async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Last resort for store errors a service didn't wrap."""
    logger.exception("store.unhandled_error", path=request.url.path)
    return _error_response(500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookshelfError, handle_bookshelf_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(SQLAlchemyError, handle_store_error)
