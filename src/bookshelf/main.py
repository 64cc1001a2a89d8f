"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Everything with a lifetime longer than a request is built here
from the validated Settings and parked on app.state:

    app.state.database            Database (engine + sessions)
    app.state.token_codec         TokenCodec (holds the signing secret)
    app.state.password_hasher     PasswordHasher
    app.state.sequence_allocator  SequenceAllocator

There's no module-level `app`: building one needs BOOKSHELF_JWT_SECRET,
and a missing secret must stop startup, not an import. Run with
`uvicorn --factory bookshelf.main:create_app` or `bookshelf serve`.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI

from bookshelf import __version__
from bookshelf.api import api_router
from bookshelf.auth.jwt import TokenCodec
from bookshelf.auth.password import PasswordHasher
from bookshelf.config import Settings, load_settings
from bookshelf.db.engine import Database
from bookshelf.errors import register_error_handlers
from bookshelf.log import configure_logging
from bookshelf.services.sequence import SequenceAllocator

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: FastAPI lifespan replaces on_event("startup") / on_event("shutdown").
    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    logger.info(
        "bookshelf.starting",
        version=__version__,
        environment=settings.environment,
        database=database.dialect,
    )

    if settings.create_tables:
        await database.create_all()
        logger.info("bookshelf.tables_ready")

    yield

    logger.info("bookshelf.shutdown")
    await database.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application.

    Raises pydantic.ValidationError if settings are loaded from the
    environment and BOOKSHELF_JWT_SECRET is missing or blank.
    """
    settings = settings or load_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Bookshelf",
        description="Personal book and movie catalog with per-user numbering",
        version=__version__,
        lifespan=lifespan,
    )

    database = Database(settings.database_url, echo=settings.debug)
    app.state.settings = settings
    app.state.database = database
    app.state.token_codec = TokenCodec(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_hours=settings.token_expire_hours,
    )
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.sequence_allocator = SequenceAllocator(database)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → handler

    from bookshelf.middleware.request_id import RequestIdMiddleware
    from bookshelf.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)
    app.include_router(api_router)

    return app
