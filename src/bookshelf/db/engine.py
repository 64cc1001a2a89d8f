"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.

There is no module-level engine. create_app() builds one Database and puts
it on app.state; get_db() pulls it back off the request. Tests build their
own Database against a throwaway SQLite file.
"""

from typing import Any, AsyncIterator

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from bookshelf.db.models import Base


def _engine_kwargs(url: str, echo: bool) -> dict[str, Any]:
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {
            "echo": echo,
            # Writers wait on each other instead of failing with "database is locked"
            "connect_args": {"timeout": 30},
        }
        if ":memory:" in url:
            # One shared connection, or every session sees an empty database
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"]["check_same_thread"] = False
        return kwargs

    # PostgreSQL: min 5, max 20 connections
    return {
        "echo": echo,
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 15,
    }


class Database:
    """The store capability: one engine, one session factory.

    Learn: Services never reach for a global. They get a session (per
    request) or, like SequenceAllocator, the Database itself when they
    need their own short transaction.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **_engine_kwargs(url, echo))
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        if url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _sqlite_pragmas)

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()


def _sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with get_database(request).session() as session:
        yield session
