"""Bookshelf CLI — run the server and manage the database.

Usage:
    bookshelf serve                    # Run the API with uvicorn
    bookshelf serve --port 9000 --reload
    bookshelf init-db                  # Create tables from the ORM models
    bookshelf gen-secret               # Print a value for BOOKSHELF_JWT_SECRET
"""

from __future__ import annotations

import asyncio
import secrets
import sys

import click
from pydantic import ValidationError

from bookshelf import __version__
from bookshelf.config import Settings, load_settings


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _settings_or_exit() -> Settings:
    """Load settings, turning a config error into a clean exit."""
    try:
        return load_settings()
    except ValidationError as e:
        click.secho("Configuration error:", fg="red", err=True)
        for err in e.errors():
            field = ".".join(str(p) for p in err.get("loc", ()))
            click.secho(f"  {field or 'settings'}: {err['msg']}", fg="red", err=True)
        sys.exit(1)


async def _init_db(settings: Settings) -> None:
    from bookshelf.db.engine import Database

    database = Database(settings.database_url, echo=settings.debug)
    try:
        await database.create_all()
    finally:
        await database.dispose()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(__version__, prog_name="bookshelf")
def cli():
    """Bookshelf — personal book and movie catalog API."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: BOOKSHELF_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: BOOKSHELF_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server."""
    import uvicorn

    settings = _settings_or_exit()
    uvicorn.run(
        "bookshelf.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("init-db")
def init_db():
    """Create all tables (no-op for tables that already exist)."""
    settings = _settings_or_exit()
    asyncio.run(_init_db(settings))
    click.secho("Database ready.", fg="green")


@cli.command("gen-secret")
def gen_secret():
    """Print a random signing secret."""
    click.echo(secrets.token_urlsafe(32))


if __name__ == "__main__":
    cli()
