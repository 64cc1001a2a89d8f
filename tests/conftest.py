"""Test fixtures — a fresh app and database per test.

Learn: Each test gets its own SQLite file under tmp_path, so there's no
cross-test pollution and nothing to roll back. Separate connections to a
file database (unlike :memory:) let the concurrency tests exercise real
writer contention on the sequence counter.

bcrypt rounds drop to 4 so registering users doesn't dominate runtime.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from bookshelf.config import Settings
from bookshelf.db.models import User
from bookshelf.main import create_app

TEST_SECRET = "test-signing-secret-0123456789-abcdefghij"


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'bookshelf-test.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        create_tables=False,
    )


@pytest_asyncio.fixture()
async def app(settings):
    """App with tables created up front.

    Learn: httpx's ASGITransport doesn't run the lifespan, so the tables
    the lifespan would create are created here instead.
    """
    application = create_app(settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture()
async def database(app):
    return app.state.database


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def login_headers(client):
    """Register + login a user, return Authorization headers for them."""

    async def _login(username: str, password: str = "secret1") -> dict:
        r = await client.post(
            "/register", json={"username": username, "password": password}
        )
        assert r.status_code == 201, r.text
        r = await client.post("/login", json={"username": username, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}

    return _login


@pytest_asyncio.fixture()
async def auth_headers(login_headers):
    """Headers for a freshly registered user "alice"."""
    return await login_headers("alice")


@pytest_asyncio.fixture()
async def make_user(database):
    """Insert a user row directly and return its id (no HTTP, no bcrypt)."""

    async def _make(username: str) -> int:
        async with database.session() as session:
            user = User(username=username, password_hash="not-a-real-hash")
            session.add(user)
            await session.commit()
            return user.id

    return _make
