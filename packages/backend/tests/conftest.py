"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test builds its own app via create_app(settings) with
   database_url="sqlite+aiosqlite://", so nothing outside the process
   is touched. StaticPool keeps the one in-memory connection alive for
   the life of the engine.
2. Tables are created directly (ASGITransport does not run lifespan).
3. The engine is disposed after the test, and all test data vanishes with it.

Unlike the real deployment, bcrypt runs at its minimum cost (4 rounds)
so registering a user takes milliseconds.
"""

from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from inkwell.config import Settings
from inkwell.db.engine import create_tables
from inkwell.main import create_app

TEST_JWT_SECRET = "test-secret-0123456789-abcdefghijklmnopqrstuvwxyz"


@pytest.fixture()
def settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        jwt_secret=TEST_JWT_SECRET,
        environment="test",
        bcrypt_rounds=4,
        create_tables=False,
    )


@pytest_asyncio.fixture()
async def app(settings):
    application = create_app(settings)
    await create_tables(application.state.engine)
    try:
        yield application
    finally:
        await application.state.engine.dispose()


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def register_user(client):
    """Factory: register a user and return its registration response body."""

    async def _register(username: str, password: str = "pw123", email: Optional[str] = None):
        r = await client.post(
            "/api/auth/register",
            json={
                "username": username,
                "password": password,
                "email": email or f"{username}@mail.com",
            },
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _register


@pytest.fixture()
def login_user(client, register_user):
    """Factory: register a user, log in, and return Authorization headers."""

    async def _login(username: str, password: str = "pw123"):
        await register_user(username, password)
        r = await client.post(
            "/api/auth/login",
            json={"username": username, "password": password},
        )
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}

    return _login
