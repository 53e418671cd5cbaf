"""Test fixtures — a fresh app and in-memory database per test.

Learn: Each test builds its own app with create_app(Settings(...)):
- sqlite+aiosqlite:// (in-memory, one shared connection via StaticPool)
- a per-test signing secret, so tokens never leak between tests
- bcrypt rounds=4 (the minimum) to keep hashing fast

httpx's ASGITransport doesn't run the lifespan, so tables are created
explicitly here.
"""

import secrets
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from taskhub.config import Settings
from taskhub.db.engine import create_tables
from taskhub.main import create_app


@pytest.fixture()
def settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        jwt_secret=secrets.token_urlsafe(32),
        bcrypt_rounds=4,
        redis_url="",
    )


@pytest_asyncio.fixture()
async def app(settings):
    app = create_app(settings)
    await create_tables(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def register(client):
    """Register a user and return (token, user, auth_headers).

    Usage: token, user, headers = await register(role="manager")
    """

    async def _register(role=None, name="Test User", email=None, password="password_123"):
        body = {
            "name": name,
            "email": email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
        }
        if role is not None:
            body["role"] = role
        r = await client.post("/api/register", json=body)
        assert r.status_code == 201, r.text
        data = r.json()
        return data["token"], data["user"], {"Authorization": f"Bearer {data['token']}"}

    return _register
