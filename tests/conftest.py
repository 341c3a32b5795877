"""Test fixtures — an isolated SQLite database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own aiosqlite database file under tmp_path, with
   every table created from the models.
2. The app's get_db dependency is overridden to hand out a fresh session
   from that database per request, exactly like production does.
3. Identities are real: tests register and log in through /api/auth, so
   the JWT pipeline runs and several users (coach, players) can coexist.

Lifespan does not run under ASGITransport, so there is no Redis (rate
limiting is skipped) and the library is not seeded unless a test asks.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from padelhub.db.engine import get_db
from padelhub.db.models import Base
from padelhub.main import app

PASSWORD = "padel_password_123"


@dataclass
class TestUser:
    """A registered identity and its bearer header."""

    __test__ = False  # not a test class

    id: uuid.UUID
    email: str
    name: str
    headers: dict


@pytest_asyncio.fixture()
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'padelhub.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """A session for tests that call services or the authority directly."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client with get_db pointed at the per-test database.

    Auth is NOT overridden; use make_user to get real tokens.
    """

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def register(client: AsyncClient, email: str, name: str) -> dict:
    r = await client.post(
        "/api/auth/register",
        json={"email": email, "name": name, "password": PASSWORD},
    )
    assert r.status_code == 201, r.text
    return r.json()


async def login(client: AsyncClient, email: str, role: Optional[str] = None) -> dict:
    """Log in and return the token pair. Any earlier pending role is dropped."""
    client.cookies.clear()
    body = {"email": email, "password": PASSWORD}
    if role:
        body["role"] = role
    r = await client.post("/api/auth/login", json=body)
    assert r.status_code == 200, r.text
    return r.json()


@pytest.fixture()
def make_user(client):
    """Factory: register + log in a user, optionally onboard with a role.

    Usage:
        coach = await make_user("coach")
        player = await make_user("player")
        newcomer = await make_user(None)   # identity without a profile
    """

    async def _make(role: Optional[str] = "player", name: Optional[str] = None) -> TestUser:
        email = f"{role or 'user'}-{uuid.uuid4().hex[:8]}@example.com"
        name = name or (role or "user").capitalize()
        user = await register(client, email, name)
        tokens = await login(client, email)
        headers = {"Authorization": f"Bearer {tokens['access_token']}"}
        if role:
            r = await client.post(
                "/api/profiles",
                json={"name": name, "role": role},
                headers=headers,
            )
            assert r.status_code == 200, r.text
        return TestUser(
            id=uuid.UUID(user["id"]), email=email, name=name, headers=headers
        )

    return _make


@pytest_asyncio.fixture()
async def coach_with_player(client, make_user):
    """A coach, a player linked to them, and an unlinked second player."""
    coach = await make_user("coach", name="Carla Coach")
    player = await make_user("player", name="Pablo Player")
    other = await make_user("player", name="Olga Other")
    r = await client.post(
        "/api/coach/players", json={"email": player.email}, headers=coach.headers
    )
    assert r.status_code == 201, r.text
    return coach, player, other
