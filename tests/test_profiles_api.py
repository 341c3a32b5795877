"""Profile tests — onboarding and role reconciliation on read.

Learn: The login screen's role choice is carried as a pending-role cookie.
The first GET /profiles/me after login applies it to an existing profile
(once) and clears the cookie. Without a profile the cookie is kept until
onboarding has happened.
"""

import asyncio
import uuid

import pytest
from sqlalchemy import func, select

from conftest import login
from padelhub.db.models import Event, User
from padelhub.events.types import PROFILE_CREATED, PROFILE_ROLE_RECONCILED
from padelhub.schemas.profile import ProfileUpsert, Role
from padelhub.services.profile_service import ProfileService


@pytest.mark.asyncio
async def test_no_profile_means_onboarding(client, make_user):
    user = await make_user(None)
    r = await client.get("/api/profiles/me", headers=user.headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Profile not found"


@pytest.mark.asyncio
async def test_onboarding_upsert_creates_then_updates(client, make_user):
    user = await make_user(None)
    r = await client.post(
        "/api/profiles",
        json={"name": "Lena", "level": 4.5, "handedness": "right", "side": "drive"},
        headers=user.headers,
    )
    assert r.status_code == 200
    created = r.json()
    assert created["role"] == "player"
    assert created["user_id"] == str(user.id)

    r = await client.post(
        "/api/profiles", json={"name": "Lena B", "level": 5}, headers=user.headers
    )
    assert r.json()["id"] == created["id"]
    assert r.json()["name"] == "Lena B"

    r = await client.get("/api/profiles/me", headers=user.headers)
    assert r.json()["name"] == "Lena B"
    assert r.json()["level"] == 5


@pytest.mark.asyncio
async def test_partial_update_keeps_role_and_attributes(client, make_user):
    """Resending only a name leaves the coach role and player fields alone."""
    user = await make_user(None)
    r = await client.post(
        "/api/profiles",
        json={"name": "Carla", "role": "coach", "level": 6, "handedness": "left"},
        headers=user.headers,
    )
    assert r.json()["role"] == "coach"

    r = await client.post(
        "/api/profiles", json={"name": "Carla R"}, headers=user.headers
    )
    assert r.status_code == 200
    profile = r.json()
    assert profile["name"] == "Carla R"
    assert profile["role"] == "coach"
    assert profile["level"] == 6
    assert profile["handedness"] == "left"

    r = await client.get("/api/coach/players", headers=user.headers)
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_first_profile_defaults_to_player(client, make_user):
    user = await make_user(None)
    r = await client.post(
        "/api/profiles", json={"name": "Nia", "role": None}, headers=user.headers
    )
    assert r.status_code == 200
    assert r.json()["role"] == "player"


@pytest.mark.asyncio
async def test_profile_validation(client, make_user):
    user = await make_user(None)
    r = await client.post(
        "/api/profiles", json={"name": "", "level": 11}, headers=user.headers
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_profile_requires_authentication(client):
    r = await client.get("/api/profiles/me")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_reconcile_on_read_updates_role_once(client, make_user):
    """Stored player + pending coach → first read returns coach and clears the signal."""
    user = await make_user("player")
    tokens = await login(client, user.email, role="coach")
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    r = await client.get("/api/profiles/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["role"] == "coach"
    assert "pending_role" not in client.cookies

    # Second read, no signal: role stays coach
    r = await client.get("/api/profiles/me", headers=headers)
    assert r.json()["role"] == "coach"


@pytest.mark.asyncio
async def test_reconciled_role_grants_coach_access(client, make_user):
    user = await make_user("player")
    tokens = await login(client, user.email, role="coach")
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    r = await client.get("/api/coach/players", headers=headers)
    assert r.status_code == 403

    await client.get("/api/profiles/me", headers=headers)

    r = await client.get("/api/coach/players", headers=headers)
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_matching_signal_is_consumed_without_write(client, make_user, db_session):
    user = await make_user("coach")
    tokens = await login(client, user.email, role="coach")
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    r = await client.get("/api/profiles/me", headers=headers)
    assert r.json()["role"] == "coach"
    assert "pending_role" not in client.cookies

    result = await db_session.execute(
        select(Event).where(Event.type == PROFILE_ROLE_RECONCILED)
    )
    assert result.scalars().first() is None


@pytest.mark.asyncio
async def test_signal_kept_until_onboarding(client, make_user):
    user = await make_user(None)
    tokens = await login(client, user.email, role="coach")
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    r = await client.get("/api/profiles/me", headers=headers)
    assert r.status_code == 404
    assert client.cookies.get("pending_role") == "coach"


@pytest.mark.asyncio
async def test_garbage_signal_ignored(client, make_user):
    user = await make_user("player")
    r = await client.get(
        "/api/profiles/me", headers={**user.headers, "Cookie": "pending_role=admin"}
    )
    assert r.json()["role"] == "player"


# ═══════════════════════════════════════════════════════════
# Service level
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_service_reconcile_records_event(client, make_user, db_session):
    user = await make_user("player")
    svc = ProfileService(db_session)

    result = await svc.read_own(user.id, Role.COACH)
    assert result.signal_consumed
    assert result.profile.role == "coach"

    events = await svc.events.read_stream(f"user:{user.id}")
    types = [e.type for e in events]
    assert types == [PROFILE_CREATED, PROFILE_ROLE_RECONCILED]
    assert events[-1].data == {"from": "player", "to": "coach"}


@pytest.mark.asyncio
async def test_service_read_without_signal(make_user, db_session):
    user = await make_user("player")
    result = await ProfileService(db_session).read_own(user.id)
    assert result.profile.role == "player"
    assert not result.signal_consumed


@pytest.mark.asyncio
async def test_concurrent_onboarding_records_one_creation(session_factory, db_session):
    async with session_factory() as db:
        user = User(email=f"{uuid.uuid4().hex[:8]}@example.com", name="Twin")
        db.add(user)
        await db.commit()
        user_id = user.id

    async def onboard(name):
        async with session_factory() as db:
            await ProfileService(db).upsert_profile(
                user_id, ProfileUpsert(name=name, role=Role.COACH)
            )

    await asyncio.gather(onboard("Twin A"), onboard("Twin B"))

    created = await db_session.scalar(
        select(func.count())
        .select_from(Event)
        .where(Event.stream_id == f"user:{user_id}", Event.type == PROFILE_CREATED)
    )
    assert created == 1
