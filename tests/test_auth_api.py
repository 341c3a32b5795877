"""Identity provider tests.

Learn: Tests cover:
1. Registration + duplicate prevention (emails compared lowercased)
2. Login → JWT tokens, optional pending-role cookie
3. Token refresh
4. Protected /me endpoint and the 401 body shape
"""

import asyncio
import uuid

import pytest

from conftest import PASSWORD, login, register
from padelhub.auth.jwt import create_refresh_token


# ═══════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_user(client):
    """Register a new identity."""
    email = f"test-{uuid.uuid4().hex[:8]}@example.com"
    user = await register(client, email, "Test User")
    assert user["email"] == email
    assert user["name"] == "Test User"
    assert "id" in user


@pytest.mark.asyncio
async def test_register_normalizes_email(client):
    user = await register(client, "  Mixed.Case@Example.COM ", "Mixed")
    assert user["email"] == "mixed.case@example.com"


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    """Can't register with the same email twice, whatever the case."""
    email = f"dup-{uuid.uuid4().hex[:8]}@example.com"
    await register(client, email, "User 1")

    r = await client.post(
        "/api/auth/register",
        json={"email": email.upper(), "name": "User 2", "password": PASSWORD},
    )
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_concurrent_duplicate_registration(client):
    """Two simultaneous sign-ups for one email: one 201, one 409, never a 500."""
    email = f"race-{uuid.uuid4().hex[:8]}@example.com"

    async def sign_up(name):
        return await client.post(
            "/api/auth/register",
            json={"email": email, "name": name, "password": PASSWORD},
        )

    responses = await asyncio.gather(sign_up("First"), sign_up("Second"))
    assert sorted(r.status_code for r in responses) == [201, 409]


@pytest.mark.asyncio
async def test_register_short_password(client):
    """Password must be at least 8 characters."""
    r = await client.post(
        "/api/auth/register",
        json={"email": "short@example.com", "name": "Short", "password": "abc"},
    )
    assert r.status_code == 422


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_success(client):
    email = f"login-{uuid.uuid4().hex[:8]}@example.com"
    await register(client, email, "Login User")

    tokens = await login(client, email)
    assert "access_token" in tokens
    assert "refresh_token" in tokens
    assert tokens["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_login_wrong_password(client):
    email = f"wrong-{uuid.uuid4().hex[:8]}@example.com"
    await register(client, email, "User")

    r = await client.post(
        "/api/auth/login", json={"email": email, "password": "wrong_password"}
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_login_nonexistent_user(client):
    r = await client.post(
        "/api/auth/login",
        json={"email": "nobody@example.com", "password": "whatever"},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_login_with_role_sets_pending_role(client):
    """Choosing a role at login parks it as the pending-role signal."""
    email = f"role-{uuid.uuid4().hex[:8]}@example.com"
    await register(client, email, "Role User")
    tokens = await login(client, email, role="coach")
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    assert client.cookies.get("pending_role") == "coach"
    r = await client.get("/api/auth/pending-role", headers=headers)
    assert r.status_code == 200
    assert r.json() == {"role": "coach"}


@pytest.mark.asyncio
async def test_login_with_unknown_role_rejected(client):
    email = f"badrole-{uuid.uuid4().hex[:8]}@example.com"
    await register(client, email, "User")
    r = await client.post(
        "/api/auth/login",
        json={"email": email, "password": PASSWORD, "role": "admin"},
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_pending_role_absent(client, make_user):
    user = await make_user(None)
    r = await client.get("/api/auth/pending-role", headers=user.headers)
    assert r.json() == {"role": None}


# ═══════════════════════════════════════════════════════════
# Token Refresh
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_refresh_token(client):
    email = f"refresh-{uuid.uuid4().hex[:8]}@example.com"
    await register(client, email, "User")
    tokens = await login(client, email)

    r = await client.post(
        "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )
    assert r.status_code == 200
    assert "access_token" in r.json()
    assert "refresh_token" in r.json()


@pytest.mark.asyncio
async def test_refresh_with_access_token_fails(client):
    """Can't use access token as refresh token."""
    email = f"badref-{uuid.uuid4().hex[:8]}@example.com"
    await register(client, email, "User")
    tokens = await login(client, email)

    r = await client.post(
        "/api/auth/refresh", json={"refresh_token": tokens["access_token"]}
    )
    assert r.status_code == 401
    assert r.json()["code"] == "unauthenticated"


@pytest.mark.asyncio
async def test_refresh_token_is_not_an_access_token(client):
    """A refresh token in the Authorization header is refused."""
    token = create_refresh_token(str(uuid.uuid4()))
    r = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert r.status_code == 401


# ═══════════════════════════════════════════════════════════
# Protected Endpoint (/me)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_me_with_token(client, make_user):
    """register → login → use JWT → /me returns the identity."""
    user = await make_user(None, name="Me User")

    r = await client.get("/api/auth/me", headers=user.headers)
    assert r.status_code == 200
    assert r.json()["email"] == user.email
    assert r.json()["id"] == str(user.id)


@pytest.mark.asyncio
async def test_me_without_token(client):
    """No credentials: 401 with a machine-readable code."""
    r = await client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json() == {"detail": "Authentication required", "code": "unauthenticated"}
    assert r.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_with_invalid_token(client):
    r = await client.get(
        "/api/auth/me", headers={"Authorization": "Bearer invalid_token_here"}
    )
    assert r.status_code == 401
