"""Coach workflow tests — roster, scoped player views, feedback.

Learn: Tests walk the scenarios a coach actually goes through:
1. Link a player by email (idempotent, never yourself)
2. Read that player's data; unlinked players answer 404
3. Unlink → the very next read is 404
4. Write feedback (authorship stamped from the token) and delete it
   (author only)
"""

import uuid

import pytest

from padelhub.services.coach_service import DEFAULT_COACH_NAME


# ═══════════════════════════════════════════════════════════
# Roster
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_list_players(client, coach_with_player):
    coach, player, _ = coach_with_player
    r = await client.get("/api/coach/players", headers=coach.headers)
    assert r.status_code == 200
    assert r.json() == [
        {
            "player_user_id": str(player.id),
            "name": "Pablo Player",
            "email": player.email,
            "role": "player",
            "level": None,
        }
    ]


@pytest.mark.asyncio
async def test_player_without_profile_listed_with_defaults(client, make_user):
    coach = await make_user("coach")
    newcomer = await make_user(None, name="Nina New")
    await client.post(
        "/api/coach/players", json={"email": newcomer.email}, headers=coach.headers
    )
    players = (await client.get("/api/coach/players", headers=coach.headers)).json()
    assert players[0]["name"] == "Nina New"
    assert players[0]["role"] == "player"


@pytest.mark.asyncio
async def test_players_cannot_use_coach_routes(client, make_user):
    player = await make_user("player")
    other = await make_user("player")

    r = await client.get("/api/coach/players", headers=player.headers)
    assert r.status_code == 403
    assert r.json() == {
        "detail": "Coach access required",
        "code": "coach_access_required",
        "role_required": "coach",
    }

    r = await client.post(
        "/api/coach/players", json={"email": other.email}, headers=player.headers
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_link_is_idempotent(client, coach_with_player):
    coach, player, _ = coach_with_player
    r1 = await client.post(
        "/api/coach/players", json={"email": player.email}, headers=coach.headers
    )
    r2 = await client.post(
        "/api/coach/players", json={"email": player.email.upper()}, headers=coach.headers
    )
    assert r1.status_code == r2.status_code == 201
    assert r1.json()["id"] == r2.json()["id"]

    players = (await client.get("/api/coach/players", headers=coach.headers)).json()
    assert len(players) == 1


@pytest.mark.asyncio
async def test_cannot_link_self(client, make_user):
    coach = await make_user("coach")
    r = await client.post(
        "/api/coach/players", json={"email": coach.email}, headers=coach.headers
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "You cannot add yourself as a player"
    assert r.json()["field"] == "email"
    assert (await client.get("/api/coach/players", headers=coach.headers)).json() == []


@pytest.mark.asyncio
async def test_link_errors(client, make_user):
    coach = await make_user("coach")

    r = await client.post("/api/coach/players", json={}, headers=coach.headers)
    assert r.status_code == 400
    assert r.json()["code"] == "email_required"

    r = await client.post(
        "/api/coach/players", json={"email": "ghost@example.com"}, headers=coach.headers
    )
    assert r.status_code == 404
    assert r.json()["detail"] == "No user found with that email"


# ═══════════════════════════════════════════════════════════
# Scoped player views
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_linked_coach_sees_player_data(client, coach_with_player):
    coach, player, _ = coach_with_player
    await client.post(
        "/api/goals", json={"title": "Win club final", "target": "June"}, headers=player.headers
    )
    await client.post(
        "/api/shots",
        json={"key": "smash", "label": "Smash", "level": 6, "trend": "up"},
        headers=player.headers,
    )
    await client.post("/api/wellbeing", json={"sleep": 6}, headers=player.headers)

    base = f"/api/coach/players/{player.id}"
    profile = await client.get(f"{base}/profile", headers=coach.headers)
    assert profile.status_code == 200
    assert profile.json()["name"] == "Pablo Player"

    goals = (await client.get(f"{base}/goals", headers=coach.headers)).json()
    assert [g["title"] for g in goals] == ["Win club final"]
    shots = (await client.get(f"{base}/shots", headers=coach.headers)).json()
    assert shots[0]["key"] == "smash"
    wellbeing = (await client.get(f"{base}/wellbeing", headers=coach.headers)).json()
    assert wellbeing[0]["sleep"] == 6

    for view in ("sessions", "nutrition", "strength", "feedback"):
        r = await client.get(f"{base}/{view}", headers=coach.headers)
        assert r.status_code == 200, view
        assert r.json() == []


@pytest.mark.asyncio
async def test_unlinked_player_is_not_found(client, coach_with_player):
    coach, _, other = coach_with_player
    for view in ("profile", "goals", "shots", "sessions", "nutrition", "wellbeing", "strength", "feedback"):
        r = await client.get(f"/api/coach/players/{other.id}/{view}", headers=coach.headers)
        assert r.status_code == 404, view
        assert r.json()["code"] == "player_not_linked"


@pytest.mark.asyncio
async def test_nonexistent_player_is_not_found(client, make_user):
    coach = await make_user("coach")
    r = await client.get(f"/api/coach/players/{uuid.uuid4()}/goals", headers=coach.headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_linked_player_without_profile(client, make_user):
    coach = await make_user("coach")
    newcomer = await make_user(None)
    await client.post(
        "/api/coach/players", json={"email": newcomer.email}, headers=coach.headers
    )
    r = await client.get(
        f"/api/coach/players/{newcomer.id}/profile", headers=coach.headers
    )
    assert r.status_code == 404
    assert r.json()["detail"] == "Player profile not found"


@pytest.mark.asyncio
async def test_player_cannot_read_another_player_via_coach_routes(client, coach_with_player):
    _, player, other = coach_with_player
    r = await client.get(f"/api/coach/players/{other.id}/goals", headers=player.headers)
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_unlink_revokes_access_immediately(client, coach_with_player):
    coach, player, _ = coach_with_player
    base = f"/api/coach/players/{player.id}"
    assert (await client.get(f"{base}/goals", headers=coach.headers)).status_code == 200

    r = await client.delete(f"/api/coach/players/{player.id}", headers=coach.headers)
    assert r.status_code == 204

    assert (await client.get(f"{base}/goals", headers=coach.headers)).status_code == 404
    assert (await client.get("/api/coach/players", headers=coach.headers)).json() == []

    # Unlinking again is fine
    r = await client.delete(f"/api/coach/players/{player.id}", headers=coach.headers)
    assert r.status_code == 204


# ═══════════════════════════════════════════════════════════
# Feedback
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_feedback_authorship_is_stamped(client, coach_with_player):
    """Ids in the body are ignored; author and recipient come from token and URL."""
    coach, player, other = coach_with_player
    r = await client.post(
        f"/api/coach/players/{player.id}/feedback",
        json={
            "category": "technique",
            "message": "Keep the paddle up on the volley",
            "coach_user_id": str(other.id),
            "player_user_id": str(other.id),
        },
        headers=coach.headers,
    )
    assert r.status_code == 201
    note = r.json()
    assert note["coach_user_id"] == str(coach.id)
    assert note["player_user_id"] == str(player.id)
    assert note["category"] == "technique"

    inbox = (await client.get("/api/feedback", headers=other.headers)).json()
    assert inbox == []


@pytest.mark.asyncio
async def test_feedback_category_validated(client, coach_with_player):
    coach, player, _ = coach_with_player
    r = await client.post(
        f"/api/coach/players/{player.id}/feedback",
        json={"category": "gossip", "message": "hi"},
        headers=coach.headers,
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_feedback_defaults_to_general(client, coach_with_player):
    coach, player, _ = coach_with_player
    r = await client.post(
        f"/api/coach/players/{player.id}/feedback",
        json={"message": "Nice session"},
        headers=coach.headers,
    )
    assert r.json()["category"] == "general"


@pytest.mark.asyncio
async def test_feedback_to_unknown_player(client, make_user):
    coach = await make_user("coach")
    r = await client.post(
        f"/api/coach/players/{uuid.uuid4()}/feedback",
        json={"message": "hello?"},
        headers=coach.headers,
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_player_inbox_newest_first_with_coach_name(client, coach_with_player, make_user):
    coach, player, _ = coach_with_player
    for message in ("first", "second"):
        await client.post(
            f"/api/coach/players/{player.id}/feedback",
            json={"message": message},
            headers=coach.headers,
        )

    r = await client.get("/api/feedback", headers=player.headers)
    assert r.status_code == 200
    inbox = r.json()
    assert [n["message"] for n in inbox] == ["second", "first"]
    assert inbox[0]["coach_name"] == "Carla Coach"

    r = await client.get(f"/api/coach/players/{player.id}/feedback", headers=coach.headers)
    assert len(r.json()) == 2


@pytest.mark.asyncio
async def test_coach_name_falls_back(client, make_user, session_factory):
    """Feedback from a coach whose profile is gone shows a generic name."""
    from padelhub.db.models import UserProfile
    from sqlalchemy import delete

    coach = await make_user("coach")
    player = await make_user("player")
    await client.post(
        f"/api/coach/players/{player.id}/feedback",
        json={"message": "hello"},
        headers=coach.headers,
    )
    async with session_factory() as db:
        await db.execute(delete(UserProfile).where(UserProfile.user_id == coach.id))
        await db.commit()

    inbox = (await client.get("/api/feedback", headers=player.headers)).json()
    assert inbox[0]["coach_name"] == DEFAULT_COACH_NAME


@pytest.mark.asyncio
async def test_coach_lists_authored_feedback(client, coach_with_player):
    coach, player, other = coach_with_player
    await client.post(
        f"/api/coach/players/{player.id}/feedback",
        json={"message": "to pablo"},
        headers=coach.headers,
    )
    await client.post(
        f"/api/coach/players/{other.id}/feedback",
        json={"message": "to olga"},
        headers=coach.headers,
    )
    authored = (await client.get("/api/coach/feedback", headers=coach.headers)).json()
    assert {n["message"] for n in authored} == {"to pablo", "to olga"}


@pytest.mark.asyncio
async def test_only_author_deletes_feedback(client, coach_with_player, make_user):
    coach, player, _ = coach_with_player
    other_coach = await make_user("coach")
    note = (
        await client.post(
            f"/api/coach/players/{player.id}/feedback",
            json={"message": "Split step earlier"},
            headers=coach.headers,
        )
    ).json()

    r = await client.delete(f"/api/coach/feedback/{note['id']}", headers=other_coach.headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "Only the coach who wrote this feedback can delete it"
    assert len((await client.get("/api/feedback", headers=player.headers)).json()) == 1

    r = await client.delete(f"/api/coach/feedback/{note['id']}", headers=coach.headers)
    assert r.status_code == 204
    assert (await client.get("/api/feedback", headers=player.headers)).json() == []

    r = await client.delete(f"/api/coach/feedback/{note['id']}", headers=coach.headers)
    assert r.status_code == 404
