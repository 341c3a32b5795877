"""Coach API routes — roster, player views, feedback.

Learn: Two kinds of coach route live here:
- roster/feedback management, gated on the coach role alone
- /coach/players/{player_id}/..., gated on the role AND a link to that
  player (read-as-coach). An unlinked or unknown player id answers 404 so
  the coach cannot probe which identities exist.

Reads reuse the player-side services with the player's id as owner.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.auth.authority import AccessAuthority, Operation, ResourceRef
from padelhub.auth.dependencies import CurrentIdentity, get_authority, get_current_user
from padelhub.db.engine import get_db
from padelhub.schemas.coaching import (
    CoachLinkRead,
    FeedbackCreate,
    FeedbackRead,
    LinkedPlayerRead,
    LinkPlayerRequest,
)
from padelhub.schemas.nutrition import NutritionLogRead
from padelhub.schemas.profile import ProfileRead
from padelhub.schemas.training import (
    GoalRead,
    ShotRead,
    StrengthPlanRead,
    TrainingSessionRead,
    WellbeingRead,
)
from padelhub.services.coach_service import CoachService
from padelhub.services.nutrition_service import NutritionService
from padelhub.services.profile_service import ProfileService
from padelhub.services.training_service import TrainingService

router = APIRouter(prefix="/coach")


def _svc(db: AsyncSession = Depends(get_db)) -> CoachService:
    return CoachService(db)


async def _linked_player(
    player_id: uuid.UUID,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
) -> uuid.UUID:
    """Dependency: the path's player id, once read-as-coach is allowed."""
    await authority.require(
        identity, Operation.READ_AS_COACH, ResourceRef.player(player_id)
    )
    return player_id


# ─── Roster ─────────────────────────────────────────────

@router.get("/players", response_model=list[LinkedPlayerRead])
async def list_players(
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: CoachService = Depends(_svc),
):
    await authority.require_coach(identity)
    return await svc.list_players(identity.user_id)


@router.post("/players", response_model=CoachLinkRead, status_code=201)
async def link_player(
    body: LinkPlayerRequest,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: CoachService = Depends(_svc),
):
    """Add a player to the caller's roster by email."""
    decision = await authority.require(
        identity, Operation.LINK_PLAYER, ResourceRef.player_by_email(body.email)
    )
    return await svc.link(identity.user_id, decision.player.id)


@router.delete("/players/{player_id}", status_code=204)
async def unlink_player(
    player_id: uuid.UUID,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: CoachService = Depends(_svc),
):
    await authority.require(
        identity, Operation.UNLINK_PLAYER, ResourceRef.player(player_id)
    )
    await svc.unlink(identity.user_id, player_id)
    return Response(status_code=204)


# ─── Player views (read-as-coach) ───────────────────────

@router.get("/players/{player_id}/profile", response_model=ProfileRead)
async def player_profile(
    player_id: uuid.UUID = Depends(_linked_player),
    db: AsyncSession = Depends(get_db),
):
    profile = await ProfileService(db).get_profile(player_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Player profile not found")
    return profile


@router.get("/players/{player_id}/goals", response_model=list[GoalRead])
async def player_goals(
    player_id: uuid.UUID = Depends(_linked_player),
    db: AsyncSession = Depends(get_db),
):
    return await TrainingService(db).list_goals(player_id)


@router.get("/players/{player_id}/shots", response_model=list[ShotRead])
async def player_shots(
    player_id: uuid.UUID = Depends(_linked_player),
    db: AsyncSession = Depends(get_db),
):
    return await TrainingService(db).list_shots(player_id)


@router.get("/players/{player_id}/sessions", response_model=list[TrainingSessionRead])
async def player_sessions(
    player_id: uuid.UUID = Depends(_linked_player),
    db: AsyncSession = Depends(get_db),
):
    return await TrainingService(db).list_sessions(player_id)


@router.get("/players/{player_id}/nutrition", response_model=list[NutritionLogRead])
async def player_nutrition(
    player_id: uuid.UUID = Depends(_linked_player),
    db: AsyncSession = Depends(get_db),
):
    return await NutritionService(db).list_logs(player_id)


@router.get("/players/{player_id}/wellbeing", response_model=list[WellbeingRead])
async def player_wellbeing(
    player_id: uuid.UUID = Depends(_linked_player),
    db: AsyncSession = Depends(get_db),
):
    return await TrainingService(db).list_wellbeing(player_id)


@router.get("/players/{player_id}/strength", response_model=list[StrengthPlanRead])
async def player_strength(
    player_id: uuid.UUID = Depends(_linked_player),
    db: AsyncSession = Depends(get_db),
):
    return await TrainingService(db).list_strength(player_id)


@router.get("/players/{player_id}/feedback", response_model=list[FeedbackRead])
async def player_feedback(
    player_id: uuid.UUID = Depends(_linked_player),
    svc: CoachService = Depends(_svc),
):
    return await svc.feedback_for_player(player_id)


# ─── Feedback ───────────────────────────────────────────

@router.post("/players/{player_id}/feedback", response_model=FeedbackRead, status_code=201)
async def create_feedback(
    player_id: uuid.UUID,
    body: FeedbackCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: CoachService = Depends(_svc),
):
    """Write a note to a player. Author and recipient come from the token and URL."""
    decision = await authority.require(
        identity, Operation.WRITE_FEEDBACK, ResourceRef.player(player_id)
    )
    return await svc.create_feedback(
        coach_id=identity.user_id, player_id=decision.player.id, body=body
    )


@router.get("/feedback", response_model=list[FeedbackRead])
async def my_authored_feedback(
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: CoachService = Depends(_svc),
):
    await authority.require_coach(identity)
    return await svc.feedback_by_coach(identity.user_id)


@router.delete("/feedback/{feedback_id}", status_code=204)
async def delete_feedback(
    feedback_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: CoachService = Depends(_svc),
):
    decision = await authority.require(
        identity, Operation.DELETE_FEEDBACK, ResourceRef.feedback(feedback_id)
    )
    await svc.delete_feedback(decision.note)
    return Response(status_code=204)
