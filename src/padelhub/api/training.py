"""Training API routes — goals, shots, sessions, wellbeing, strength.

Learn: Every route here acts on the caller's own rows. The owner id is
always the authenticated identity, never something the client sends.
Routes that address a row by id load it first, then let the authority
compare the row's owner with the caller.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.auth.authority import AccessAuthority, Operation, ResourceRef
from padelhub.auth.dependencies import CurrentIdentity, get_authority, get_current_user
from padelhub.db.engine import get_db
from padelhub.schemas.training import (
    GoalCreate,
    GoalRead,
    ShotRead,
    ShotUpsert,
    StrengthPlanCreate,
    StrengthPlanRead,
    TrainingSessionCreate,
    TrainingSessionRead,
    WellbeingCreate,
    WellbeingRead,
)
from padelhub.services.training_service import TrainingService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> TrainingService:
    return TrainingService(db)


async def _own(
    authority: AccessAuthority,
    identity: CurrentIdentity,
    operation: Operation,
    kind: str,
) -> None:
    await authority.require(
        identity, operation, ResourceRef.owned(kind, identity.user_id)
    )


# ─── Goals ──────────────────────────────────────────────

@router.get("/goals", response_model=list[GoalRead])
async def list_goals(
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: TrainingService = Depends(_svc),
):
    await _own(authority, identity, Operation.READ_OWN, "goal")
    return await svc.list_goals(identity.user_id)


@router.post("/goals", response_model=GoalRead, status_code=201)
async def create_goal(
    body: GoalCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: TrainingService = Depends(_svc),
):
    await _own(authority, identity, Operation.WRITE_OWN, "goal")
    return await svc.create_goal(identity.user_id, body)


@router.patch("/goals/{goal_id}/toggle", response_model=GoalRead)
async def toggle_goal(
    goal_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: TrainingService = Depends(_svc),
):
    """Flip a goal between done and not done."""
    goal = await svc.get_goal(goal_id)
    await authority.require(
        identity, Operation.WRITE_OWN, ResourceRef.owned("goal", goal.user_id)
    )
    return await svc.toggle_goal(goal)


# ─── Shots ──────────────────────────────────────────────

@router.get("/shots", response_model=list[ShotRead])
async def list_shots(
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: TrainingService = Depends(_svc),
):
    await _own(authority, identity, Operation.READ_OWN, "shot")
    return await svc.list_shots(identity.user_id)


@router.post("/shots", response_model=ShotRead)
async def upsert_shot(
    body: ShotUpsert,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: TrainingService = Depends(_svc),
):
    """Save the rating for one shot key, replacing any previous one."""
    await _own(authority, identity, Operation.WRITE_OWN, "shot")
    return await svc.upsert_shot(identity.user_id, body)


# ─── Sessions ───────────────────────────────────────────

@router.get("/sessions", response_model=list[TrainingSessionRead])
async def list_sessions(
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: TrainingService = Depends(_svc),
):
    await _own(authority, identity, Operation.READ_OWN, "session")
    return await svc.list_sessions(identity.user_id)


@router.post("/sessions", response_model=TrainingSessionRead, status_code=201)
async def create_session(
    body: TrainingSessionCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: TrainingService = Depends(_svc),
):
    await _own(authority, identity, Operation.WRITE_OWN, "session")
    return await svc.create_session(identity.user_id, body)


# ─── Wellbeing ──────────────────────────────────────────

@router.get("/wellbeing", response_model=list[WellbeingRead])
async def list_wellbeing(
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: TrainingService = Depends(_svc),
):
    await _own(authority, identity, Operation.READ_OWN, "wellbeing")
    return await svc.list_wellbeing(identity.user_id)


@router.post("/wellbeing", response_model=WellbeingRead, status_code=201)
async def create_wellbeing(
    body: WellbeingCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: TrainingService = Depends(_svc),
):
    await _own(authority, identity, Operation.WRITE_OWN, "wellbeing")
    return await svc.create_wellbeing(identity.user_id, body)


# ─── Strength plans ─────────────────────────────────────

@router.get("/strength", response_model=list[StrengthPlanRead])
async def list_strength(
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: TrainingService = Depends(_svc),
):
    await _own(authority, identity, Operation.READ_OWN, "strength plan")
    return await svc.list_strength(identity.user_id)


@router.post("/strength", response_model=StrengthPlanRead, status_code=201)
async def create_strength(
    body: StrengthPlanCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: TrainingService = Depends(_svc),
):
    await _own(authority, identity, Operation.WRITE_OWN, "strength plan")
    return await svc.create_strength(identity.user_id, body)


@router.delete("/strength/{plan_id}", status_code=204)
async def delete_strength(
    plan_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: TrainingService = Depends(_svc),
):
    plan = await svc.get_strength(plan_id)
    await authority.require(
        identity, Operation.WRITE_OWN, ResourceRef.owned("strength plan", plan.user_id)
    )
    await svc.delete_strength(plan)
    return Response(status_code=204)
