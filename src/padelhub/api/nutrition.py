"""Nutrition API routes — meal logs and the daily macro goal."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.auth.authority import AccessAuthority, Operation, ResourceRef
from padelhub.auth.dependencies import CurrentIdentity, get_authority, get_current_user
from padelhub.db.engine import get_db
from padelhub.schemas.nutrition import (
    NutritionGoalRead,
    NutritionGoalUpsert,
    NutritionLogCreate,
    NutritionLogRead,
)
from padelhub.services.nutrition_service import NutritionService

router = APIRouter(prefix="/nutrition")


def _svc(db: AsyncSession = Depends(get_db)) -> NutritionService:
    return NutritionService(db)


@router.get("/logs", response_model=list[NutritionLogRead])
async def list_logs(
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: NutritionService = Depends(_svc),
):
    await authority.require(
        identity, Operation.READ_OWN, ResourceRef.owned("nutrition log", identity.user_id)
    )
    return await svc.list_logs(identity.user_id)


@router.post("/logs", response_model=NutritionLogRead, status_code=201)
async def create_log(
    body: NutritionLogCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: NutritionService = Depends(_svc),
):
    await authority.require(
        identity, Operation.WRITE_OWN, ResourceRef.owned("nutrition log", identity.user_id)
    )
    return await svc.create_log(identity.user_id, body)


@router.get("/goal", response_model=NutritionGoalRead)
async def get_goal(
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: NutritionService = Depends(_svc),
):
    await authority.require(
        identity, Operation.READ_OWN, ResourceRef.owned("nutrition goal", identity.user_id)
    )
    goal = await svc.get_goal(identity.user_id)
    if goal is None:
        raise HTTPException(status_code=404, detail="Nutrition goal not found")
    return goal


@router.post("/goal", response_model=NutritionGoalRead)
async def upsert_goal(
    body: NutritionGoalUpsert,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: NutritionService = Depends(_svc),
):
    """Set the daily macro targets, replacing any previous ones."""
    await authority.require(
        identity, Operation.WRITE_OWN, ResourceRef.owned("nutrition goal", identity.user_id)
    )
    return await svc.upsert_goal(identity.user_id, body)
