"""Profile API routes.

Learn: GET /profiles/me is where the pending-role signal from login gets
applied. The route reads the cookie, hands it to the service as an
explicit argument, and clears the cookie once the service reports it
used it. A 404 here means "onboarding needed", not an error.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.auth.authority import AccessAuthority, Operation, ResourceRef
from padelhub.auth.dependencies import (
    CurrentIdentity,
    get_authority,
    get_current_user,
    get_pending_role,
)
from padelhub.config import settings
from padelhub.db.engine import get_db
from padelhub.schemas.profile import ProfileRead, ProfileUpsert, Role
from padelhub.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles")


def _svc(db: AsyncSession = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


@router.get("/me", response_model=ProfileRead)
async def read_my_profile(
    response: Response,
    identity: CurrentIdentity = Depends(get_current_user),
    pending_role: Optional[Role] = Depends(get_pending_role),
    authority: AccessAuthority = Depends(get_authority),
    svc: ProfileService = Depends(_svc),
):
    await authority.require(
        identity, Operation.READ_OWN, ResourceRef.owned("profile", identity.user_id)
    )
    result = await svc.read_own(identity.user_id, pending_role)
    if result.profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    if result.signal_consumed:
        response.delete_cookie(settings.pending_role_cookie)
    return result.profile


@router.post("", response_model=ProfileRead)
async def upsert_my_profile(
    body: ProfileUpsert,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: ProfileService = Depends(_svc),
):
    """Create or update the caller's profile (onboarding)."""
    await authority.require(
        identity, Operation.WRITE_OWN, ResourceRef.owned("profile", identity.user_id)
    )
    return await svc.upsert_profile(identity.user_id, body)
