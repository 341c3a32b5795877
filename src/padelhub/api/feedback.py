"""Player feedback inbox."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.auth.authority import AccessAuthority, Operation, ResourceRef
from padelhub.auth.dependencies import CurrentIdentity, get_authority, get_current_user
from padelhub.db.engine import get_db
from padelhub.schemas.coaching import FeedbackRead
from padelhub.services.coach_service import CoachService

router = APIRouter()


@router.get("/feedback", response_model=list[FeedbackRead])
async def my_feedback(
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    db: AsyncSession = Depends(get_db),
):
    """Notes written to the caller by any coach, newest first."""
    await authority.require(
        identity, Operation.READ_OWN, ResourceRef.owned("feedback", identity.user_id)
    )
    return await CoachService(db).feedback_for_player(identity.user_id)
