"""Shared library routes — tactics and videos.

Learn: Reads only need a signed-in caller (enforced by the router-level
auth dependency). Writes go through the authority as shared operations so
a deployment can restrict them to coaches from config.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.auth.authority import AccessAuthority, Operation, ResourceRef
from padelhub.auth.dependencies import CurrentIdentity, get_authority, get_current_user
from padelhub.db.engine import get_db
from padelhub.schemas.library import TacticCreate, TacticRead, VideoCreate, VideoRead
from padelhub.services.library_service import LibraryService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> LibraryService:
    return LibraryService(db)


# ─── Tactics ────────────────────────────────────────────

@router.get("/tactics", response_model=list[TacticRead])
async def list_tactics(svc: LibraryService = Depends(_svc)):
    return await svc.list_tactics()


@router.post("/tactics", response_model=TacticRead, status_code=201)
async def create_tactic(
    body: TacticCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: LibraryService = Depends(_svc),
):
    await authority.require(identity, Operation.WRITE_SHARED, ResourceRef.shared("tactic"))
    return await svc.create_tactic(body, actor_id=identity.user_id)


@router.delete("/tactics/{tactic_id}", status_code=204)
async def delete_tactic(
    tactic_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: LibraryService = Depends(_svc),
):
    await authority.require(
        identity, Operation.DELETE_SHARED, ResourceRef.shared("tactic", tactic_id)
    )
    await svc.delete_tactic(tactic_id, actor_id=identity.user_id)
    return Response(status_code=204)


# ─── Videos ─────────────────────────────────────────────

@router.get("/videos", response_model=list[VideoRead])
async def list_videos(svc: LibraryService = Depends(_svc)):
    return await svc.list_videos()


@router.post("/videos", response_model=VideoRead, status_code=201)
async def create_video(
    body: VideoCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: LibraryService = Depends(_svc),
):
    await authority.require(identity, Operation.WRITE_SHARED, ResourceRef.shared("video"))
    return await svc.create_video(body, actor_id=identity.user_id)


@router.delete("/videos/{video_id}", status_code=204)
async def delete_video(
    video_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    authority: AccessAuthority = Depends(get_authority),
    svc: LibraryService = Depends(_svc),
):
    await authority.require(
        identity, Operation.DELETE_SHARED, ResourceRef.shared("video", video_id)
    )
    await svc.delete_video(video_id, actor_id=identity.user_id)
    return Response(status_code=204)
