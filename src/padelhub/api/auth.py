"""Auth API — the identity provider.

Learn: Routes for registration and token issue:
- POST /auth/register → create an identity (no profile yet)
- POST /auth/login → email/password → JWT tokens, optional role choice
- POST /auth/refresh → refresh token → new token pair
- GET /auth/me → current identity
- GET /auth/pending-role → the role picked at login, if still pending

The role picked on the login screen is NOT written to the profile here.
It is parked in a cookie and applied by the next profile read, which is
the only place that knows whether a profile exists yet.
"""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.auth.dependencies import CurrentIdentity, get_current_user, get_pending_role
from padelhub.auth.errors import Unauthenticated
from padelhub.auth.jwt import (
    TokenError,
    create_access_token,
    create_refresh_token,
    verify_token,
)
from padelhub.auth.password import hash_password, verify_password
from padelhub.config import settings
from padelhub.db.engine import get_db
from padelhub.db.models import User
from padelhub.schemas.profile import PendingRoleRead, Role

router = APIRouter(prefix="/auth")


# ─── Schemas ─────────────────────────────────────────────


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(min_length=8)


class LoginRequest(BaseModel):
    email: str
    password: str
    role: Optional[Role] = None


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str


class UserRead(BaseModel):
    id: uuid.UUID
    email: str
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}


def _normalize_email(email: str) -> str:
    return email.strip().lower()


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=UserRead, status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create a new identity."""
    email = _normalize_email(body.email)
    result = await db.execute(select(User).where(User.email == email))
    if result.scalars().first():
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(
        email=email,
        name=body.name,
        password_hash=hash_password(body.password),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email.
        await db.rollback()
        raise HTTPException(status_code=409, detail="Email already registered")
    await db.refresh(user)
    return user


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Login with email and password → JWT tokens.

    If a role is given it becomes the pending-role signal for the next
    profile read.
    """
    result = await db.execute(
        select(User).where(User.email == _normalize_email(body.email))
    )
    user = result.scalars().first()

    if not user or not user.password_hash:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if body.role is not None:
        response.set_cookie(
            settings.pending_role_cookie,
            body.role.value,
            httponly=True,
            secure=settings.cookie_secure,
            samesite="lax",
        )

    return TokenResponse(
        access_token=create_access_token(str(user.id), email=user.email),
        refresh_token=create_refresh_token(str(user.id), email=user.email),
    )


# ─── Refresh ────────────────────────────────────────────


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest):
    """Exchange a refresh token for a new token pair."""
    try:
        payload = verify_token(body.refresh_token)
    except TokenError as e:
        raise Unauthenticated(str(e))
    if payload.get("type") != "refresh":
        raise Unauthenticated("Not a refresh token")

    email = payload.get("email")
    return TokenResponse(
        access_token=create_access_token(payload["sub"], email=email),
        refresh_token=create_refresh_token(payload["sub"], email=email),
    )


# ─── Current identity ───────────────────────────────────


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated user's info."""
    user = await db.get(User, identity.user_id)
    if not user:
        raise Unauthenticated("Unknown user")
    return user


@router.get("/pending-role", response_model=PendingRoleRead)
async def pending_role(
    identity: CurrentIdentity = Depends(get_current_user),
    role: Optional[Role] = Depends(get_pending_role),
):
    """The role chosen at login that has not yet been applied."""
    return PendingRoleRead(role=role)
