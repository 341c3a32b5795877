"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current identity from the request. The identity only
says WHO the caller is; what they may touch is decided per operation by
AccessAuthority (see authority.py).
"""

import uuid
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.auth.authority import AccessAuthority
from padelhub.auth.errors import Unauthenticated
from padelhub.auth.jwt import TokenError, verify_token
from padelhub.config import settings
from padelhub.db.engine import get_db
from padelhub.schemas.profile import Role


class CurrentIdentity:
    """The authenticated identity making the request."""

    def __init__(self, user_id: uuid.UUID, email: Optional[str] = None):
        self.user_id = user_id
        self.email = email

    def __repr__(self) -> str:
        return f"CurrentIdentity(user_id={self.user_id!s}, email={self.email!r})"


async def get_current_user_optional(
    authorization: Optional[str] = Header(None),
) -> Optional[CurrentIdentity]:
    """Extract current identity (optional — returns None if no auth header).

    A malformed or expired token is still a 401: only the total absence
    of credentials yields None.
    """
    if authorization and authorization.startswith("Bearer "):
        token = authorization[7:]
        return _authenticate_jwt(token)
    return None


async def get_current_user(
    identity: Optional[CurrentIdentity] = Depends(get_current_user_optional),
) -> CurrentIdentity:
    """Extract current identity (required — 401 if no auth)."""
    if not identity:
        raise Unauthenticated()
    return identity


def _authenticate_jwt(token: str) -> CurrentIdentity:
    """Authenticate via JWT access token."""
    try:
        payload = verify_token(token)
    except TokenError as e:
        raise Unauthenticated(str(e))
    if payload.get("type") != "access":
        raise Unauthenticated("Not an access token")
    try:
        user_id = uuid.UUID(payload["sub"])
    except (KeyError, ValueError):
        raise Unauthenticated("Invalid subject")
    return CurrentIdentity(user_id=user_id, email=payload.get("email"))


def get_pending_role(request: Request) -> Optional[Role]:
    """Read the pending-role signal set at login.

    Anything other than a known role is treated as no signal.
    """
    raw = request.cookies.get(settings.pending_role_cookie)
    if not raw:
        return None
    try:
        return Role(raw)
    except ValueError:
        return None


def get_authority(db: AsyncSession = Depends(get_db)) -> AccessAuthority:
    return AccessAuthority(db)
