"""Access-scoping authority — who may read or write which rows.

Learn: Every route makes exactly one authorize() call before its single
persistence operation. The authority answers three questions:

  (a) is the caller authenticated?
  (b) does the caller's role permit this class of operation?
  (c) which rows may the operation touch?

Decisions are computed fresh from the database on every call. Nothing is
cached between requests, so a removed coach link or a corrected role takes
effect on the very next request.

Rules:
  read-own / write-own     caller.id == owner id, no role check
  read-as-coach            caller is a coach AND linked to the owner
  write-shared/-shared     authenticated (optionally coach-only, see config)
  link-player              coach; email resolves; not yourself
  unlink-player            coach; absent link is fine
  write-feedback           coach; player exists
  delete-feedback          caller wrote the note
"""

import enum
import uuid
from dataclasses import dataclass
from typing import Optional, Protocol, Union

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.auth.errors import (
    AccessError,
    Forbidden,
    NotFound,
    Unauthenticated,
    ValidationFailed,
)
from padelhub.config import Settings, settings as default_settings
from padelhub.db.models import CoachFeedback, CoachPlayer, User, UserProfile

logger = structlog.get_logger()

COACH_ROLE = "coach"


class Operation(str, enum.Enum):
    READ_OWN = "read-own"
    WRITE_OWN = "write-own"
    READ_AS_COACH = "read-as-coach"
    WRITE_SHARED = "write-shared"
    DELETE_SHARED = "delete-shared"
    LINK_PLAYER = "link-player"
    UNLINK_PLAYER = "unlink-player"
    WRITE_FEEDBACK = "write-feedback"
    DELETE_FEEDBACK = "delete-feedback"


class Caller(Protocol):
    user_id: uuid.UUID


@dataclass(frozen=True)
class ResourceRef:
    """What an operation targets.

    kind names the resource for not-found messages ("goal", "tactic", ...).
    owner_id is set for owned records, player_id / player_email for coach
    operations, record_id for shared rows and feedback notes.
    """

    kind: str
    owner_id: Optional[uuid.UUID] = None
    player_id: Optional[uuid.UUID] = None
    player_email: Optional[str] = None
    record_id: Optional[int] = None

    @classmethod
    def owned(cls, kind: str, owner_id: uuid.UUID) -> "ResourceRef":
        return cls(kind=kind, owner_id=owner_id)

    @classmethod
    def player(cls, player_id: uuid.UUID, kind: str = "player") -> "ResourceRef":
        # Coach reads scope on the player as owner of the rows.
        return cls(kind=kind, owner_id=player_id, player_id=player_id)

    @classmethod
    def player_by_email(cls, email: Optional[str]) -> "ResourceRef":
        return cls(kind="player", player_email=email)

    @classmethod
    def shared(cls, kind: str, record_id: Optional[int] = None) -> "ResourceRef":
        return cls(kind=kind, record_id=record_id)

    @classmethod
    def feedback(cls, note_id: int) -> "ResourceRef":
        return cls(kind="feedback", record_id=note_id)


@dataclass(frozen=True)
class Allow:
    """Access granted. Carries any entity the rule had to resolve."""

    player: Optional[User] = None
    note: Optional[CoachFeedback] = None

    allowed = True


@dataclass(frozen=True)
class Deny:
    """Access refused, with the error the HTTP boundary will surface."""

    error: AccessError

    allowed = False

    @property
    def code(self) -> str:
        return self.error.code


Decision = Union[Allow, Deny]


class AccessAuthority:
    """Per-request access decisions over the caller's session."""

    def __init__(self, db: AsyncSession, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or default_settings
        self._rules = {
            Operation.READ_OWN: self._own,
            Operation.WRITE_OWN: self._own,
            Operation.READ_AS_COACH: self._read_as_coach,
            Operation.WRITE_SHARED: self._shared,
            Operation.DELETE_SHARED: self._shared,
            Operation.LINK_PLAYER: self._link_player,
            Operation.UNLINK_PLAYER: self._unlink_player,
            Operation.WRITE_FEEDBACK: self._write_feedback,
            Operation.DELETE_FEEDBACK: self._delete_feedback,
        }

    async def authorize(
        self,
        caller: Optional[Caller],
        operation: Operation,
        target: ResourceRef,
    ) -> Decision:
        """Decide whether caller may perform operation on target."""
        if caller is None:
            decision: Decision = Deny(Unauthenticated())
        else:
            decision = await self._rules[operation](caller, target)

        if isinstance(decision, Deny):
            logger.info(
                "access.denied",
                operation=operation.value,
                code=decision.code,
                caller=str(caller.user_id) if caller else None,
                resource=target.kind,
            )
        return decision

    async def require(
        self,
        caller: Optional[Caller],
        operation: Operation,
        target: ResourceRef,
    ) -> Allow:
        """authorize(), raising the denial's AccessError instead of returning it."""
        decision = await self.authorize(caller, operation, target)
        if isinstance(decision, Deny):
            raise decision.error
        return decision

    async def require_coach(self, caller: Optional[Caller]) -> Allow:
        """Role-only gate for coach views that target no particular player."""
        if caller is None:
            raise Unauthenticated()
        denied = await self._require_coach(caller)
        if denied:
            logger.info(
                "access.denied",
                operation="coach-view",
                code=denied.code,
                caller=str(caller.user_id),
                resource="coach",
            )
            raise denied.error
        return Allow()

    # ─── Lookups (always against current persisted state) ──────

    async def role_of(self, user_id: uuid.UUID) -> Optional[str]:
        """Stored profile role, or None when the user has not onboarded."""
        result = await self.db.execute(
            select(UserProfile.role).where(UserProfile.user_id == user_id)
        )
        return result.scalars().first()

    async def is_linked(self, coach_id: uuid.UUID, player_id: uuid.UUID) -> bool:
        result = await self.db.execute(
            select(CoachPlayer.id).where(
                CoachPlayer.coach_user_id == coach_id,
                CoachPlayer.player_user_id == player_id,
            )
        )
        return result.scalars().first() is not None

    async def find_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalars().first()

    # ─── Rules ─────────────────────────────────────────────────

    async def _own(self, caller: Caller, target: ResourceRef) -> Decision:
        if target.owner_id is not None and target.owner_id == caller.user_id:
            return Allow()
        return Deny(
            Forbidden(
                f"You can only access your own {target.kind} records",
                code="not_owner",
            )
        )

    async def _require_coach(self, caller: Caller) -> Optional[Deny]:
        # A missing profile counts as "not a coach".
        if await self.role_of(caller.user_id) != COACH_ROLE:
            return Deny(
                Forbidden(
                    "Coach access required",
                    role_required=COACH_ROLE,
                    code="coach_access_required",
                )
            )
        return None

    async def _read_as_coach(self, caller: Caller, target: ResourceRef) -> Decision:
        denied = await self._require_coach(caller)
        if denied:
            return denied
        if target.owner_id is None or not await self.is_linked(
            caller.user_id, target.owner_id
        ):
            # Same answer for "unlinked" and "no such identity".
            return Deny(
                NotFound("player", "Player not found", code="player_not_linked")
            )
        return Allow()

    async def _shared(self, caller: Caller, target: ResourceRef) -> Decision:
        if self.settings.restrict_library_writes_to_coaches:
            denied = await self._require_coach(caller)
            if denied:
                return denied
        return Allow()

    async def _link_player(self, caller: Caller, target: ResourceRef) -> Decision:
        denied = await self._require_coach(caller)
        if denied:
            return denied

        if target.player_id is not None:
            if target.player_id == caller.user_id:
                return self._self_link()
            player = await self.db.get(User, target.player_id)
            if player is None:
                return Deny(NotFound("player", code="player_not_found"))
            return Allow(player=player)

        email = (target.player_email or "").strip()
        if not email:
            return Deny(
                ValidationFailed(
                    "email", "Player email is required", code="email_required"
                )
            )
        player = await self.find_user_by_email(email)
        if player is None:
            return Deny(
                NotFound(
                    "player",
                    "No user found with that email",
                    code="player_not_found",
                )
            )
        if player.id == caller.user_id:
            return self._self_link()
        return Allow(player=player)

    @staticmethod
    def _self_link() -> Deny:
        return Deny(
            ValidationFailed(
                "email", "You cannot add yourself as a player", code="self_link"
            )
        )

    async def _unlink_player(self, caller: Caller, target: ResourceRef) -> Decision:
        denied = await self._require_coach(caller)
        return denied or Allow()

    async def _write_feedback(self, caller: Caller, target: ResourceRef) -> Decision:
        denied = await self._require_coach(caller)
        if denied:
            return denied
        player = (
            await self.db.get(User, target.player_id)
            if target.player_id is not None
            else None
        )
        if player is None:
            return Deny(NotFound("player", code="player_not_found"))
        return Allow(player=player)

    async def _delete_feedback(self, caller: Caller, target: ResourceRef) -> Decision:
        note = (
            await self.db.get(CoachFeedback, target.record_id)
            if target.record_id is not None
            else None
        )
        if note is None:
            return Deny(NotFound("feedback"))
        if note.coach_user_id != caller.user_id:
            return Deny(
                Forbidden(
                    "Only the coach who wrote this feedback can delete it",
                    code="not_author",
                )
            )
        return Allow(note=note)
