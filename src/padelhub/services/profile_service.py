"""Profile service — onboarding upsert and reconcile-on-read.

Learn: A profile is created lazily by the first onboarding write. Reading
a missing profile is the "needs onboarding" state, returned as None rather
than raised.

Reconcile-on-read: the login page lets a user pick "player" or "coach"
before they have a profile. That choice travels as a pending-role signal.
The first profile read after login compares it with the stored role and,
if they disagree, rewrites the stored role once. The step is explicit
(reconcile_role) and idempotent: once roles agree it writes nothing.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.db.models import UserProfile
from padelhub.db.upsert import upsert_insert
from padelhub.events.store import EventStore
from padelhub.events.types import PROFILE_CREATED, PROFILE_ROLE_RECONCILED
from padelhub.schemas.profile import ProfileUpsert, Role

logger = structlog.get_logger()


@dataclass
class ProfileReadResult:
    """Outcome of a profile read.

    signal_consumed tells the caller the pending-role signal has been
    applied (or found already satisfied) and can be cleared.
    """

    profile: Optional[UserProfile]
    signal_consumed: bool = False


class ProfileService:
    """Business logic for user profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.events = EventStore(db)

    async def get_profile(self, user_id: uuid.UUID) -> Optional[UserProfile]:
        result = await self.db.execute(
            select(UserProfile).where(UserProfile.user_id == user_id)
        )
        return result.scalars().first()

    async def upsert_profile(
        self, user_id: uuid.UUID, body: ProfileUpsert
    ) -> UserProfile:
        """Create the caller's profile, or update the fields the client sent."""
        values = body.model_dump(exclude_unset=True)
        role = values.pop("role", None)
        if role is not None:
            values["role"] = role.value

        created = await self._insert_new(
            user_id, {"role": Role.PLAYER.value, **values}
        )
        if created is not None:
            await self.events.append(
                stream_id=f"user:{user_id}",
                event_type=PROFILE_CREATED,
                data={"role": created.role, "name": created.name},
                metadata={"actor_id": str(user_id)},
            )
            await self.db.commit()
            return created

        profile = await self._upsert(user_id, values)
        await self.db.commit()
        return profile

    async def read_own(
        self, user_id: uuid.UUID, pending_role: Optional[Role] = None
    ) -> ProfileReadResult:
        """Read the caller's profile, reconciling the role with pending_role."""
        profile = await self.get_profile(user_id)
        if profile is None:
            # Onboarding has not happened; keep the signal for later.
            return ProfileReadResult(profile=None)
        if pending_role is None:
            return ProfileReadResult(profile=profile)
        profile = await self.reconcile_role(profile, pending_role)
        return ProfileReadResult(profile=profile, signal_consumed=True)

    async def reconcile_role(
        self, profile: UserProfile, pending_role: Role
    ) -> UserProfile:
        """Overwrite the stored role with pending_role if they differ."""
        if profile.role == pending_role.value:
            return profile

        previous = profile.role
        updated = await self._upsert(
            profile.user_id,
            {"name": profile.name, "role": pending_role.value},
        )
        await self.events.append(
            stream_id=f"user:{profile.user_id}",
            event_type=PROFILE_ROLE_RECONCILED,
            data={"from": previous, "to": pending_role.value},
            metadata={"actor_id": str(profile.user_id)},
        )
        await self.db.commit()
        logger.info(
            "profile.role_reconciled",
            user_id=str(profile.user_id),
            previous=previous,
            role=pending_role.value,
        )
        return updated

    async def _upsert(self, user_id: uuid.UUID, values: dict) -> UserProfile:
        stmt = upsert_insert(self.db, UserProfile).values(user_id=user_id, **values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserProfile.user_id],
            set_=values,
        ).returning(UserProfile)
        result = await self.db.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        return result.one()

    async def _insert_new(
        self, user_id: uuid.UUID, values: dict
    ) -> Optional[UserProfile]:
        """Insert a profile; None if user_id already has one."""
        stmt = (
            upsert_insert(self.db, UserProfile)
            .values(user_id=user_id, **values)
            .on_conflict_do_nothing(index_elements=[UserProfile.user_id])
            .returning(UserProfile)
        )
        result = await self.db.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        return result.first()
