"""Coach service — player links and feedback notes.

Learn: A coach link is the only thing that lets one identity see another
identity's rows. Linking is idempotent (INSERT ... ON CONFLICT DO NOTHING
on the unique pair) and unlinking an absent link is not an error.

Feedback notes are stamped here with the coach and player ids passed in
by the route, which takes them from the token and the URL. Nothing in the
request body can change who a note is from or to.
"""

import uuid

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.db.models import CoachFeedback, CoachPlayer, User, UserProfile
from padelhub.db.upsert import upsert_insert
from padelhub.events.store import EventStore
from padelhub.events.types import (
    FEEDBACK_CREATED,
    FEEDBACK_DELETED,
    PLAYER_LINKED,
    PLAYER_UNLINKED,
)
from padelhub.schemas.coaching import FeedbackCreate, FeedbackRead, LinkedPlayerRead

logger = structlog.get_logger()

DEFAULT_COACH_NAME = "Coach"


class CoachService:
    """Business logic for coach/player relationships."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.events = EventStore(db)

    # ─── Links ──────────────────────────────────────────

    async def list_players(self, coach_id: uuid.UUID) -> list[LinkedPlayerRead]:
        """Players linked to coach_id, with profile details when onboarded."""
        result = await self.db.execute(
            select(User, UserProfile)
            .join(CoachPlayer, CoachPlayer.player_user_id == User.id)
            .outerjoin(UserProfile, UserProfile.user_id == User.id)
            .where(CoachPlayer.coach_user_id == coach_id)
            .order_by(CoachPlayer.created_at, CoachPlayer.id)
        )
        return [
            LinkedPlayerRead(
                player_user_id=user.id,
                name=profile.name if profile else user.name,
                email=user.email,
                role=profile.role if profile else "player",
                level=profile.level if profile else None,
            )
            for user, profile in result.all()
        ]

    async def link(self, coach_id: uuid.UUID, player_id: uuid.UUID) -> CoachPlayer:
        """Link a player to a coach. Linking twice returns the same link."""
        stmt = (
            upsert_insert(self.db, CoachPlayer)
            .values(coach_user_id=coach_id, player_user_id=player_id)
            .on_conflict_do_nothing(
                index_elements=[CoachPlayer.coach_user_id, CoachPlayer.player_user_id]
            )
            .returning(CoachPlayer.id)
        )
        # A row comes back only when this call inserted it.
        created = (await self.db.execute(stmt)).first() is not None

        link = (
            await self.db.execute(
                select(CoachPlayer).where(
                    CoachPlayer.coach_user_id == coach_id,
                    CoachPlayer.player_user_id == player_id,
                )
            )
        ).scalar_one()

        if created:
            await self.events.append(
                stream_id=f"coach:{coach_id}",
                event_type=PLAYER_LINKED,
                data={"player_user_id": str(player_id)},
                metadata={"actor_id": str(coach_id)},
            )
            logger.info(
                "coach.player_linked",
                coach_id=str(coach_id),
                player_id=str(player_id),
            )
        await self.db.commit()
        return link

    async def unlink(self, coach_id: uuid.UUID, player_id: uuid.UUID) -> bool:
        """Remove a link. Returns whether a link existed."""
        result = await self.db.execute(
            delete(CoachPlayer).where(
                CoachPlayer.coach_user_id == coach_id,
                CoachPlayer.player_user_id == player_id,
            )
        )
        removed = result.rowcount > 0
        if removed:
            await self.events.append(
                stream_id=f"coach:{coach_id}",
                event_type=PLAYER_UNLINKED,
                data={"player_user_id": str(player_id)},
                metadata={"actor_id": str(coach_id)},
            )
            logger.info(
                "coach.player_unlinked",
                coach_id=str(coach_id),
                player_id=str(player_id),
            )
        await self.db.commit()
        return removed

    # ─── Feedback ───────────────────────────────────────

    async def create_feedback(
        self,
        *,
        coach_id: uuid.UUID,
        player_id: uuid.UUID,
        body: FeedbackCreate,
    ) -> CoachFeedback:
        note = CoachFeedback(
            coach_user_id=coach_id,
            player_user_id=player_id,
            category=body.category.value,
            message=body.message,
        )
        self.db.add(note)
        await self.db.flush()

        await self.events.append(
            stream_id=f"player:{player_id}",
            event_type=FEEDBACK_CREATED,
            data={"feedback_id": note.id, "category": note.category},
            metadata={"actor_id": str(coach_id)},
        )
        await self.db.commit()
        await self.db.refresh(note)
        logger.info(
            "feedback.created",
            feedback_id=note.id,
            coach_id=str(coach_id),
            player_id=str(player_id),
        )
        return note

    async def delete_feedback(self, note: CoachFeedback) -> None:
        note_id, coach_id, player_id = note.id, note.coach_user_id, note.player_user_id
        await self.db.delete(note)
        await self.events.append(
            stream_id=f"player:{player_id}",
            event_type=FEEDBACK_DELETED,
            data={"feedback_id": note_id},
            metadata={"actor_id": str(coach_id)},
        )
        await self.db.commit()
        logger.info("feedback.deleted", feedback_id=note_id, coach_id=str(coach_id))

    async def feedback_by_coach(self, coach_id: uuid.UUID) -> list[CoachFeedback]:
        """Every note this coach has written."""
        result = await self.db.execute(
            select(CoachFeedback)
            .where(CoachFeedback.coach_user_id == coach_id)
            .order_by(CoachFeedback.created_at.desc(), CoachFeedback.id.desc())
        )
        return list(result.scalars().all())

    async def feedback_for_player(self, player_id: uuid.UUID) -> list[FeedbackRead]:
        """A player's inbox: notes from every coach, newest first."""
        result = await self.db.execute(
            select(CoachFeedback, UserProfile.name)
            .outerjoin(UserProfile, UserProfile.user_id == CoachFeedback.coach_user_id)
            .where(CoachFeedback.player_user_id == player_id)
            .order_by(CoachFeedback.created_at.desc(), CoachFeedback.id.desc())
        )
        items = []
        for note, coach_name in result.all():
            item = FeedbackRead.model_validate(note)
            item.coach_name = coach_name or DEFAULT_COACH_NAME
            items.append(item)
        return items
