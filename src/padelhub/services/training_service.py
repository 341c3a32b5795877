"""Training service — goals, shot ratings, sessions, wellbeing, strength plans.

Learn: Every method here takes the owner id explicitly and filters on it.
The access check has already decided that the caller may act for that
owner (themselves, or a linked player when a coach reads), so the service
never needs to know who is asking, only whose rows to touch.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.auth.errors import NotFound
from padelhub.db.models import Goal, Shot, StrengthPlan, TrainingSession, WellbeingEntry
from padelhub.db.upsert import upsert_insert
from padelhub.schemas.training import (
    GoalCreate,
    ShotUpsert,
    StrengthPlanCreate,
    TrainingSessionCreate,
    WellbeingCreate,
)


class TrainingService:
    """Business logic for a player's own training records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Goals ──────────────────────────────────────────

    async def list_goals(self, owner_id: uuid.UUID) -> list[Goal]:
        result = await self.db.execute(
            select(Goal).where(Goal.user_id == owner_id).order_by(Goal.id)
        )
        return list(result.scalars().all())

    async def create_goal(self, owner_id: uuid.UUID, body: GoalCreate) -> Goal:
        goal = Goal(user_id=owner_id, **body.model_dump())
        self.db.add(goal)
        await self.db.commit()
        await self.db.refresh(goal)
        return goal

    async def get_goal(self, goal_id: int) -> Goal:
        return await self._get(Goal, goal_id, "goal")

    async def toggle_goal(self, goal: Goal) -> Goal:
        """Flip done on a goal the caller has been cleared to write."""
        goal.done = not goal.done
        await self.db.commit()
        await self.db.refresh(goal)
        return goal

    # ─── Shots ──────────────────────────────────────────

    async def list_shots(self, owner_id: uuid.UUID) -> list[Shot]:
        result = await self.db.execute(
            select(Shot).where(Shot.user_id == owner_id).order_by(Shot.key)
        )
        return list(result.scalars().all())

    async def upsert_shot(self, owner_id: uuid.UUID, body: ShotUpsert) -> Shot:
        """Insert or replace the rating for (owner, key)."""
        values = {
            "label": body.label,
            "level": body.level,
            "trend": body.trend.value,
        }
        stmt = upsert_insert(self.db, Shot).values(
            user_id=owner_id, key=body.key, **values
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Shot.user_id, Shot.key],
            set_=values,
        ).returning(Shot)
        result = await self.db.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        shot = result.one()
        await self.db.commit()
        return shot

    # ─── Sessions ───────────────────────────────────────

    async def list_sessions(self, owner_id: uuid.UUID) -> list[TrainingSession]:
        result = await self.db.execute(
            select(TrainingSession)
            .where(TrainingSession.user_id == owner_id)
            .order_by(TrainingSession.date.desc(), TrainingSession.id.desc())
        )
        return list(result.scalars().all())

    async def create_session(
        self, owner_id: uuid.UUID, body: TrainingSessionCreate
    ) -> TrainingSession:
        session = TrainingSession(
            user_id=owner_id, **body.model_dump(exclude_none=True)
        )
        self.db.add(session)
        await self.db.commit()
        await self.db.refresh(session)
        return session

    # ─── Wellbeing ──────────────────────────────────────

    async def list_wellbeing(self, owner_id: uuid.UUID) -> list[WellbeingEntry]:
        result = await self.db.execute(
            select(WellbeingEntry)
            .where(WellbeingEntry.user_id == owner_id)
            .order_by(WellbeingEntry.date.desc(), WellbeingEntry.id.desc())
        )
        return list(result.scalars().all())

    async def create_wellbeing(
        self, owner_id: uuid.UUID, body: WellbeingCreate
    ) -> WellbeingEntry:
        entry = WellbeingEntry(user_id=owner_id, **body.model_dump(exclude_none=True))
        self.db.add(entry)
        await self.db.commit()
        await self.db.refresh(entry)
        return entry

    # ─── Strength plans ─────────────────────────────────

    async def list_strength(self, owner_id: uuid.UUID) -> list[StrengthPlan]:
        result = await self.db.execute(
            select(StrengthPlan)
            .where(StrengthPlan.user_id == owner_id)
            .order_by(StrengthPlan.id)
        )
        return list(result.scalars().all())

    async def create_strength(
        self, owner_id: uuid.UUID, body: StrengthPlanCreate
    ) -> StrengthPlan:
        plan = StrengthPlan(user_id=owner_id, **body.model_dump())
        self.db.add(plan)
        await self.db.commit()
        await self.db.refresh(plan)
        return plan

    async def get_strength(self, plan_id: int) -> StrengthPlan:
        return await self._get(StrengthPlan, plan_id, "strength plan")

    async def delete_strength(self, plan: StrengthPlan) -> None:
        await self.db.delete(plan)
        await self.db.commit()

    # ─── Helpers ────────────────────────────────────────

    async def _get(self, model, record_id: int, kind: str):
        row = await self.db.get(model, record_id)
        if row is None:
            raise NotFound(kind)
        return row
