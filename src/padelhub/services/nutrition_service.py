"""Nutrition service — meal logs and the daily macro goal.

Learn: The goal is one row per owner. Writing it is a single
INSERT ... ON CONFLICT (user_id) DO UPDATE, so two concurrent saves from
the same player cannot leave two goal rows behind.
"""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.db.models import NutritionGoal, NutritionLog
from padelhub.db.upsert import upsert_insert
from padelhub.schemas.nutrition import NutritionGoalUpsert, NutritionLogCreate


class NutritionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_logs(self, owner_id: uuid.UUID) -> list[NutritionLog]:
        result = await self.db.execute(
            select(NutritionLog)
            .where(NutritionLog.user_id == owner_id)
            .order_by(NutritionLog.date.desc(), NutritionLog.id.desc())
        )
        return list(result.scalars().all())

    async def create_log(
        self, owner_id: uuid.UUID, body: NutritionLogCreate
    ) -> NutritionLog:
        log = NutritionLog(user_id=owner_id, **body.model_dump(exclude_none=True))
        self.db.add(log)
        await self.db.commit()
        await self.db.refresh(log)
        return log

    async def get_goal(self, owner_id: uuid.UUID) -> Optional[NutritionGoal]:
        result = await self.db.execute(
            select(NutritionGoal).where(NutritionGoal.user_id == owner_id)
        )
        return result.scalars().first()

    async def upsert_goal(
        self, owner_id: uuid.UUID, body: NutritionGoalUpsert
    ) -> NutritionGoal:
        values = body.model_dump()
        stmt = upsert_insert(self.db, NutritionGoal).values(
            user_id=owner_id, **values
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[NutritionGoal.user_id],
            set_=values,
        ).returning(NutritionGoal)
        result = await self.db.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        goal = result.one()
        await self.db.commit()
        return goal
