"""Library service — the shared tactics and video catalogue.

Learn: Library rows have no owner. Anyone signed in can read them and,
unless the deployment restricts it, add or remove entries.

Seeding the default catalogue is an explicit bootstrap step
(seed_defaults), run from app startup or the CLI. Listing the library
never writes to it.
"""

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from padelhub.db.models import Tactic, Video
from padelhub.events.store import EventStore
from padelhub.events.types import (
    LIBRARY_ITEM_CREATED,
    LIBRARY_ITEM_DELETED,
    LIBRARY_SEEDED,
)
from padelhub.schemas.library import TacticCreate, VideoCreate

logger = structlog.get_logger()

DEFAULT_TACTICS = [
    {
        "title": "The Australian Formation",
        "description": "Serving tactic.",
        "difficulty": "Intermediate",
    },
    {
        "title": "Net Blitz",
        "description": "Aggressive net positioning.",
        "difficulty": "Advanced",
    },
]

DEFAULT_VIDEOS = [
    {
        "title": "Bandeja Masterclass",
        "duration": "12:45",
        "category": "Technique",
        "url": "https://example.com/v1",
    },
    {
        "title": "The Split Step Secret",
        "duration": "05:20",
        "category": "Footwork",
        "url": "https://example.com/v2",
    },
]


class LibraryService:
    """Business logic for shared library content."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.events = EventStore(db)

    # ─── Tactics ────────────────────────────────────────

    async def list_tactics(self) -> list[Tactic]:
        result = await self.db.execute(select(Tactic).order_by(Tactic.id))
        return list(result.scalars().all())

    async def create_tactic(self, body: TacticCreate, *, actor_id=None) -> Tactic:
        tactic = Tactic(
            title=body.title,
            description=body.description,
            difficulty=body.difficulty.value,
        )
        self.db.add(tactic)
        await self.db.flush()
        await self._record(LIBRARY_ITEM_CREATED, "tactic", tactic.id, actor_id)
        await self.db.commit()
        await self.db.refresh(tactic)
        return tactic

    async def delete_tactic(self, tactic_id: int, *, actor_id=None) -> None:
        """Remove a tactic. Deleting a missing id is a no-op."""
        tactic = await self.db.get(Tactic, tactic_id)
        if tactic is None:
            return
        await self.db.delete(tactic)
        await self._record(LIBRARY_ITEM_DELETED, "tactic", tactic_id, actor_id)
        await self.db.commit()

    # ─── Videos ─────────────────────────────────────────

    async def list_videos(self) -> list[Video]:
        result = await self.db.execute(select(Video).order_by(Video.id))
        return list(result.scalars().all())

    async def create_video(self, body: VideoCreate, *, actor_id=None) -> Video:
        video = Video(**body.model_dump())
        self.db.add(video)
        await self.db.flush()
        await self._record(LIBRARY_ITEM_CREATED, "video", video.id, actor_id)
        await self.db.commit()
        await self.db.refresh(video)
        return video

    async def delete_video(self, video_id: int, *, actor_id=None) -> None:
        """Remove a video. Deleting a missing id is a no-op."""
        video = await self.db.get(Video, video_id)
        if video is None:
            return
        await self.db.delete(video)
        await self._record(LIBRARY_ITEM_DELETED, "video", video_id, actor_id)
        await self.db.commit()

    # ─── Bootstrap ──────────────────────────────────────

    async def seed_defaults(self) -> dict[str, int]:
        """Insert the default catalogue into whichever tables are empty.

        Returns how many rows were inserted per table. Running it again
        on a populated library inserts nothing.
        """
        inserted = {"tactics": 0, "videos": 0}

        if await self._count(Tactic) == 0:
            self.db.add_all(Tactic(**row) for row in DEFAULT_TACTICS)
            inserted["tactics"] = len(DEFAULT_TACTICS)

        if await self._count(Video) == 0:
            self.db.add_all(Video(**row) for row in DEFAULT_VIDEOS)
            inserted["videos"] = len(DEFAULT_VIDEOS)

        if inserted["tactics"] or inserted["videos"]:
            await self.db.flush()
            await self.events.append(
                stream_id="library",
                event_type=LIBRARY_SEEDED,
                data=inserted,
            )
            await self.db.commit()
            logger.info("library.seeded", **inserted)
        return inserted

    # ─── Helpers ────────────────────────────────────────

    async def _count(self, model) -> int:
        result = await self.db.execute(select(func.count()).select_from(model))
        return result.scalar_one()

    async def _record(self, event_type: str, kind: str, item_id: int, actor_id) -> None:
        await self.events.append(
            stream_id=f"{kind}:{item_id}",
            event_type=event_type,
            data={"kind": kind, "id": item_id},
            metadata={"actor_id": str(actor_id)} if actor_id else None,
        )
