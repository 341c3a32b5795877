"""PadelHub CLI — database bootstrap and audit trail inspection.

Usage:
    padelhub init-db                     # Create all tables (dev/test; use alembic in prod)
    padelhub seed-library                # Insert default tactics/videos into empty tables
    padelhub events user:<uuid>          # Show the audit events for one stream

Every command accepts --database-url (or PADELHUB_DATABASE_URL).
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
from typing import Optional

import click
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from padelhub import __version__
from padelhub.config import settings
from padelhub.db.engine import build_engine
from padelhub.db.models import Base
from padelhub.events.store import EventStore
from padelhub.services.library_service import LibraryService

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running loop — normal CLI invocation
        return asyncio.run(coro)
    else:
        # Already inside an event loop (e.g. test runner) — run in a thread
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _database_url(url: Optional[str]) -> str:
    return url or settings.database_url


database_url_option = click.option(
    "--database-url",
    envvar="PADELHUB_DATABASE_URL",
    help="SQLAlchemy async URL (defaults to PADELHUB_DATABASE_URL)",
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="padelhub")
def main():
    """PadelHub — manage the training tracker's database."""


# ---------------------------------------------------------------------------
# padelhub init-db
# ---------------------------------------------------------------------------


@main.command("init-db")
@database_url_option
def init_db(database_url: Optional[str]):
    """Create every table that does not exist yet."""
    _run(_init_db_impl(_database_url(database_url)))
    click.secho("Database tables created.", fg="green")


async def _init_db_impl(url: str):
    engine = build_engine(url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# padelhub seed-library
# ---------------------------------------------------------------------------


@main.command("seed-library")
@database_url_option
def seed_library(database_url: Optional[str]):
    """Insert the default tactics and videos into empty library tables."""
    inserted = _run(_seed_library_impl(_database_url(database_url)))
    if inserted["tactics"] or inserted["videos"]:
        click.secho(
            f"Seeded {inserted['tactics']} tactics and {inserted['videos']} videos.",
            fg="green",
        )
    else:
        click.echo("Library already populated, nothing to do.")


async def _seed_library_impl(url: str) -> dict[str, int]:
    engine = build_engine(url)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with factory() as db:
            return await LibraryService(db).seed_defaults()
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# padelhub events
# ---------------------------------------------------------------------------


@main.command()
@click.argument("stream_id")
@click.option("--after", default=0, help="Only events after this id")
@click.option("--limit", "-l", default=50, help="Max results")
@database_url_option
def events(stream_id: str, after: int, limit: int, database_url: Optional[str]):
    """Show audit events for STREAM_ID (e.g. user:<uuid>, coach:<uuid>)."""
    rows = _run(_events_impl(_database_url(database_url), stream_id, after, limit))
    if not rows:
        click.echo("No events found.")
        return
    for row in rows:
        click.echo(
            f"  #{row['id']:<6d} {row['created_at']:<32s} "
            f"{click.style(row['type'], fg='cyan')}  {json.dumps(row['data'])}"
        )


async def _events_impl(url: str, stream_id: str, after: int, limit: int) -> list[dict]:
    engine = build_engine(url)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with factory() as db:
            found = await EventStore(db).read_stream(stream_id, after_id=after, limit=limit)
            return [
                {
                    "id": e.id,
                    "type": e.type,
                    "data": e.data,
                    "created_at": str(e.created_at),
                }
                for e in found
            ]
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
