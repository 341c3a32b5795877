"""Dialect-aware INSERT ... ON CONFLICT.

Learn: A "select, then insert or update" sequence races when two requests
from the same owner arrive together, and can leave duplicate rows. Pushing
the whole upsert into one statement against a unique constraint makes the
database resolve the race: one row, last writer's values.
"""

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def upsert_insert(db: AsyncSession, model):
    """Return an INSERT construct that supports on_conflict_do_* for db's dialect."""
    dialect = db.get_bind().dialect.name
    try:
        return _INSERTS[dialect](model)
    except KeyError:
        raise NotImplementedError(f"No upsert support for dialect {dialect!r}")
