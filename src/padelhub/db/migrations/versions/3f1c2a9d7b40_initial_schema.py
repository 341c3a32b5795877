"""Initial schema: identities, profiles, training data, library, coaching

Learn: Every upsert target has a unique constraint here
(user_profiles.user_id, nutrition_goals.user_id, shots(user_id, key),
coach_players(coach_user_id, player_user_id)). The service layer relies
on them for INSERT ... ON CONFLICT.

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2026-10-19 09:12:41.204117
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _owner_fk() -> sa.Column:
    return sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False)


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(
        name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True
    )


def upgrade() -> None:
    # ─── Identities and profiles ────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=True),
        _created_at(),
    )
    op.create_table(
        "user_profiles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="player"),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("level", sa.Float(), nullable=True),
        sa.Column("handedness", sa.String(20), nullable=True),
        sa.Column("side", sa.String(20), nullable=True),
    )

    # ─── Owned records ──────────────────────────────────
    op.create_table(
        "goals",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _owner_fk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("target", sa.String(200), nullable=False),
        sa.Column("done", sa.Boolean(), nullable=False),
    )
    op.create_index("idx_goals_user", "goals", ["user_id"])

    op.create_table(
        "shots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _owner_fk(),
        sa.Column("key", sa.String(50), nullable=False),
        sa.Column("label", sa.String(100), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("trend", sa.String(10), nullable=False),
        sa.UniqueConstraint("user_id", "key", name="uq_shots_user_key"),
    )

    op.create_table(
        "sessions_data",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _owner_fk(),
        _created_at("date"),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("focus", sa.String(200), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("minutes", sa.Integer(), nullable=True),
    )
    op.create_index("idx_sessions_user", "sessions_data", ["user_id"])

    op.create_table(
        "nutrition_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _owner_fk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("calories", sa.Integer(), nullable=False),
        sa.Column("protein", sa.Integer(), nullable=False),
        sa.Column("carbs", sa.Integer(), nullable=False),
        sa.Column("fat", sa.Integer(), nullable=False),
        sa.Column("meal_type", sa.String(30), nullable=False),
        _created_at("date"),
    )
    op.create_index("idx_nutrition_logs_user", "nutrition_logs", ["user_id"])

    op.create_table(
        "nutrition_goals",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("calories", sa.Integer(), nullable=False),
        sa.Column("protein", sa.Integer(), nullable=False),
        sa.Column("carbs", sa.Integer(), nullable=False),
        sa.Column("fat", sa.Integer(), nullable=False),
        sa.Column("coach_suggestions", sa.Text(), nullable=True),
    )

    op.create_table(
        "wellbeing",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _owner_fk(),
        _created_at("date"),
        sa.Column("sleep", sa.Integer(), nullable=True),
        sa.Column("stress", sa.Integer(), nullable=True),
        sa.Column("energy", sa.Integer(), nullable=True),
        sa.Column("soreness", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("idx_wellbeing_user", "wellbeing", ["user_id"])

    op.create_table(
        "strength_plans",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _owner_fk(),
        sa.Column("day", sa.String(20), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("items", JSONType, nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("idx_strength_plans_user", "strength_plans", ["user_id"])

    # ─── Shared library ─────────────────────────────────
    op.create_table(
        "tactics",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("difficulty", sa.String(20), nullable=False),
    )
    op.create_table(
        "videos",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("duration", sa.String(20), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("url", sa.Text(), nullable=True),
    )

    # ─── Coaching ───────────────────────────────────────
    op.create_table(
        "coach_players",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("coach_user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("player_user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        _created_at(),
        sa.UniqueConstraint("coach_user_id", "player_user_id", name="uq_coach_players_pair"),
    )
    op.create_index("idx_coach_players_player", "coach_players", ["player_user_id"])

    op.create_table(
        "coach_feedback",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("coach_user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("player_user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("idx_coach_feedback_player", "coach_feedback", ["player_user_id"])
    op.create_index("idx_coach_feedback_coach", "coach_feedback", ["coach_user_id"])

    # ─── Audit trail ────────────────────────────────────
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("stream_id", sa.String(200), nullable=False),
        sa.Column("type", sa.String(100), nullable=False),
        sa.Column("data", JSONType, nullable=False),
        sa.Column("metadata", JSONType, nullable=False),
        _created_at(),
    )
    op.create_index("idx_events_stream", "events", ["stream_id", "id"])
    op.create_index("idx_events_type", "events", ["type"])


def downgrade() -> None:
    for table in (
        "events",
        "coach_feedback",
        "coach_players",
        "videos",
        "tactics",
        "strength_plans",
        "wellbeing",
        "nutrition_goals",
        "nutrition_logs",
        "sessions_data",
        "shots",
        "goals",
        "user_profiles",
        "users",
    ):
        op.drop_table(table)
