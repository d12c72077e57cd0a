"""create typing sessions, typed verses and user daily activity

Revision ID: 0001_typing_daily_activity
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_typing_daily_activity"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "typing_sessions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_typing_sessions_user_id"), "typing_sessions", ["user_id"], unique=False)

    op.create_table(
        "typed_verses",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("typing_session_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("translation", sa.String(length=20), nullable=False, server_default="esv"),
        sa.Column("book", sa.String(length=50), nullable=False),
        sa.Column("chapter", sa.Integer(), nullable=False),
        sa.Column("verse", sa.Integer(), nullable=False),
        sa.Column("typing_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["typing_session_id"], ["typing_sessions.id"], ondelete="CASCADE"),
    )
    op.create_index(op.f("ix_typed_verses_user_id"), "typed_verses", ["user_id"], unique=False)
    op.create_index(
        op.f("ix_typed_verses_typing_session_id"), "typed_verses", ["typing_session_id"], unique=False
    )

    op.create_table(
        "user_daily_activity",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("verse_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "passages",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::text[]"),
        ),
        sa.Column("average_wpm", sa.Integer(), nullable=True),
        sa.Column("average_accuracy", sa.Integer(), nullable=True),
        sa.Column("average_corrected_accuracy", sa.Integer(), nullable=True),
        sa.Column("verses_with_stats", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "day", name="uq_user_daily_activity_user_day"),
        sa.CheckConstraint(
            "verses_with_stats <= verse_count", name="ck_user_daily_activity_stats_le_verses"
        ),
    )
    op.create_index(op.f("ix_user_daily_activity_user_id"), "user_daily_activity", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_user_daily_activity_user_id"), table_name="user_daily_activity")
    op.drop_table("user_daily_activity")
    op.drop_index(op.f("ix_typed_verses_typing_session_id"), table_name="typed_verses")
    op.drop_index(op.f("ix_typed_verses_user_id"), table_name="typed_verses")
    op.drop_table("typed_verses")
    op.drop_index(op.f("ix_typing_sessions_user_id"), table_name="typing_sessions")
    op.drop_table("typing_sessions")
