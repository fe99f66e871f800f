"""Streak and activity tracking schema

Creates the students table with the per-student streak state, the
append-only activity_logs table and the daily_sessions rollup keyed by
(student_id, session_date).

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ===========================================
    # Create students table
    # ===========================================
    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        # Streak state
        sa.Column("streak_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_streak_date", sa.Date(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("streak_days >= 0", name="ck_students_streak_days_nonneg"),
    )

    # ===========================================
    # Create activity_logs table
    # ===========================================
    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "student_id",
            sa.Integer(),
            sa.ForeignKey("students.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        # lesson, video, game
        sa.Column("activity_type", sa.String(20), nullable=False),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("content_title", sa.String(255), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint(
            "duration_minutes >= 0", name="ck_activity_logs_duration_nonneg"
        ),
    )
    op.create_index(
        "ix_activity_logs_student_created",
        "activity_logs",
        ["student_id", "created_at"],
    )

    # ===========================================
    # Create daily_sessions table
    # ===========================================
    op.create_table(
        "daily_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "student_id",
            sa.Integer(),
            sa.ForeignKey("students.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("total_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("lessons_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("videos_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("games_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint(
            "student_id", "session_date", name="uq_daily_sessions_student_date"
        ),
    )


def downgrade() -> None:
    op.drop_table("daily_sessions")
    op.drop_index("ix_activity_logs_student_created", table_name="activity_logs")
    op.drop_table("activity_logs")
    op.drop_table("students")
