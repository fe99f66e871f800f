"""
SQLAlchemy Database Models

These models define the PostgreSQL schema for the streak and activity
tracker.

Tables:
- students: Student directory rows carrying the per-student streak state
- activity_logs: Append-only record of completed activities
- daily_sessions: Per-student, per-day rollup of minutes and activity counts

ARCHITECTURE NOTE:
    This file contains SQLALCHEMY models for database persistence.
    There is a corresponding Pydantic file: app/models/tracking.py

    Data flows: Service Layer → Repository → SQLAlchemy → Database
"""

from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class Student(Base):
    """
    Student records owned by the parent/student directory.

    Only the columns the tracker reads or writes are mapped here. The
    streak state lives on the student row, so it exists from the moment
    the student does and is never deleted on its own.

    Attributes:
        id: Primary key, auto-incrementing integer identifier.
        full_name: Display name from registration.
        email: Unique contact address from registration.
        streak_days: Consecutive credited days. 0 until first credit.
        last_streak_date: Last credited calendar day in the reference
            timezone. Null if the student has never been credited.
        created_at: Registration timestamp.
    """

    __tablename__ = "students"
    __table_args__ = (
        CheckConstraint("streak_days >= 0", name="ck_students_streak_days_nonneg"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255))
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True)

    # Streak state
    streak_days: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    last_streak_date: Mapped[Optional[date]] = mapped_column(Date)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )

    # Relationships
    activity_logs: Mapped[List["ActivityLog"]] = relationship(
        back_populates="student", cascade="all, delete-orphan", passive_deletes=True
    )
    daily_sessions: Mapped[List["DailySession"]] = relationship(
        back_populates="student", cascade="all, delete-orphan", passive_deletes=True
    )


class ActivityLog(Base):
    """
    Completed learning activities.

    Immutable once written. Ordering by created_at (then id) is the
    canonical history order.

    Attributes:
        id: Primary key, auto-incrementing integer identifier.
        student_id: Foreign key to the student who completed the activity.
        activity_type: One of lesson, video, game.
        subject: Subject the activity belongs to (e.g., "Maths").
        content_title: Optional title of the lesson/video/game.
        duration_minutes: Minutes spent on the activity.
        completed: Always true for logged activities.
        created_at: When the activity was logged.
    """

    __tablename__ = "activity_logs"
    __table_args__ = (
        CheckConstraint(
            "duration_minutes >= 0", name="ck_activity_logs_duration_nonneg"
        ),
        Index("ix_activity_logs_student_created", "student_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), index=True
    )

    activity_type: Mapped[str] = mapped_column(String(20))
    subject: Mapped[str] = mapped_column(String(100))
    content_title: Mapped[Optional[str]] = mapped_column(String(255))
    duration_minutes: Mapped[int] = mapped_column(Integer, default=0)
    completed: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )

    student: Mapped["Student"] = relationship(back_populates="activity_logs")


class DailySession(Base):
    """
    Per-student, per-day activity rollup.

    One row per (student_id, session_date). Created by the first activity
    of the day and accumulated in place by every later one; counters only
    ever grow.

    Attributes:
        id: Primary key, auto-incrementing integer identifier.
        student_id: Foreign key to the student.
        session_date: Calendar day in the reference timezone.
        total_minutes: Sum of logged minutes for the day.
        lessons_count: Lessons completed that day.
        videos_count: Videos completed that day.
        games_count: Games completed that day.
        updated_at: Last accumulation time.
    """

    __tablename__ = "daily_sessions"
    __table_args__ = (
        UniqueConstraint(
            "student_id", "session_date", name="uq_daily_sessions_student_date"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), index=True
    )
    session_date: Mapped[date] = mapped_column(Date)

    total_minutes: Mapped[int] = mapped_column(Integer, default=0)
    lessons_count: Mapped[int] = mapped_column(Integer, default=0)
    videos_count: Mapped[int] = mapped_column(Integer, default=0)
    games_count: Mapped[int] = mapped_column(Integer, default=0)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )

    student: Mapped["Student"] = relationship(back_populates="daily_sessions")
