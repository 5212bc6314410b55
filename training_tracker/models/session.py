"""Workout session - one execution of a template with per-set progress."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Enum, Float, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from training_tracker.core.enums import SessionStatus
from training_tracker.db.base import Base


class WorkoutSession(Base):
    """Session record. Values are copied from the template at start time, so later
    template edits never change a running or finished session."""

    __tablename__ = "workout_sessions"
    __table_args__ = (Index("ix_workout_sessions_user_start", "user_id", "start_time"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    # Not a foreign key: a session outlives the deletion of its template
    workout_id: Mapped[str] = mapped_column(String(64), nullable=False)
    workout_name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)  # whole minutes
    exercises: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    total_calories_burned: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
        default=SessionStatus.PROCESSING,
        nullable=False,
    )
    revision: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
