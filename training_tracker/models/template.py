"""Workout template - a user-authored reusable exercise plan."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Enum, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from training_tracker.core.enums import Difficulty
from training_tracker.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkoutTemplate(Base):
    """Saved workout plan. Exercises are stored inline, in order, as JSON
    (exerciseId, exerciseName, sets, reps, weight, duration, restTime, notes)."""

    __tablename__ = "workout_templates"
    __table_args__ = (Index("ix_workout_templates_user_updated", "user_id", "updated_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    exercises: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    estimated_duration: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes
    difficulty: Mapped[Difficulty] = mapped_column(
        Enum(Difficulty, values_callable=lambda e: [m.value for m in e], native_enum=False),
        default=Difficulty.BEGINNER,
        nullable=False,
    )
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_template: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )
