"""Workout template schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from training_tracker.core.constants import (
    DEFAULT_REST_SECONDS,
    MAX_EXERCISES_PER_WORKOUT,
    MAX_SETS_PER_EXERCISE,
)
from training_tracker.core.enums import Difficulty
from training_tracker.schemas.common import CamelModel, ensure_utc


class TemplateExercise(CamelModel):
    """One exercise line of a template: target sets x reps at an optional weight."""

    exercise_id: str = Field(..., min_length=1)
    exercise_name: str = Field(..., min_length=1, max_length=255)
    sets: int = Field(..., ge=1, le=MAX_SETS_PER_EXERCISE)
    reps: int = Field(..., ge=1)
    weight: float | None = Field(None, ge=0)
    duration: int | None = Field(None, ge=0)  # seconds, for cardio
    rest_time: int | None = Field(DEFAULT_REST_SECONDS, ge=0)
    notes: str | None = None

    @field_validator("exercise_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    return [t.strip().lower() for t in tags if t and t.strip()]


class WorkoutTemplateBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    exercises: list[TemplateExercise] = Field(..., min_length=1, max_length=MAX_EXERCISES_PER_WORKOUT)
    estimated_duration: int = Field(..., ge=1)  # minutes
    difficulty: Difficulty = Difficulty.BEGINNER
    tags: list[str] = []
    is_template: bool = True


class WorkoutTemplateCreate(WorkoutTemplateBase):
    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("tags")
    @classmethod
    def normalise_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class WorkoutTemplateUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    exercises: list[TemplateExercise] | None = Field(
        None, min_length=1, max_length=MAX_EXERCISES_PER_WORKOUT
    )
    estimated_duration: int | None = Field(None, ge=1)
    difficulty: Difficulty | None = None
    tags: list[str] | None = None
    is_template: bool | None = None

    @field_validator("tags")
    @classmethod
    def normalise_tags(cls, v: list[str] | None) -> list[str] | None:
        return _clean_tags(v)


class WorkoutTemplateRead(WorkoutTemplateBase):
    id: UUID
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)
