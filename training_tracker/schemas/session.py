"""Workout session schemas (also the tracker's in-memory session object)."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from training_tracker.core.enums import SessionStatus
from training_tracker.schemas.common import CamelModel, ensure_utc


class CompletedSet(CamelModel):
    set_number: int = Field(..., ge=1)
    reps: int = Field(0, ge=0)
    weight: float | None = None
    duration: int | None = None
    completed: bool = False
    rest_time: int | None = None
    notes: str | None = None


class CompletedExercise(CamelModel):
    exercise_id: str
    exercise_name: str
    sets: list[CompletedSet] = []
    total_sets: int = Field(..., ge=0)
    completed_sets: int = Field(0, ge=0)

    @model_validator(mode="after")
    def completed_within_total(self) -> "CompletedExercise":
        if self.completed_sets > self.total_sets:
            raise ValueError("completedSets cannot exceed totalSets")
        return self


class WorkoutSessionBase(CamelModel):
    workout_id: str = Field(..., min_length=1)
    workout_name: str = Field(..., min_length=1, max_length=255)
    start_time: datetime
    end_time: datetime | None = None
    duration: int | None = Field(None, ge=0)  # whole minutes
    exercises: list[CompletedExercise]
    total_calories_burned: float | None = Field(None, ge=0)
    notes: str | None = None
    status: SessionStatus = SessionStatus.PROCESSING

    @field_validator("start_time", "end_time")
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)


class WorkoutSessionCreate(WorkoutSessionBase):
    exercises: list[CompletedExercise] = Field(..., min_length=1)


class WorkoutSessionUpdate(CamelModel):
    """Partial update; fields left out (or null) are kept as stored."""

    exercises: list[CompletedExercise] | None = Field(None, min_length=1)
    status: SessionStatus | None = None
    end_time: datetime | None = None
    duration: int | None = Field(None, ge=0)
    total_calories_burned: float | None = Field(None, ge=0)
    notes: str | None = None
    revision: int | None = Field(None, ge=0)

    @field_validator("end_time")
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)


class WorkoutSessionRead(WorkoutSessionBase):
    id: UUID
    revision: int = 0
    created_at: datetime | None = None

    @field_validator("created_at")
    @classmethod
    def created_as_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)
