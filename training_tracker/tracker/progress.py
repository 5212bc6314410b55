"""Pure session bookkeeping: draft expansion, set completion, cursor resolution.

Nothing here does I/O; `SessionTracker` calls these and persists the result.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from training_tracker.core.enums import ACTIVE_STATUSES, SessionStatus
from training_tracker.schemas.common import ensure_utc
from training_tracker.schemas.session import (
    CompletedExercise,
    CompletedSet,
    WorkoutSessionCreate,
    WorkoutSessionRead,
)
from training_tracker.schemas.workout import WorkoutTemplateRead


@dataclass(frozen=True)
class Cursor:
    """Position in a session: exercise index (0-based) and set number (1-based)."""

    exercise_index: int = 0
    current_set: int = 1


@dataclass(frozen=True)
class SetOutcome:
    cursor: Cursor
    exercise_finished: bool = False
    session_finished: bool = False


@dataclass(frozen=True)
class ProgressSummary:
    completed_sets: int
    total_sets: int

    @property
    def percent(self) -> int:
        if self.total_sets <= 0:
            return 0
        return math.floor(self.completed_sets / self.total_sets * 100 + 0.5)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def duration_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, halves rounded up, never negative."""
    delta = ensure_utc(end) - ensure_utc(start)
    return max(0, math.floor(delta.total_seconds() / 60 + 0.5))


def build_session_draft(template: WorkoutTemplateRead, now: datetime | None = None) -> WorkoutSessionCreate:
    """Expand a template into a fresh session: one CompletedSet per target set,
    carrying the template's reps, weight and rest, none completed."""
    exercises = [
        CompletedExercise(
            exercise_id=ex.exercise_id,
            exercise_name=ex.exercise_name,
            sets=[
                CompletedSet(
                    set_number=n,
                    reps=ex.reps,
                    weight=ex.weight,
                    rest_time=ex.rest_time,
                    completed=False,
                )
                for n in range(1, ex.sets + 1)
            ],
            total_sets=ex.sets,
            completed_sets=0,
        )
        for ex in template.exercises
    ]
    return WorkoutSessionCreate(
        workout_id=str(template.id),
        workout_name=template.name,
        start_time=now or utcnow(),
        exercises=exercises,
        status=SessionStatus.PROCESSING,
    )


def _first_incomplete(exercise: CompletedExercise) -> CompletedSet | None:
    return next((s for s in exercise.sets if not s.completed), None)


def complete_set(exercises: list[CompletedExercise], cursor: Cursor) -> SetOutcome:
    """Mark the set under the cursor completed (in place) and move the cursor.

    A set that is already completed does not bump the counter again. Sets may
    have been completed out of numeric order, so the next set is the first
    incomplete one rather than cursor + 1.
    """
    if not 0 <= cursor.exercise_index < len(exercises):
        raise IndexError(f"No exercise at index {cursor.exercise_index}")
    exercise = exercises[cursor.exercise_index]

    target = next((s for s in exercise.sets if s.set_number == cursor.current_set), None)
    if target is not None and not target.completed:
        target.completed = True
        exercise.completed_sets += 1

    if exercise.completed_sets >= exercise.total_sets:
        if cursor.exercise_index < len(exercises) - 1:
            return SetOutcome(Cursor(cursor.exercise_index + 1, 1), exercise_finished=True)
        return SetOutcome(cursor, exercise_finished=True, session_finished=True)

    nxt = _first_incomplete(exercise)
    if nxt is not None:
        return SetOutcome(Cursor(cursor.exercise_index, nxt.set_number))
    # Counter and set flags disagree; step forward anyway
    return SetOutcome(Cursor(cursor.exercise_index, cursor.current_set + 1))


def resolve_cursor(exercises: list[CompletedExercise]) -> Cursor:
    """Rebuild the cursor of a stored session: first unfinished exercise, first
    incomplete set in it (completedSets + 1 when the flags say none)."""
    for index, exercise in enumerate(exercises):
        if exercise.completed_sets < exercise.total_sets:
            nxt = _first_incomplete(exercise)
            return Cursor(index, nxt.set_number if nxt else exercise.completed_sets + 1)
    return Cursor()


def find_active_session(sessions: Iterable[WorkoutSessionRead]) -> WorkoutSessionRead | None:
    """First session that is processing, in progress or paused."""
    return next((s for s in sessions if s.status in ACTIVE_STATUSES), None)


def summarize(exercises: Iterable[CompletedExercise]) -> ProgressSummary:
    completed = total = 0
    for ex in exercises:
        completed += ex.completed_sets
        total += ex.total_sets
    return ProgressSummary(completed, total)


def check_invariants(exercises: Iterable[CompletedExercise]) -> list[str]:
    """Bookkeeping violations, empty when the session is consistent."""
    problems = []
    for ex in exercises:
        done = sum(1 for s in ex.sets if s.completed)
        if ex.completed_sets != done:
            problems.append(
                f"{ex.exercise_name}: completedSets={ex.completed_sets} but {done} sets are completed"
            )
        if ex.completed_sets > ex.total_sets:
            problems.append(f"{ex.exercise_name}: completedSets exceeds totalSets")
    return problems
