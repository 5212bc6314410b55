"""SessionTracker: the workout tracking state machine.

Owns the state a tracker screen needs (loaded workouts, the session being
tracked, the exercise/set cursor, whether the session is running) and talks to
the training API through a TrainingClient:

    selector -> start() -> complete_set() ... -> finish()      (completed)
                               pause() <-> resume()            (paused)

Progress writes go through a SessionSync queue. After close(), responses that
arrive late are discarded instead of being applied.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from training_tracker.core.enums import SessionStatus, can_transition
from training_tracker.schemas.session import WorkoutSessionRead, WorkoutSessionUpdate
from training_tracker.schemas.workout import WorkoutTemplateRead
from training_tracker.services.calorie_estimation import estimate_session_calories
from training_tracker.tracker import progress
from training_tracker.tracker.client import TrainingClient
from training_tracker.tracker.errors import (
    InvalidTransitionError,
    NoActiveSessionError,
    SessionNotFoundError,
    TrackerClosedError,
    TrackerError,
    WorkoutNotFoundError,
)
from training_tracker.tracker.progress import Cursor, ProgressSummary, SetOutcome
from training_tracker.tracker.sync import SessionSync

logger = logging.getLogger(__name__)


class SessionTracker:
    def __init__(
        self,
        client: TrainingClient,
        *,
        body_weight_kg: float | None = None,
        clock: Callable[[], datetime] = progress.utcnow,
    ) -> None:
        self.client = client
        self.body_weight_kg = body_weight_kg
        self.clock = clock
        self.workouts: list[WorkoutTemplateRead] = []
        self.selected_workout: WorkoutTemplateRead | None = None
        self.session: WorkoutSessionRead | None = None
        self.cursor = Cursor()
        self.is_active = False
        self._sync: SessionSync | None = None
        self._closed = False

    async def __aenter__(self) -> SessionTracker:
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    # State

    @property
    def show_selector(self) -> bool:
        return self.session is None

    @property
    def session_id(self) -> str | None:
        return str(self.session.id) if self.session else None

    @property
    def sync(self) -> SessionSync | None:
        return self._sync

    @property
    def status(self) -> SessionStatus | None:
        """Effective status: a running session counts as in progress even if the
        confirming write has not reached the API yet."""
        if self.session is None:
            return None
        return SessionStatus.IN_PROGRESS if self.is_active else self.session.status

    @property
    def current_exercise(self):
        if self.session is None or not self.session.exercises:
            return None
        return self.session.exercises[self.cursor.exercise_index]

    def summary(self) -> ProgressSummary:
        if self.session is None:
            return ProgressSummary(0, 0)
        return progress.summarize(self.session.exercises)

    def _ensure_open(self) -> None:
        if self._closed:
            raise TrackerClosedError("Tracker is closed")

    def _require_session(self) -> WorkoutSessionRead:
        self._ensure_open()
        if self.session is None:
            raise NoActiveSessionError("No workout session is being tracked")
        return self.session

    def _require_transition(self, target: SessionStatus) -> None:
        self._require_session()
        current = self.status
        if not can_transition(current, target):
            raise InvalidTransitionError(
                f"Cannot move session from {current.value} to {target.value}"
            )

    def reset(self) -> None:
        """Back to the selector screen. Queued writes still go out."""
        self.selected_workout = None
        self.session = None
        self.cursor = Cursor()
        self.is_active = False
        self._sync = None

    def _adopt(self, session: WorkoutSessionRead, workout: WorkoutTemplateRead) -> None:
        self.session = session
        self.selected_workout = workout
        self._sync = SessionSync(self.client, str(session.id), revision=session.revision)

    def _apply_server_fields(self, saved: WorkoutSessionRead) -> None:
        # The local exercise array stays authoritative; take lifecycle fields from the server.
        assert self.session is not None
        self.session.status = saved.status
        self.session.end_time = saved.end_time
        self.session.duration = saved.duration
        self.session.total_calories_burned = saved.total_calories_burned
        self.session.revision = saved.revision

    # Workout selector

    async def load_workouts(self, q: str | None = None) -> list[WorkoutTemplateRead]:
        self._ensure_open()
        workouts = await self.client.list_workouts(q)
        self._ensure_open()
        self.workouts = workouts
        return workouts

    async def find_workout(self, workout_id: str) -> WorkoutTemplateRead:
        """Look a template up in the loaded list, reloading once if it is missing."""
        workout = next((w for w in self.workouts if str(w.id) == str(workout_id)), None)
        if workout is None:
            await self.load_workouts()
            workout = next((w for w in self.workouts if str(w.id) == str(workout_id)), None)
        if workout is None:
            raise WorkoutNotFoundError(f"Workout {workout_id} not found")
        return workout

    # Session initializer

    async def start(self, workout: WorkoutTemplateRead | str) -> WorkoutSessionRead:
        """Create a session from a template and start tracking it.

        The cursor is armed only once the API has stored the session; if the
        create fails the tracker goes back to the selector and the error is raised.
        """
        self._ensure_open()
        if self.session is not None:
            raise TrackerError(f"Session {self.session_id} is already being tracked")
        if not isinstance(workout, WorkoutTemplateRead):
            workout = await self.find_workout(workout)

        self.selected_workout = workout
        draft = progress.build_session_draft(workout, now=self.clock())
        try:
            saved = await self.client.create_session(draft)
        except TrackerError:
            logger.exception("Could not start workout %s", workout.id)
            self.reset()
            raise
        self._ensure_open()

        self._adopt(saved, workout)
        self.cursor = Cursor()
        self.is_active = True
        try:
            confirmed = await self._sync.write(WorkoutSessionUpdate(status=SessionStatus.IN_PROGRESS))
        except TrackerError:
            logger.warning("Session %s created but not confirmed in progress", saved.id, exc_info=True)
        else:
            self._ensure_open()
            self._apply_server_fields(confirmed)
        logger.info("Started session %s (%s)", saved.id, workout.name)
        return self.session

    # Progress tracker

    async def complete_set(self) -> SetOutcome:
        """Complete the set under the cursor; finishes the session after the last set."""
        session = self._require_session()
        if not self.is_active:
            raise InvalidTransitionError(
                f"Session is not running (status {session.status.value}); resume it before completing sets"
            )
        if not session.exercises:
            raise TrackerError(f"Session {session.id} has no exercises to track")
        outcome = progress.complete_set(session.exercises, self.cursor)
        if outcome.session_finished:
            await self.finish()
            return outcome
        self.cursor = outcome.cursor
        self._changed()
        return outcome

    # Persistence sync

    def _changed(self) -> None:
        """Push the full exercise array after a tracked change while the session runs."""
        if self.session is None or self._sync is None or not self.is_active:
            return
        self._sync.schedule(
            WorkoutSessionUpdate(
                exercises=self.session.exercises,
                status=SessionStatus.IN_PROGRESS,
            )
        )

    async def flush(self) -> None:
        """Wait for queued progress writes."""
        if self._sync is not None:
            await self._sync.flush()

    # Session resolver

    async def resolve(self, session_id: str | None = None) -> WorkoutSessionRead | None:
        """Adopt a stored session: the requested one, or else the first active one.

        Returns None (selector screen) when there is no active session. A missing
        requested session or template resets to the selector and raises.
        """
        self._ensure_open()
        sessions = await self.client.list_sessions()
        self._ensure_open()

        if session_id is not None:
            found = next((s for s in sessions if str(s.id) == str(session_id)), None)
            if found is None:
                self.reset()
                raise SessionNotFoundError(f"Workout session {session_id} not found")
        else:
            found = progress.find_active_session(sessions)
            if found is None:
                self.reset()
                return None

        try:
            workout = await self.find_workout(found.workout_id)
        except WorkoutNotFoundError:
            self.reset()
            raise
        self._ensure_open()

        self._adopt(found, workout)
        self.is_active = found.status == SessionStatus.IN_PROGRESS
        self.cursor = progress.resolve_cursor(found.exercises)
        logger.info(
            "Resolved session %s at exercise %d set %d",
            found.id, self.cursor.exercise_index, self.cursor.current_set,
        )
        return self.session

    # Session finalizer

    def _closing_fields(self) -> dict:
        session = self._require_session()
        end_time = self.clock()
        minutes = progress.duration_minutes(session.start_time, end_time)
        return {
            "exercises": session.exercises or None,
            "end_time": end_time,
            "duration": minutes,
            "total_calories_burned": estimate_session_calories(
                session.exercises, self.body_weight_kg, minutes
            ),
        }

    async def finish(self) -> WorkoutSessionRead:
        """Store the session as completed and return to the selector."""
        self._require_transition(SessionStatus.COMPLETED)
        update = WorkoutSessionUpdate(status=SessionStatus.COMPLETED, **self._closing_fields())
        saved = await self._sync.write(update)
        self._ensure_open()
        logger.info("Finished session %s after %s min", saved.id, saved.duration)
        self.reset()
        return saved

    async def pause(self) -> WorkoutSessionRead:
        """Save progress as paused on the same session record."""
        self._require_transition(SessionStatus.PAUSED)
        update = WorkoutSessionUpdate(status=SessionStatus.PAUSED, **self._closing_fields())
        saved = await self._sync.write(update)
        self._ensure_open()
        self._apply_server_fields(saved)
        self.is_active = False
        return self.session

    async def resume(self) -> WorkoutSessionRead:
        self._require_transition(SessionStatus.IN_PROGRESS)
        saved = await self._sync.write(
            WorkoutSessionUpdate(exercises=self.session.exercises or None, status=SessionStatus.IN_PROGRESS)
        )
        self._ensure_open()
        self._apply_server_fields(saved)
        self.is_active = True
        return self.session

    async def close(self) -> None:
        """Stop tracking: pending writes are cancelled, late results are ignored."""
        self._closed = True
        if self._sync is not None:
            await self._sync.cancel()
