"""Shared enums for models and API."""

from enum import Enum


class Difficulty(str, Enum):
    """Workout template difficulty label."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SessionStatus(str, Enum):
    """Lifecycle tag on a workout session."""

    PROCESSING = "processing"  # Freshly created, not yet confirmed in progress
    IN_PROGRESS = "in-progress"
    PAUSED = "paused"
    COMPLETED = "completed"
    FAILED = "failed"  # Only set by external error handling

    @property
    def is_active(self) -> bool:
        return self in ACTIVE_STATUSES


ACTIVE_STATUSES = frozenset(
    {SessionStatus.PROCESSING, SessionStatus.IN_PROGRESS, SessionStatus.PAUSED}
)

# Forward-only lifecycle; staying in the same status is always allowed.
ALLOWED_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.PROCESSING: frozenset(
        {SessionStatus.PROCESSING, SessionStatus.IN_PROGRESS, SessionStatus.FAILED}
    ),
    SessionStatus.IN_PROGRESS: frozenset(
        {
            SessionStatus.IN_PROGRESS,
            SessionStatus.PAUSED,
            SessionStatus.COMPLETED,
            SessionStatus.FAILED,
        }
    ),
    SessionStatus.PAUSED: frozenset(
        {
            SessionStatus.PAUSED,
            SessionStatus.IN_PROGRESS,
            SessionStatus.COMPLETED,
            SessionStatus.FAILED,
        }
    ),
    SessionStatus.COMPLETED: frozenset({SessionStatus.COMPLETED}),
    SessionStatus.FAILED: frozenset({SessionStatus.FAILED}),
}


def can_transition(current: SessionStatus, target: SessionStatus) -> bool:
    """True when a session in `current` may move to `target`."""
    return target in ALLOWED_TRANSITIONS[SessionStatus(current)]
