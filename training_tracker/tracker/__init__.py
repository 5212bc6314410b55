"""Workout session tracking on top of the training API."""

from training_tracker.tracker.client import TrainingClient
from training_tracker.tracker.errors import (
    InvalidTransitionError,
    NoActiveSessionError,
    SessionNotFoundError,
    TrackerClosedError,
    TrackerError,
    TrainingAPIError,
    WorkoutNotFoundError,
)
from training_tracker.tracker.progress import Cursor, ProgressSummary, SetOutcome
from training_tracker.tracker.session import SessionTracker
from training_tracker.tracker.sync import SessionSync

__all__ = [
    "Cursor",
    "InvalidTransitionError",
    "NoActiveSessionError",
    "ProgressSummary",
    "SessionNotFoundError",
    "SessionSync",
    "SessionTracker",
    "SetOutcome",
    "TrackerClosedError",
    "TrackerError",
    "TrainingAPIError",
    "TrainingClient",
    "WorkoutNotFoundError",
]
