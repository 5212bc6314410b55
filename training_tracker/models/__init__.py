"""ORM models - import all so Base.metadata is complete for migrations."""

from training_tracker.models.session import WorkoutSession
from training_tracker.models.template import WorkoutTemplate

__all__ = [
    "WorkoutSession",
    "WorkoutTemplate",
]
