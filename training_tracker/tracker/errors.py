"""Tracker error taxonomy. Transient and permanent failures are handled alike:
the current operation is aborted and the error surfaces to the caller."""


class TrackerError(Exception):
    """Base class for session tracker failures."""


class TrainingAPIError(TrackerError):
    """Network or HTTP failure talking to the training API."""

    def __init__(self, message: str, status_code: int | None = None, detail: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class SessionNotFoundError(TrackerError):
    """Requested session id is not among the user's sessions."""


class WorkoutNotFoundError(TrackerError):
    """A session references a workout template that no longer exists."""


class NoActiveSessionError(TrackerError):
    """Operation needs a session but the tracker is on the selector screen."""


class InvalidTransitionError(TrackerError):
    """Status change not allowed by the session lifecycle."""


class TrackerClosedError(TrackerError):
    """A response arrived after the tracker was closed; its result was discarded."""
