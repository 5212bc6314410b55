"""Shared request dependencies."""

from fastapi import Header

from training_tracker.core.config import get_settings


async def get_user_id(x_user_id: str | None = Header(None)) -> str:
    """Caller's user id. Until auth exists every request without X-User-Id
    belongs to the configured singleton user."""
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return get_settings().default_user_id
