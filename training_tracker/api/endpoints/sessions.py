"""Workout session endpoints: create, list, partial update, delete."""

from __future__ import annotations

import logging
import math
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker.api.deps import get_user_id
from training_tracker.core.constants import MAX_SESSIONS_LISTED
from training_tracker.core.enums import SessionStatus, can_transition
from training_tracker.db.session import get_db
from training_tracker.models.session import WorkoutSession
from training_tracker.schemas.common import MessageRead, ensure_utc
from training_tracker.schemas.session import (
    CompletedExercise,
    WorkoutSessionCreate,
    WorkoutSessionRead,
    WorkoutSessionUpdate,
)
from training_tracker.tracker.progress import check_invariants

logger = logging.getLogger(__name__)
router = APIRouter()


async def _get_owned_session(
    db: AsyncSession, session_id: uuid.UUID | None, user_id: str
) -> WorkoutSession:
    if session_id is None:
        raise HTTPException(status_code=400, detail="Session ID is required")
    result = await db.execute(
        select(WorkoutSession).where(
            WorkoutSession.id == session_id, WorkoutSession.user_id == user_id
        )
    )
    session = result.scalar_one_or_none()
    if not session:
        raise HTTPException(status_code=404, detail="Workout session not found")
    return session


def _check_exercises(exercises: list[CompletedExercise] | None) -> None:
    problems = check_invariants(exercises or [])
    if problems:
        raise HTTPException(status_code=422, detail="; ".join(problems))


@router.get("", response_model=list[WorkoutSessionRead])
async def list_sessions(
    status: SessionStatus | None = None,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """List the caller's sessions, newest start first."""
    stmt = select(WorkoutSession).where(WorkoutSession.user_id == user_id)
    if status is not None:
        stmt = stmt.where(WorkoutSession.status == status)
    stmt = stmt.order_by(WorkoutSession.start_time.desc()).limit(MAX_SESSIONS_LISTED)
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.post("", response_model=WorkoutSessionRead, status_code=201)
async def create_session(
    payload: WorkoutSessionCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Create a session record. Status defaults to processing."""
    _check_exercises(payload.exercises)
    session = WorkoutSession(user_id=user_id, revision=0, **payload.model_dump())
    db.add(session)
    await db.flush()
    await db.refresh(session)
    logger.info("Created session %s for workout %s", session.id, session.workout_id)
    return session


@router.put("", response_model=WorkoutSessionRead)
async def update_session(
    payload: WorkoutSessionUpdate,
    session_id: uuid.UUID | None = Query(None, alias="id"),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Partial update of progress and status.

    A write carrying a revision lower than the stored one is stale and rejected,
    so an older snapshot can never overwrite a newer one.
    """
    _check_exercises(payload.exercises)
    session = await _get_owned_session(db, session_id, user_id)
    data = payload.model_dump(exclude_unset=True, exclude_none=True)

    revision = data.pop("revision", None)
    if revision is not None:
        if revision < session.revision:
            raise HTTPException(
                status_code=409,
                detail=f"Stale revision {revision}; session is at revision {session.revision}",
            )
        session.revision = revision

    new_status = data.get("status")
    if new_status is not None and not can_transition(session.status, new_status):
        raise HTTPException(
            status_code=409,
            detail=f"Cannot change status from {SessionStatus(session.status).value} to {new_status.value}",
        )

    if data.get("end_time") and "duration" not in data:
        delta = data["end_time"] - ensure_utc(session.start_time)
        data["duration"] = max(0, math.floor(delta.total_seconds() / 60 + 0.5))

    for k, v in data.items():
        setattr(session, k, v)
    await db.flush()
    await db.refresh(session)
    return session


@router.delete("", response_model=MessageRead)
async def delete_session(
    session_id: uuid.UUID | None = Query(None, alias="id"),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Delete a session."""
    session = await _get_owned_session(db, session_id, user_id)
    await db.delete(session)
    return MessageRead(message="Workout session deleted successfully")
