"""Workout template CRUD endpoints (the tracker's workout selector reads these)."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker.api.deps import get_user_id
from training_tracker.core.constants import MAX_WORKOUTS_LISTED
from training_tracker.db.session import get_db
from training_tracker.models.template import WorkoutTemplate
from training_tracker.schemas.common import MessageRead
from training_tracker.schemas.workout import (
    WorkoutTemplateCreate,
    WorkoutTemplateRead,
    WorkoutTemplateUpdate,
)

logger = logging.getLogger(__name__)
router = APIRouter()


async def _get_owned_template(
    db: AsyncSession, workout_id: uuid.UUID | None, user_id: str
) -> WorkoutTemplate:
    if workout_id is None:
        raise HTTPException(status_code=400, detail="Workout ID is required")
    result = await db.execute(
        select(WorkoutTemplate).where(
            WorkoutTemplate.id == workout_id, WorkoutTemplate.user_id == user_id
        )
    )
    workout = result.scalar_one_or_none()
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


@router.get("", response_model=list[WorkoutTemplateRead])
async def list_workouts(
    q: str | None = None,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """List the caller's workouts, most recently updated first. `q` searches name and description."""
    stmt = select(WorkoutTemplate).where(WorkoutTemplate.user_id == user_id)
    if q and q.strip():
        pattern = f"%{q.strip()}%"
        stmt = stmt.where(
            or_(WorkoutTemplate.name.ilike(pattern), WorkoutTemplate.description.ilike(pattern))
        )
    stmt = stmt.order_by(WorkoutTemplate.updated_at.desc()).limit(MAX_WORKOUTS_LISTED)
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.post("", response_model=WorkoutTemplateRead, status_code=201)
async def create_workout(
    payload: WorkoutTemplateCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Create a workout template."""
    workout = WorkoutTemplate(user_id=user_id, **payload.model_dump())
    db.add(workout)
    await db.flush()
    await db.refresh(workout)
    logger.info("Created workout %s (%d exercises)", workout.id, len(workout.exercises))
    return workout


@router.put("", response_model=WorkoutTemplateRead)
async def update_workout(
    payload: WorkoutTemplateUpdate,
    workout_id: uuid.UUID | None = Query(None, alias="id"),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Partial update. Sessions already started keep the values they copied."""
    workout = await _get_owned_template(db, workout_id, user_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is None and k in ("name", "exercises", "estimated_duration", "difficulty", "tags", "is_template"):
            continue
        setattr(workout, k, v)
    await db.flush()
    await db.refresh(workout)
    return workout


@router.delete("", response_model=MessageRead)
async def delete_workout(
    workout_id: uuid.UUID | None = Query(None, alias="id"),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Delete a workout template. Sessions that reference it are kept."""
    workout = await _get_owned_template(db, workout_id, user_id)
    await db.delete(workout)
    return MessageRead(message="Workout deleted successfully")
