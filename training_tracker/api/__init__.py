"""Training API router aggregation."""

from fastapi import APIRouter

from training_tracker.api.endpoints import health, sessions, workouts

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(workouts.router, prefix="/workouts", tags=["workouts"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
