"""Liveness and readiness probes for the training API."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker import __version__
from training_tracker.core.config import get_settings
from training_tracker.db.session import get_db

logger = logging.getLogger(__name__)
router = APIRouter()


def _service_info() -> dict:
    settings = get_settings()
    return {
        "service": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
    }


@router.get("")
async def health():
    """Process is up. Does not touch the database."""
    return {"status": "ok", **_service_info()}


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_db)):
    """Ready to serve: the session store answers a trivial query."""
    info = _service_info()
    try:
        await db.execute(text("SELECT 1"))
    except Exception as exc:
        logger.exception("Session store unreachable")
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "database": str(exc), **info},
        )
    return {"status": "ok", "database": "connected", **info}
