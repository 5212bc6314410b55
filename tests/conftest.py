import os
import tempfile
from pathlib import Path

import httpx
import pytest

# Point the app at a throwaway SQLite file before anything reads settings.
_DB_DIR = Path(tempfile.mkdtemp(prefix="training_tracker_"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR / 'test_training.db'}"
os.environ.setdefault("ENVIRONMENT", "test")

from training_tracker.db.base import Base  # noqa: E402
from training_tracker.db.session import engine  # noqa: E402
from training_tracker.main import app  # noqa: E402
from training_tracker.tracker.client import TrainingClient  # noqa: E402

TEST_USER = "test-user"


def workout_payload(name: str = "Upper Body", shape: list[tuple[int, int]] | None = None, **extra) -> dict:
    """Template JSON with one exercise per (sets, reps) pair."""
    shape = shape or [(3, 10), (2, 12)]
    payload = {
        "name": name,
        "exercises": [
            {
                "exerciseId": f"ex-{i}",
                "exerciseName": f"Exercise {i}",
                "sets": sets,
                "reps": reps,
                "weight": 40.0 + i * 10,
                "restTime": 90,
            }
            for i, (sets, reps) in enumerate(shape, start=1)
        ],
        "estimatedDuration": 45,
    }
    payload.update(extra)
    return payload


@pytest.fixture
async def db_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture
async def api(db_tables):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://test", headers={"X-User-Id": TEST_USER}
    ) as c:
        yield c


@pytest.fixture
async def client(api) -> TrainingClient:
    return TrainingClient(user_id=TEST_USER, http_client=api)


@pytest.fixture
async def upper_body(client):
    """An "Upper Body" template with 3x10 and 2x12."""
    from training_tracker.schemas.workout import WorkoutTemplateCreate

    return await client.create_workout(WorkoutTemplateCreate.model_validate(workout_payload()))
