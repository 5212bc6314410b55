from training_tracker import __version__
from training_tracker.db.session import get_db
from training_tracker.main import app


async def test_root_and_liveness(api):
    r = await api.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = await api.get("/api/training/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["service"] == "Training Tracker API"
    assert body["version"] == __version__
    assert "built_at" not in body


async def test_readiness_checks_database(api):
    r = await api.get("/api/training/health/ready")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["database"] == "connected"
    assert body["version"] == __version__


class _BrokenSession:
    async def execute(self, *args, **kwargs):
        raise ConnectionError("connection refused")


async def test_readiness_reports_unreachable_database(api):
    async def broken_db():
        yield _BrokenSession()

    app.dependency_overrides[get_db] = broken_db
    try:
        r = await api.get("/api/training/health/ready")
    finally:
        app.dependency_overrides.pop(get_db, None)
    assert r.status_code == 503
    assert r.json()["status"] == "unavailable"
    assert "connection refused" in r.json()["database"]
