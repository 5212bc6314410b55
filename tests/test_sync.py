import asyncio
import uuid
from datetime import datetime, timezone

import pytest

from training_tracker.core.enums import SessionStatus
from training_tracker.schemas.session import WorkoutSessionRead, WorkoutSessionUpdate
from training_tracker.tracker.errors import TrainingAPIError
from training_tracker.tracker.sync import SessionSync


class RecordingClient:
    """Stands in for TrainingClient.update_session; can hold each write until released."""

    def __init__(self, fail: bool = False, hold: bool = False):
        self.fail = fail
        self.calls: list[WorkoutSessionUpdate] = []
        self.gate = asyncio.Event()
        if not hold:
            self.gate.set()

    async def update_session(self, session_id, update):
        self.calls.append(update)
        await self.gate.wait()
        if self.fail:
            raise TrainingAPIError("PUT failed", status_code=503)
        return WorkoutSessionRead(
            id=uuid.UUID(session_id),
            workout_id="w",
            workout_name="W",
            start_time=datetime(2026, 10, 19, tzinfo=timezone.utc),
            exercises=[],
            status=update.status or SessionStatus.IN_PROGRESS,
            revision=update.revision,
        )


SESSION_ID = str(uuid.uuid4())


def note(text: str) -> WorkoutSessionUpdate:
    return WorkoutSessionUpdate(notes=text, status=SessionStatus.IN_PROGRESS)


async def test_writes_carry_increasing_revisions():
    client = RecordingClient()
    sync = SessionSync(client, SESSION_ID, revision=4)
    await sync.write(note("a"))
    sync.schedule(note("b"))
    await sync.flush()
    await sync.write(note("c"))
    assert [c.revision for c in client.calls] == [5, 6, 7]
    assert [c.notes for c in client.calls] == ["a", "b", "c"]


async def test_superseded_snapshots_are_coalesced():
    client = RecordingClient(hold=True)
    sync = SessionSync(client, SESSION_ID)
    sync.schedule(note("first"))
    await asyncio.sleep(0)  # first write is now in flight
    sync.schedule(note("second"))
    sync.schedule(note("third"))
    client.gate.set()
    await sync.flush()

    assert [c.notes for c in client.calls] == ["first", "third"]
    assert [c.revision for c in client.calls] == [1, 2]
    assert sync.writes == 2


async def test_scheduled_snapshot_is_a_copy():
    client = RecordingClient(hold=True)
    sync = SessionSync(client, SESSION_ID)
    update = note("before")
    sync.schedule(update)
    update.notes = "mutated later"
    client.gate.set()
    await sync.flush()
    assert client.calls[0].notes == "before"


async def test_background_failures_are_logged_not_raised(caplog):
    client = RecordingClient(fail=True)
    sync = SessionSync(client, SESSION_ID)
    sync.schedule(note("x"))
    await sync.flush()
    assert sync.failures == 1
    assert "Progress sync for session" in caplog.text


async def test_direct_write_raises():
    sync = SessionSync(RecordingClient(fail=True), SESSION_ID)
    with pytest.raises(TrainingAPIError):
        await sync.write(note("x"))


async def test_write_waits_for_queued_progress():
    client = RecordingClient(hold=True)
    sync = SessionSync(client, SESSION_ID)
    sync.schedule(note("progress"))
    finishing = asyncio.create_task(sync.write(note("finish")))
    await asyncio.sleep(0)
    client.gate.set()
    await finishing
    assert [c.notes for c in client.calls] == ["progress", "finish"]


async def test_cancel_drops_pending_writes():
    client = RecordingClient(hold=True)
    sync = SessionSync(client, SESSION_ID)
    sync.schedule(note("in flight"))
    await asyncio.sleep(0)
    sync.schedule(note("pending"))
    await sync.cancel()
    assert not sync.busy
    assert [c.notes for c in client.calls] == ["in flight"]
