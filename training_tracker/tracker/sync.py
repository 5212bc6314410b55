"""Sequential write queue for one session.

Every write is stamped with the next revision and sent under a lock, so the API
sees revisions in increasing order. Background progress writes are coalesced:
while one is in flight only the newest pending snapshot is kept, older ones are
dropped. Background failures are logged and never raised.
"""

from __future__ import annotations

import asyncio
import logging

from training_tracker.schemas.session import WorkoutSessionRead, WorkoutSessionUpdate
from training_tracker.tracker.client import TrainingClient
from training_tracker.tracker.errors import TrackerError

logger = logging.getLogger(__name__)


class SessionSync:
    def __init__(self, client: TrainingClient, session_id: str, revision: int = 0) -> None:
        self.client = client
        self.session_id = str(session_id)
        self.revision = revision
        self._lock = asyncio.Lock()
        self._pending: WorkoutSessionUpdate | None = None
        self._task: asyncio.Task | None = None
        self.failures = 0
        self.writes = 0

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self, update: WorkoutSessionUpdate) -> None:
        """Queue a fire-and-forget write; replaces any snapshot not yet sent."""
        self._pending = update.model_copy(deep=True)
        if not self.busy:
            self._task = asyncio.create_task(self._drain())

    async def write(self, update: WorkoutSessionUpdate) -> WorkoutSessionRead:
        """Send a write now, after anything already queued. Errors propagate."""
        await self.flush()
        async with self._lock:
            return await self._send(update)

    async def flush(self) -> None:
        """Wait until queued background writes have been attempted."""
        while self.busy:
            await asyncio.shield(self._task)

    async def cancel(self) -> None:
        """Drop queued writes and stop the one in flight, if any."""
        self._pending = None
        if self.busy:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None

    async def _drain(self) -> None:
        while self._pending is not None:
            update, self._pending = self._pending, None
            async with self._lock:
                try:
                    await self._send(update)
                except TrackerError:
                    self.failures += 1
                    logger.warning(
                        "Progress sync for session %s failed; local state kept", self.session_id,
                        exc_info=True,
                    )

    async def _send(self, update: WorkoutSessionUpdate) -> WorkoutSessionRead:
        self.revision += 1
        stamped = update.model_copy(update={"revision": self.revision})
        result = await self.client.update_session(self.session_id, stamped)
        self.writes += 1
        return result
