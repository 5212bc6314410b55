"""Async REST client for the training API.

Usage:
    async with TrainingClient("http://localhost:8000") as client:
        workouts = await client.list_workouts()
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from training_tracker.core.config import get_settings
from training_tracker.core.enums import SessionStatus
from training_tracker.schemas.session import (
    WorkoutSessionCreate,
    WorkoutSessionRead,
    WorkoutSessionUpdate,
)
from training_tracker.schemas.workout import (
    WorkoutTemplateCreate,
    WorkoutTemplateRead,
    WorkoutTemplateUpdate,
)
from training_tracker.tracker.errors import TrainingAPIError

logger = logging.getLogger(__name__)


class TrainingClient:
    """Thin wrapper over httpx.AsyncClient that speaks the /api/training routes
    and turns every network or HTTP failure into TrainingAPIError."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        user_id: str | None = None,
        timeout: float | None = None,
        api_prefix: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.api_prefix = api_prefix if api_prefix is not None else settings.api_prefix
        self._headers = {"X-User-Id": user_id or settings.tracker_user_id}
        self._timeout = httpx.Timeout(timeout if timeout is not None else settings.request_timeout)
        self._owns_client = http_client is None
        self._client = http_client

    async def __aenter__(self) -> TrainingClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self._timeout)
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self._timeout)
            self._owns_client = True
        url = f"{self.api_prefix}{path}"
        try:
            response = await self._client.request(
                method, url, params=params, json=json, headers=self._headers
            )
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise TrainingAPIError(f"{method} {url} failed: {exc}") from exc

        if response.status_code >= 400:
            try:
                body = response.json()
                detail = body.get("detail") if isinstance(body, dict) else body
            except ValueError:
                detail = response.text[:500]
            logger.error("%s %s returned %s: %s", method, url, response.status_code, detail)
            raise TrainingAPIError(
                f"{method} {url} returned {response.status_code}: {detail}",
                status_code=response.status_code,
                detail=str(detail) if detail is not None else None,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise TrainingAPIError(
                f"{method} {url} returned invalid JSON", status_code=response.status_code
            ) from exc

    # Workouts

    async def list_workouts(self, q: str | None = None) -> list[WorkoutTemplateRead]:
        params = {"q": q} if q else None
        data = await self._request("GET", "/workouts", params=params)
        return [WorkoutTemplateRead.model_validate(w) for w in data]

    async def create_workout(self, workout: WorkoutTemplateCreate) -> WorkoutTemplateRead:
        data = await self._request("POST", "/workouts", json=workout.to_wire())
        return WorkoutTemplateRead.model_validate(data)

    async def update_workout(self, workout_id: str, update: WorkoutTemplateUpdate) -> WorkoutTemplateRead:
        data = await self._request(
            "PUT", "/workouts", params={"id": str(workout_id)}, json=update.to_wire(exclude_unset=True)
        )
        return WorkoutTemplateRead.model_validate(data)

    async def delete_workout(self, workout_id: str) -> None:
        await self._request("DELETE", "/workouts", params={"id": str(workout_id)})

    # Sessions

    async def list_sessions(self, status: SessionStatus | None = None) -> list[WorkoutSessionRead]:
        params = {"status": SessionStatus(status).value} if status else None
        data = await self._request("GET", "/sessions", params=params)
        return [WorkoutSessionRead.model_validate(s) for s in data]

    async def create_session(self, draft: WorkoutSessionCreate) -> WorkoutSessionRead:
        data = await self._request("POST", "/sessions", json=draft.to_wire(exclude_none=True))
        return WorkoutSessionRead.model_validate(data)

    async def update_session(self, session_id: str, update: WorkoutSessionUpdate) -> WorkoutSessionRead:
        data = await self._request(
            "PUT", "/sessions", params={"id": str(session_id)}, json=update.to_wire(exclude_none=True)
        )
        return WorkoutSessionRead.model_validate(data)

    async def delete_session(self, session_id: str) -> None:
        await self._request("DELETE", "/sessions", params={"id": str(session_id)})
