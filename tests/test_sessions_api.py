URL = "/api/training/sessions"


def session_payload(**extra) -> dict:
    payload = {
        "workoutId": "w-1",
        "workoutName": "Upper Body",
        "startTime": "2026-10-19T08:00:00Z",
        "exercises": [
            {
                "exerciseId": "ex-1",
                "exerciseName": "Bench Press",
                "sets": [
                    {"setNumber": n, "reps": 10, "weight": 60, "completed": False}
                    for n in (1, 2, 3)
                ],
                "totalSets": 3,
                "completedSets": 0,
            }
        ],
    }
    payload.update(extra)
    return payload


async def _create(api, **extra) -> dict:
    r = await api.post(URL, json=session_payload(**extra))
    assert r.status_code == 201, r.text
    return r.json()


async def test_create_defaults_to_processing(api):
    body = await _create(api)
    assert body["status"] == "processing"
    assert body["revision"] == 0
    assert body["workoutName"] == "Upper Body"
    assert body["exercises"][0]["totalSets"] == 3
    assert body["startTime"].startswith("2026-10-19T08:00:00")


async def test_create_requires_core_fields(api):
    payload = session_payload()
    del payload["workoutId"]
    assert (await api.post(URL, json=payload)).status_code == 422

    payload = session_payload()
    del payload["exercises"]
    assert (await api.post(URL, json=payload)).status_code == 422


async def test_completed_sets_cannot_exceed_total(api):
    payload = session_payload()
    payload["exercises"][0]["completedSets"] = 4
    assert (await api.post(URL, json=payload)).status_code == 422


async def test_session_needs_at_least_one_exercise(api):
    r = await api.post(URL, json=session_payload(exercises=[]))
    assert r.status_code == 422

    created = await _create(api)
    r = await api.put(URL, params={"id": created["id"]}, json={"exercises": []})
    assert r.status_code == 422


async def test_completed_sets_must_match_completed_flags(api):
    payload = session_payload()
    payload["exercises"][0]["completedSets"] = 2
    r = await api.post(URL, json=payload)
    assert r.status_code == 422
    assert "completedSets=2" in r.json()["detail"]

    created = await _create(api)
    exercises = created["exercises"]
    exercises[0]["sets"][0]["completed"] = True
    r = await api.put(URL, params={"id": created["id"]}, json={"exercises": exercises})
    assert r.status_code == 422

    exercises[0]["completedSets"] = 1
    r = await api.put(URL, params={"id": created["id"]}, json={"exercises": exercises})
    assert r.status_code == 200, r.text
    assert r.json()["exercises"][0]["completedSets"] == 1


async def test_list_newest_first_and_filter_by_status(api):
    old = await _create(api, startTime="2026-10-18T08:00:00Z", status="completed")
    new = await _create(api, startTime="2026-10-19T08:00:00Z")

    r = await api.get(URL)
    assert [s["id"] for s in r.json()] == [new["id"], old["id"]]

    r = await api.get(URL, params={"status": "completed"})
    assert [s["id"] for s in r.json()] == [old["id"]]


async def test_partial_update_keeps_unsent_fields(api):
    created = await _create(api)
    r = await api.put(URL, params={"id": created["id"]}, json={"status": "in-progress"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["status"] == "in-progress"
    assert body["exercises"] == created["exercises"]
    assert body["workoutName"] == "Upper Body"


async def test_end_time_without_duration_derives_minutes(api):
    created = await _create(api, status="in-progress")
    r = await api.put(
        URL,
        params={"id": created["id"]},
        json={"status": "completed", "endTime": "2026-10-19T08:42:31Z"},
    )
    assert r.status_code == 200, r.text
    assert r.json()["duration"] == 43


async def test_lifecycle_only_moves_forward(api):
    created = await _create(api)
    sid = created["id"]

    r = await api.put(URL, params={"id": sid}, json={"status": "completed"})
    assert r.status_code == 409

    for status in ("in-progress", "paused", "in-progress", "completed"):
        r = await api.put(URL, params={"id": sid}, json={"status": status})
        assert r.status_code == 200, (status, r.text)

    r = await api.put(URL, params={"id": sid}, json={"status": "in-progress"})
    assert r.status_code == 409


async def test_stale_revision_is_rejected(api):
    created = await _create(api)
    sid = created["id"]

    r = await api.put(URL, params={"id": sid}, json={"status": "in-progress", "revision": 2})
    assert r.status_code == 200
    assert r.json()["revision"] == 2

    r = await api.put(URL, params={"id": sid}, json={"notes": "late", "revision": 1})
    assert r.status_code == 409
    assert "Stale revision" in r.json()["detail"]

    # Same revision again is accepted (a resend of the same write)
    r = await api.put(URL, params={"id": sid}, json={"notes": "again", "revision": 2})
    assert r.status_code == 200
    assert r.json()["notes"] == "again"


async def test_update_needs_id_and_existing_session(api):
    r = await api.put(URL, json={"status": "paused"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Session ID is required"

    r = await api.put(URL, params={"id": "00000000-0000-0000-0000-00000000dead"}, json={"status": "paused"})
    assert r.status_code == 404


async def test_delete_session(api):
    created = await _create(api)
    r = await api.delete(URL, params={"id": created["id"]})
    assert r.status_code == 200
    assert (await api.get(URL)).json() == []


async def test_sessions_are_scoped_to_the_user(api):
    created = await _create(api)
    other = {"X-User-Id": "someone-else"}
    assert (await api.get(URL, headers=other)).json() == []
    r = await api.put(URL, params={"id": created["id"]}, json={"status": "in-progress"}, headers=other)
    assert r.status_code == 404
