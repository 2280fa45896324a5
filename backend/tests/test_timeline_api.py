from __future__ import annotations


def _create(client, **fields):
    return client.post("/tasks", json={"title": "Task", **fields}).json()["data"]


def test_timeline_lists_every_grid_slot(client):
    resp = client.get("/timeline")
    assert resp.status_code == 200
    body = resp.json()
    assert [slot["time"] for slot in body["data"]][:2] == ["06:00", "06:30"]
    assert len(body["data"]) == 33
    assert body["count"] == 0


def test_two_tasks_in_same_slot_both_appear(client):
    first = _create(client)
    second = _create(client)
    for task in (first, second):
        resp = client.put(f"/tasks/{task['id']}/schedule", json={"time": "14:00"})
        assert resp.status_code == 200
        assert resp.json()["message"] == "Task scheduled successfully"

    slot = client.get("/timeline/14:00").json()
    assert slot["count"] == 2
    assert [task["id"] for task in slot["data"]] == [first["id"], second["id"]]


def test_schedule_sets_duration(client):
    task = _create(client)
    data = client.put(f"/tasks/{task['id']}/schedule", json={"time": "09:00", "duration": 90}).json()["data"]
    assert data["scheduledTime"] == "09:00"
    assert data["duration"] == 90


def test_slot_excludes_off_grid_times(client):
    _create(client, scheduledTime="09:00")
    _create(client, scheduledTime="09:15")
    slot = client.get("/timeline/09:00").json()
    assert slot["count"] == 1

    timeline = client.get("/timeline").json()
    assert timeline["count"] == 1


def test_unknown_slot_is_not_found(client):
    resp = client.get("/timeline/09:15")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Slot not found"}


def test_unschedule_keeps_task(client):
    task = _create(client, scheduledTime="11:30")
    resp = client.delete(f"/tasks/{task['id']}/schedule")
    assert resp.status_code == 200
    assert resp.json()["data"]["scheduledTime"] is None
    assert client.get("/timeline/11:30").json()["count"] == 0
    assert client.get(f"/tasks/{task['id']}").status_code == 200


def test_schedule_validation_and_not_found(client):
    task = _create(client)
    assert client.put(f"/tasks/{task['id']}/schedule", json={"time": "25:00"}).status_code == 400
    assert client.put(f"/tasks/{task['id']}/schedule", json={}).status_code == 400
    resp = client.put("/tasks/999/schedule", json={"time": "09:00"})
    assert resp.status_code == 404
    assert resp.json()["error"] == "Task not found"


def test_stats_endpoint(client):
    _create(client)
    _create(client, completed=True, priority="high")
    body = client.get("/stats").json()
    assert body["success"] is True
    data = body["data"]
    assert data["totalTasks"] == 2
    assert data["completedTasks"] == 1
    assert data["completionRate"] == 50
    assert data["byPriority"]["high"] == {"open": 0, "completed": 1}
