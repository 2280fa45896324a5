from __future__ import annotations

from fastapi.testclient import TestClient

from app.main import create_app


def _create(client, **fields):
    response = client.post("/tasks", json={"title": "Write report", **fields})
    assert response.status_code == 201
    return response.json()["data"]


def test_root_returns_greeting(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "Hello BalanceBuddy"


def test_create_task_applies_defaults(client):
    resp = client.post("/tasks", json={"title": "Write report"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Task created successfully"
    data = body["data"]
    assert data["id"] == 1
    assert data["priority"] == "medium"
    assert data["duration"] == 30
    assert data["completed"] is False
    assert data["description"] == ""
    assert data["scheduledTime"] is None
    assert data["createdAt"] == data["updatedAt"]


def test_create_normalizes_priority_and_duration(client):
    assert _create(client, priority="urgent")["priority"] == "medium"
    assert _create(client, duration=-5)["duration"] == 30
    assert _create(client, duration=45)["duration"] == 45


def test_create_blank_title_is_rejected(client, store):
    for body in ({"title": "   "}, {}, {"title": 12}, {"description": "no title"}):
        resp = client.post("/tasks", json=body)
        assert resp.status_code == 400
        assert resp.json() == {
            "success": False,
            "error": "Title is required and must be a non-empty string",
        }
    assert len(store) == 0


def test_create_rejects_wrongly_typed_fields(client, store):
    resp = client.post("/tasks", json={"title": "x", "duration": "45"})
    assert resp.status_code == 400
    assert "duration" in resp.json()["error"]

    resp = client.post("/tasks", json={"title": "x", "scheduledTime": "nine"})
    assert resp.status_code == 400
    assert "scheduledTime" in resp.json()["error"]
    assert len(store) == 0


def test_create_without_body_reports_missing_title(client, store):
    resp = client.post("/tasks")
    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "error": "Title is required and must be a non-empty string",
    }
    assert len(store) == 0


def test_create_rejects_non_object_body(client):
    resp = client.post("/tasks", json=["Write report"])
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_list_tasks_returns_count(client):
    _create(client)
    _create(client, title="Call mom")
    resp = client.get("/tasks")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert [task["id"] for task in body["data"]] == [1, 2]


def test_list_tasks_view_filter(client):
    _create(client)
    _create(client, title="Done", completed=True)
    _create(client, title="Planned", scheduledTime="09:00")

    unscheduled = client.get("/tasks", params={"view": "unscheduled"}).json()
    assert [task["title"] for task in unscheduled["data"]] == ["Write report"]
    completed = client.get("/tasks", params={"view": "completed"}).json()
    assert completed["count"] == 1

    assert client.get("/tasks", params={"view": "someday"}).status_code == 400


def test_get_task_round_trip(client):
    created = _create(client, description="Q3 numbers", priority="high", scheduledTime="09:00", duration=60)
    resp = client.get(f"/tasks/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": created}


def test_get_unknown_or_malformed_id_is_not_found(client):
    for path in ("/tasks/999", "/tasks/abc"):
        resp = client.get(path)
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Task not found"}


def test_update_partial_fields(client):
    created = _create(client, priority="high", description="keep me")
    resp = client.put(f"/tasks/{created['id']}", json={"completed": True})
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Task updated successfully"
    data = body["data"]
    assert data["completed"] is True
    assert data["priority"] == "high"
    assert data["description"] == "keep me"
    assert data["updatedAt"] > created["updatedAt"]
    assert data["createdAt"] == created["createdAt"]


def test_update_invalid_priority_keeps_previous(client):
    created = _create(client, priority="low")
    data = client.put(f"/tasks/{created['id']}", json={"priority": "urgent", "duration": 0}).json()["data"]
    assert data["priority"] == "low"
    assert data["duration"] == 30


def test_update_blank_title_is_rejected(client):
    created = _create(client)
    resp = client.put(f"/tasks/{created['id']}", json={"title": "  "})
    assert resp.status_code == 400
    assert client.get(f"/tasks/{created['id']}").json()["data"]["title"] == "Write report"


def test_update_null_scheduled_time_unschedules(client):
    created = _create(client, scheduledTime="10:30")
    data = client.put(f"/tasks/{created['id']}", json={"scheduledTime": None}).json()["data"]
    assert data["scheduledTime"] is None


def test_update_without_body_only_touches_timestamp(client):
    created = _create(client)
    data = client.put(f"/tasks/{created['id']}").json()["data"]
    assert data["title"] == created["title"]
    assert data["updatedAt"] > created["updatedAt"]


def test_update_unknown_task_is_not_found(client):
    resp = client.put("/tasks/999", json={"title": "Anything"})
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Task not found"}


def test_delete_task(client, store):
    created = _create(client)
    resp = client.delete(f"/tasks/{created['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Task deleted successfully"
    assert body["data"]["id"] == created["id"]
    assert len(store) == 0
    assert client.get(f"/tasks/{created['id']}").status_code == 404


def test_delete_unknown_task_leaves_collection(client, store):
    _create(client)
    resp = client.delete("/tasks/42")
    assert resp.status_code == 404
    assert len(store) == 1


def test_unmatched_routes_use_envelope(client):
    for method, path in (("GET", "/nope"), ("PATCH", "/tasks/1"), ("POST", "/tasks/1")):
        resp = client.request(method, path)
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Route not found"}


def test_unexpected_errors_hide_internals(store, monkeypatch, caplog):
    def explode():
        raise RuntimeError("database exploded")

    monkeypatch.setattr(store, "get_all", explode)
    app = create_app(store=store)
    caplog.set_level("ERROR")
    with TestClient(app) as test_client:
        resp = test_client.get(
            "/tasks",
            headers={"Origin": "http://localhost:3000", "X-Request-ID": "req-500"},
        )
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Something went wrong!"}
    assert "exploded" not in resp.text
    assert "Unhandled error on GET /tasks" in caplog.text
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert resp.headers["X-Request-ID"] == "req-500"


def test_request_id_header_is_echoed(client):
    resp = client.get("/tasks", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"
    assert client.get("/tasks").headers["X-Request-ID"]


def test_cors_allows_frontend_origin(client):
    resp = client.options(
        "/tasks",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert resp.headers["access-control-allow-credentials"] == "true"


def test_each_app_gets_its_own_store():
    with TestClient(create_app()) as first, TestClient(create_app()) as second:
        first.post("/tasks", json={"title": "only here"})
        assert first.get("/tasks").json()["count"] == 1
        assert second.get("/tasks").json()["count"] == 0


def test_requests_succeed_when_observability_disabled(monkeypatch, client):
    import app.observability.client as opik_client

    monkeypatch.setattr(opik_client, "get_opik_client", lambda: None)

    resp = client.post("/tasks", json={"title": "Untraced"})
    assert resp.status_code == 201
    assert client.get("/tasks").json()["count"] == 1
