"""Client-side mirror of the task collection.

``TaskBoardClient`` keeps a local copy of the server's tasks for a timeline
UI. Every mutating call re-fetches the whole collection once the server
confirms it, so the local copy always reflects the server's normalization
(default priority, default duration, refreshed timestamps). Failures never
raise: the message lands in ``error`` until ``dismiss_error`` or the next
refresh clears it, and the local list keeps its previous contents.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from app.db.models.task import DEFAULT_DURATION_MINUTES, Task
from app.services.scheduling import build_timeline, filter_tasks, slot_contents
from app.services.task_stats import TaskStats, compute_stats

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"

_FIELD_ALIASES = {"scheduled_time": "scheduledTime"}


class TaskBoardClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> None:
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self._owns_http = http is None
        self._tasks: List[Task] = []
        self.error: Optional[str] = None
        self.loading = False

    def __enter__(self) -> "TaskBoardClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    @property
    def tasks(self) -> List[Task]:
        """Tasks in server (creation) order."""
        return list(self._tasks)

    @property
    def display_tasks(self) -> List[Task]:
        """Tasks newest first, the order lists are shown in."""
        return list(reversed(self._tasks))

    def dismiss_error(self) -> None:
        self.error = None

    # ---- server calls ----

    def refresh(self) -> bool:
        self.loading = True
        self.error = None
        try:
            body = self._request("GET", "/tasks")
        finally:
            self.loading = False
        if body is None:
            return False
        self._tasks = [Task.from_dict(item) for item in body.get("data", [])]
        logger.debug("Refreshed %s task(s)", len(self._tasks))
        return True

    def create_task(self, title: str, **fields: Any) -> Optional[Task]:
        if not (title or "").strip():
            self.error = "Task title is required"
            return None
        payload = {"title": title.strip(), **_to_wire(fields)}
        return self._mutate("POST", "/tasks", json=payload)

    def update_task(self, task_id: int, **fields: Any) -> Optional[Task]:
        return self._mutate("PUT", f"/tasks/{task_id}", json=_to_wire(fields))

    def toggle_complete(self, task_id: int) -> Optional[Task]:
        current = self._local(task_id)
        completed = not current.completed if current else True
        return self.update_task(task_id, completed=completed)

    def schedule_task(self, task_id: int, time: str, duration: Optional[int] = None) -> Optional[Task]:
        payload: Dict[str, Any] = {"time": time}
        if duration is not None:
            payload["duration"] = duration
        return self._mutate("PUT", f"/tasks/{task_id}/schedule", json=payload)

    def unschedule_task(self, task_id: int) -> Optional[Task]:
        return self._mutate("DELETE", f"/tasks/{task_id}/schedule")

    def delete_task(self, task_id: int) -> Optional[Task]:
        return self._mutate("DELETE", f"/tasks/{task_id}")

    # ---- drag and drop ----

    @staticmethod
    def drag_payload(task: Task) -> str:
        return json.dumps(task.to_dict())

    def drop_on_slot(self, payload: str, slot: str) -> Optional[Task]:
        """Schedule the dragged task into ``slot``, keeping its duration."""
        try:
            dragged = json.loads(payload)
            task_id = int(dragged["id"])
        except (TypeError, ValueError, KeyError) as exc:
            logger.error("Error parsing dragged task: %s", exc)
            return None
        duration = dragged.get("duration") or DEFAULT_DURATION_MINUTES
        return self.schedule_task(task_id, slot, duration)

    # ---- local views ----

    def view(self, name: str = "all") -> List[Task]:
        return filter_tasks(self.display_tasks, name)

    def slot(self, slot_key: str) -> List[Task]:
        return slot_contents(slot_key, self._tasks)

    def timeline(self) -> List[Tuple[str, List[Task]]]:
        return build_timeline(self._tasks)

    def stats(self) -> TaskStats:
        return compute_stats(self._tasks)

    # ---- internals ----

    def _local(self, task_id: int) -> Optional[Task]:
        return next((task for task in self._tasks if task.id == task_id), None)

    def _mutate(self, method: str, path: str, **kwargs: Any) -> Optional[Task]:
        body = self._request(method, path, **kwargs)
        if body is None:
            return None
        task = Task.from_dict(body["data"])
        self.refresh()
        return task

    def _request(self, method: str, path: str, **kwargs: Any) -> Optional[Dict[str, Any]]:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            self.error = f"Could not reach server: {exc}"
            return None

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_error or not body.get("success"):
            self.error = body.get("error") or f"HTTP error! status: {response.status_code}"
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, self.error)
            return None
        return body


def _to_wire(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {_FIELD_ALIASES.get(name, name): value for name, value in fields.items()}
