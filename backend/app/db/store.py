"""In-memory task store.

The store owns the canonical task collection (kept in insertion order) and
the id counter. Nothing is persisted: a new process starts with no tasks.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from itertools import count
from typing import Any, Callable, Dict, List, Mapping, Optional

from app.core.errors import TaskNotFoundError, TaskValidationError
from app.db.models.task import DEFAULT_DURATION_MINUTES, DEFAULT_PRIORITY, PRIORITIES, Task

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "completed", "priority", "scheduled_time", "duration")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TaskValidationError()
    return value.strip()


def _clean_description(value: Any) -> str:
    if not value:
        return ""
    if not isinstance(value, str):
        raise TaskValidationError("Description must be a string")
    return value.strip()


def _clean_scheduled_time(value: Any) -> Optional[str]:
    if not value:
        return None
    if not isinstance(value, str):
        raise TaskValidationError("Scheduled time must be an HH:MM string")
    return value.strip() or None


def _is_valid_priority(value: Any) -> bool:
    return isinstance(value, str) and value in PRIORITIES


def _is_valid_duration(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class TaskStore:
    """Process-scoped task collection with sequential ids."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._tasks: List[Task] = []
        self._ids = count(1)
        self._clock = clock
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._tasks)

    def count(self) -> int:
        return len(self._tasks)

    def create(self, fields: Mapping[str, Any]) -> Task:
        """Validate and append a new task.

        Title is required. Unknown priorities fall back to medium and
        non-positive durations fall back to 30 minutes.
        """
        title = _clean_title(fields.get("title"))
        description = _clean_description(fields.get("description"))
        scheduled_time = _clean_scheduled_time(fields.get("scheduled_time"))
        priority = fields.get("priority")
        duration = fields.get("duration")

        with self._lock:
            now = self._clock()
            task = Task(
                id=next(self._ids),
                title=title,
                description=description,
                completed=bool(fields.get("completed", False)),
                priority=priority if _is_valid_priority(priority) else DEFAULT_PRIORITY,
                scheduled_time=scheduled_time,
                duration=duration if _is_valid_duration(duration) else DEFAULT_DURATION_MINUTES,
                created_at=now,
                updated_at=now,
            )
            self._tasks.append(task)

        logger.info("Task %s created (priority=%s, scheduled_time=%s)", task.id, task.priority, task.scheduled_time)
        return replace(task)

    def get_all(self) -> List[Task]:
        with self._lock:
            return [replace(task) for task in self._tasks]

    def get_by_id(self, task_id: int) -> Task:
        with self._lock:
            return replace(self._find(task_id))

    def update(self, task_id: int, fields: Mapping[str, Any]) -> Task:
        """Apply the provided fields to an existing task.

        Only keys present in ``fields`` are touched. A blank title is rejected
        before anything changes; an invalid priority or duration is ignored and
        the previous value kept. ``scheduled_time`` set to None clears it.
        """
        with self._lock:
            task = self._find(task_id)
            changes: Dict[str, Any] = {}

            if "title" in fields:
                changes["title"] = _clean_title(fields["title"])
            if "description" in fields:
                changes["description"] = _clean_description(fields["description"])
            if "completed" in fields:
                changes["completed"] = bool(fields["completed"])
            if "priority" in fields and _is_valid_priority(fields["priority"]):
                changes["priority"] = fields["priority"]
            if "scheduled_time" in fields:
                changes["scheduled_time"] = _clean_scheduled_time(fields["scheduled_time"])
            if "duration" in fields and _is_valid_duration(fields["duration"]):
                changes["duration"] = fields["duration"]

            ignored = sorted(set(fields) - set(changes))
            for name, value in changes.items():
                setattr(task, name, value)
            task.updated_at = self._clock()

        if ignored:
            logger.debug("Task %s update ignored fields %s", task_id, ignored)
        logger.info("Task %s updated (fields=%s)", task_id, sorted(changes))
        return replace(task)

    def delete(self, task_id: int) -> Task:
        with self._lock:
            task = self._find(task_id)
            self._tasks.remove(task)
        logger.info("Task %s deleted", task_id)
        return task

    def _find(self, task_id: int) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        raise TaskNotFoundError()
