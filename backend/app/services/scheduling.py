"""Daily timeline grid and slot assignment for tasks.

The grid is a recurring daily template, not tied to a calendar date. A task
sits in a slot only when the first five characters of its ``scheduled_time``
equal the slot key exactly; times off the 30-minute grid (e.g. ``06:15``) stay
in the collection but never show up in any slot.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from app.db.models.task import Task
from app.db.store import TaskStore

logger = logging.getLogger(__name__)

GRID_START_HOUR = 6
GRID_END_HOUR = 22
SLOT_MINUTES = 30

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d")

VIEWS = ("all", "unscheduled", "completed")


def generate_time_slots(
    start_hour: int = GRID_START_HOUR,
    end_hour: int = GRID_END_HOUR,
    step_minutes: int = SLOT_MINUTES,
) -> List[str]:
    """Return "HH:MM" keys from start_hour:00 through end_hour:00 inclusive."""
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")
    if not (0 <= start_hour <= end_hour <= 23):
        raise ValueError("hours must satisfy 0 <= start_hour <= end_hour <= 23")
    slots = []
    for minute_of_day in range(start_hour * 60, end_hour * 60 + 1, step_minutes):
        hour, minute = divmod(minute_of_day, 60)
        slots.append(f"{hour:02d}:{minute:02d}")
    return slots


TIME_SLOTS: Tuple[str, ...] = tuple(generate_time_slots())


def is_valid_time(value: str) -> bool:
    return bool(TIME_PATTERN.match(value or ""))


def is_grid_slot(value: str) -> bool:
    return value in TIME_SLOTS


def slot_key(task: Task) -> Optional[str]:
    if not task.scheduled_time:
        return None
    return task.scheduled_time[:5]


def schedule(store: TaskStore, task_id: int, time: str, duration: Optional[int] = None) -> Task:
    """Place a task at ``time``; other tasks already in that slot are left alone."""
    fields = {"scheduled_time": time}
    if duration is not None:
        fields["duration"] = duration
    task = store.update(task_id, fields)
    if not is_grid_slot(slot_key(task) or ""):
        logger.warning("Task %s scheduled off the timeline grid at %s", task_id, task.scheduled_time)
    return task


def unschedule(store: TaskStore, task_id: int) -> Task:
    return store.update(task_id, {"scheduled_time": None})


def slot_contents(slot: str, tasks: Iterable[Task]) -> List[Task]:
    return [task for task in tasks if slot_key(task) == slot]


def build_timeline(tasks: Sequence[Task], slots: Sequence[str] = TIME_SLOTS) -> List[Tuple[str, List[Task]]]:
    """Pair every grid slot with the tasks that currently occupy it."""
    return [(slot, slot_contents(slot, tasks)) for slot in slots]


def filter_tasks(tasks: Iterable[Task], view: str = "all") -> List[Task]:
    if view == "all":
        return list(tasks)
    if view == "unscheduled":
        return [task for task in tasks if not task.is_scheduled and not task.completed]
    if view == "completed":
        return [task for task in tasks if task.completed]
    raise ValueError(f"Unknown view '{view}'; expected one of {', '.join(VIEWS)}")
