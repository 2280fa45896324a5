"""Aggregate counters over the task collection."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Iterable, Optional

from app.db.models.task import PRIORITIES, Task


@dataclass
class PriorityCounts:
    open: int = 0
    completed: int = 0


@dataclass
class TaskStats:
    total_tasks: int = 0
    completed_tasks: int = 0
    scheduled_tasks: int = 0
    unscheduled_tasks: int = 0
    completed_today: int = 0
    completion_rate: int = 0
    by_priority: Dict[str, PriorityCounts] = field(
        default_factory=lambda: {priority: PriorityCounts() for priority in PRIORITIES}
    )


def compute_stats(tasks: Iterable[Task], today: Optional[date] = None) -> TaskStats:
    """Summarize progress; "today" is a UTC date compared against updated_at."""
    target_day = today or datetime.now(timezone.utc).date()
    stats = TaskStats()

    for task in tasks:
        stats.total_tasks += 1
        bucket = stats.by_priority.setdefault(task.priority, PriorityCounts())
        if task.completed:
            stats.completed_tasks += 1
            bucket.completed += 1
            if task.updated_at.astimezone(timezone.utc).date() == target_day:
                stats.completed_today += 1
            continue
        bucket.open += 1
        if task.is_scheduled:
            stats.scheduled_tasks += 1
        else:
            stats.unscheduled_tasks += 1

    if stats.total_tasks:
        # halves round up
        stats.completion_rate = math.floor(stats.completed_tasks / stats.total_tasks * 100 + 0.5)
    return stats
