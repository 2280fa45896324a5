"""Record types exposed by the store."""
from app.db.models.task import DEFAULT_DURATION_MINUTES, DEFAULT_PRIORITY, PRIORITIES, Task

__all__ = [
    "DEFAULT_DURATION_MINUTES",
    "DEFAULT_PRIORITY",
    "PRIORITIES",
    "Task",
]
