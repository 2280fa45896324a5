"""Task record held by the in-memory store."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

PRIORITIES = ("low", "medium", "high")
DEFAULT_PRIORITY = "medium"
DEFAULT_DURATION_MINUTES = 30


@dataclass
class Task:
    id: int
    title: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
    completed: bool = False
    priority: str = DEFAULT_PRIORITY
    scheduled_time: Optional[str] = None
    duration: int = DEFAULT_DURATION_MINUTES

    @property
    def is_scheduled(self) -> bool:
        return bool(self.scheduled_time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "priority": self.priority,
            "scheduledTime": self.scheduled_time,
            "duration": self.duration,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Task":
        """Build a Task from the camelCase JSON shape served by the API."""
        return cls(
            id=int(payload["id"]),
            title=payload["title"],
            description=payload.get("description") or "",
            completed=bool(payload.get("completed", False)),
            priority=payload.get("priority") or DEFAULT_PRIORITY,
            scheduled_time=payload.get("scheduledTime") or None,
            duration=payload.get("duration") or DEFAULT_DURATION_MINUTES,
            created_at=_parse_timestamp(payload["createdAt"]),
            updated_at=_parse_timestamp(payload["updatedAt"]),
        )


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
