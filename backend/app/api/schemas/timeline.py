"""Schemas for the daily timeline grid."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel

from app.api.schemas.task import TaskPayload


class TimelineSlotPayload(BaseModel):
    time: str
    tasks: List[TaskPayload]


class TimelineResponse(BaseModel):
    success: bool = True
    data: List[TimelineSlotPayload]
    count: int
