"""Schemas for the progress summary."""
from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class PriorityCountsPayload(BaseModel):
    open: int
    completed: int


class StatsPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_tasks: int = Field(alias="totalTasks")
    completed_tasks: int = Field(alias="completedTasks")
    scheduled_tasks: int = Field(alias="scheduledTasks")
    unscheduled_tasks: int = Field(alias="unscheduledTasks")
    completed_today: int = Field(alias="completedToday")
    completion_rate: int = Field(alias="completionRate")
    by_priority: Dict[str, PriorityCountsPayload] = Field(alias="byPriority")


class StatsResponse(BaseModel):
    success: bool = True
    data: StatsPayload
