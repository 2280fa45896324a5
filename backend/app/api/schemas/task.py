"""Schemas for task CRUD and scheduling endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from app.core.errors import TITLE_REQUIRED_MESSAGE
from app.services.scheduling import is_valid_time


def _check_scheduled_time(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    if cleaned and not is_valid_time(cleaned):
        raise ValueError("scheduledTime must start with a 24-hour HH:MM time")
    return cleaned or None


class TaskPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    description: str
    completed: bool
    priority: Literal["low", "medium", "high"]
    scheduled_time: Optional[str] = Field(alias="scheduledTime")
    duration: int
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class TaskCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: Optional[str] = None
    completed: Optional[bool] = None
    # Unknown priorities and non-positive durations are normalized by the store.
    priority: Optional[Any] = None
    scheduled_time: Optional[str] = Field(default=None, alias="scheduledTime")
    duration: Optional[StrictInt] = None

    @field_validator("title")
    @classmethod
    def trim_and_validate_title(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError(TITLE_REQUIRED_MESSAGE)
        return cleaned

    @field_validator("scheduled_time")
    @classmethod
    def validate_scheduled_time(cls, value: Optional[str]) -> Optional[str]:
        return _check_scheduled_time(value)


class TaskUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
    priority: Optional[Any] = None
    scheduled_time: Optional[str] = Field(default=None, alias="scheduledTime")
    duration: Optional[StrictInt] = None

    @field_validator("title")
    @classmethod
    def trim_and_validate_title(cls, value: Optional[str]) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError(TITLE_REQUIRED_MESSAGE)
        return cleaned

    @field_validator("scheduled_time")
    @classmethod
    def validate_scheduled_time(cls, value: Optional[str]) -> Optional[str]:
        return _check_scheduled_time(value)


class TaskScheduleRequest(BaseModel):
    time: str
    duration: Optional[StrictInt] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        cleaned = value.strip()
        if not is_valid_time(cleaned):
            raise ValueError("time must be a 24-hour HH:MM value")
        return cleaned


class TaskListResponse(BaseModel):
    success: bool = True
    data: List[TaskPayload]
    count: int


class TaskResponse(BaseModel):
    success: bool = True
    data: TaskPayload


class TaskMutationResponse(BaseModel):
    success: bool = True
    message: str
    data: TaskPayload
