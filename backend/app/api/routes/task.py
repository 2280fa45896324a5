"""Task CRUD API routes."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from app.api.schemas.task import (
    TaskCreateRequest,
    TaskListResponse,
    TaskMutationResponse,
    TaskPayload,
    TaskResponse,
    TaskUpdateRequest,
)
from app.db.deps import get_store
from app.db.models.task import Task
from app.db.store import TaskStore
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.scheduling import filter_tasks

router = APIRouter()


@router.get("/tasks", response_model=TaskListResponse, tags=["tasks"])
def list_tasks(
    http_request: Request,
    view: str = Query("all", pattern="^(all|unscheduled|completed)$"),
    store: TaskStore = Depends(get_store),
) -> TaskListResponse:
    """List tasks in creation order, optionally narrowed to a sidebar view."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace("task.list", metadata={"route": "/tasks", "view": view}, request_id=request_id):
        tasks = filter_tasks(store.get_all(), view)

    log_metric("task.list.count", len(tasks), metadata={"view": view})
    return TaskListResponse(data=[serialize_task(task) for task in tasks], count=len(tasks))


@router.get("/tasks/{task_id}", response_model=TaskResponse, tags=["tasks"])
def get_task(task_id: int, http_request: Request, store: TaskStore = Depends(get_store)) -> TaskResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("task.get", metadata={"task_id": task_id}, request_id=request_id):
        task = store.get_by_id(task_id)
    return TaskResponse(data=serialize_task(task))


@router.post(
    "/tasks",
    response_model=TaskMutationResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["tasks"],
)
def create_task(
    payload: TaskCreateRequest,
    http_request: Request,
    store: TaskStore = Depends(get_store),
) -> TaskMutationResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("task.create", metadata={"route": "/tasks"}, request_id=request_id) as span:
        task = store.create(payload.model_dump())
        span.update(metadata={"task_id": task.id, "priority": task.priority})

    log_metric("task.create.success", 1, metadata={"priority": task.priority})
    return TaskMutationResponse(message="Task created successfully", data=serialize_task(task))


@router.put("/tasks/{task_id}", response_model=TaskMutationResponse, tags=["tasks"])
def update_task(
    task_id: int,
    http_request: Request,
    payload: Optional[TaskUpdateRequest] = None,
    store: TaskStore = Depends(get_store),
) -> TaskMutationResponse:
    """Apply a partial update; only fields present in the body change."""
    request_id = getattr(http_request.state, "request_id", None)
    fields = payload.model_dump(exclude_unset=True) if payload else {}
    with trace("task.update", metadata={"task_id": task_id, "fields": sorted(fields)}, request_id=request_id):
        task = store.update(task_id, fields)

    log_metric("task.update.success", 1, metadata={"task_id": task_id})
    return TaskMutationResponse(message="Task updated successfully", data=serialize_task(task))


@router.delete("/tasks/{task_id}", response_model=TaskMutationResponse, tags=["tasks"])
def delete_task(task_id: int, http_request: Request, store: TaskStore = Depends(get_store)) -> TaskMutationResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("task.delete", metadata={"task_id": task_id}, request_id=request_id):
        task = store.delete(task_id)

    log_metric("task.delete.success", 1, metadata={"task_id": task_id})
    return TaskMutationResponse(message="Task deleted successfully", data=serialize_task(task))


def serialize_task(task: Task) -> TaskPayload:
    return TaskPayload(
        id=task.id,
        title=task.title,
        description=task.description,
        completed=bool(task.completed),
        priority=task.priority,
        scheduled_time=task.scheduled_time,
        duration=task.duration,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )
