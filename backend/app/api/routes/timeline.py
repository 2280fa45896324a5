"""Timeline grid and scheduling routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from app.api.routes.task import serialize_task
from app.api.schemas.task import TaskListResponse, TaskMutationResponse, TaskScheduleRequest
from app.api.schemas.timeline import TimelineResponse, TimelineSlotPayload
from app.core.errors import SlotNotFoundError
from app.db.deps import get_store
from app.db.store import TaskStore
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.scheduling import build_timeline, is_grid_slot, schedule, slot_contents, unschedule

router = APIRouter()


@router.get("/timeline", response_model=TimelineResponse, tags=["timeline"])
def get_timeline(http_request: Request, store: TaskStore = Depends(get_store)) -> TimelineResponse:
    """Return every slot of the daily grid with the tasks placed in it."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace("timeline.get", metadata={"route": "/timeline"}, request_id=request_id):
        timeline = build_timeline(store.get_all())

    slots = [
        TimelineSlotPayload(time=slot, tasks=[serialize_task(task) for task in tasks])
        for slot, tasks in timeline
    ]
    placed = sum(len(slot.tasks) for slot in slots)
    log_metric("timeline.placed_tasks", placed)
    return TimelineResponse(data=slots, count=placed)


@router.get("/timeline/{slot}", response_model=TaskListResponse, tags=["timeline"])
def get_slot(slot: str, http_request: Request, store: TaskStore = Depends(get_store)) -> TaskListResponse:
    if not is_grid_slot(slot):
        raise SlotNotFoundError()
    request_id = getattr(http_request.state, "request_id", None)
    with trace("timeline.slot", metadata={"slot": slot}, request_id=request_id):
        tasks = slot_contents(slot, store.get_all())
    return TaskListResponse(data=[serialize_task(task) for task in tasks], count=len(tasks))


@router.put("/tasks/{task_id}/schedule", response_model=TaskMutationResponse, tags=["timeline"])
def schedule_task(
    task_id: int,
    payload: TaskScheduleRequest,
    http_request: Request,
    store: TaskStore = Depends(get_store),
) -> TaskMutationResponse:
    request_id = getattr(http_request.state, "request_id", None)
    metadata = {"task_id": task_id, "time": payload.time, "duration": payload.duration}
    with trace("timeline.schedule", metadata=metadata, request_id=request_id):
        task = schedule(store, task_id, payload.time, payload.duration)

    log_metric("timeline.schedule.success", 1, metadata={"on_grid": is_grid_slot(payload.time[:5])})
    return TaskMutationResponse(message="Task scheduled successfully", data=serialize_task(task))


@router.delete("/tasks/{task_id}/schedule", response_model=TaskMutationResponse, tags=["timeline"])
def unschedule_task(task_id: int, http_request: Request, store: TaskStore = Depends(get_store)) -> TaskMutationResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("timeline.unschedule", metadata={"task_id": task_id}, request_id=request_id):
        task = unschedule(store, task_id)

    log_metric("timeline.unschedule.success", 1)
    return TaskMutationResponse(message="Task unscheduled successfully", data=serialize_task(task))
