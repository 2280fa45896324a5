"""Progress summary route."""
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Request

from app.api.schemas.stats import StatsPayload, StatsResponse
from app.db.deps import get_store
from app.db.store import TaskStore
from app.observability.tracing import trace
from app.services.task_stats import compute_stats

router = APIRouter()


@router.get("/stats", response_model=StatsResponse, tags=["stats"])
def get_stats(http_request: Request, store: TaskStore = Depends(get_store)) -> StatsResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("stats.get", metadata={"route": "/stats"}, request_id=request_id):
        stats = compute_stats(store.get_all())
    return StatsResponse(data=StatsPayload(**asdict(stats)))
