from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.db.store import TaskStore
from app.main import create_app


class TickingClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture()
def clock():
    return TickingClock()


@pytest.fixture()
def store(clock):
    return TaskStore(clock=clock)


@pytest.fixture()
def client(store):
    app = create_app(store=store)
    with TestClient(app) as test_client:
        yield test_client
