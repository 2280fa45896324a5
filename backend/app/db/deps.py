"""FastAPI dependencies for store access."""
from fastapi import Request

from app.db.store import TaskStore


def get_store(request: Request) -> TaskStore:
    """Return the process-wide task store attached at app creation."""
    return request.app.state.task_store
