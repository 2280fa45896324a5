"""HTTP client that mirrors the server's task collection."""
from app.client.sync import TaskBoardClient

__all__ = ["TaskBoardClient"]
