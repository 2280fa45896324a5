"""Domain errors translated into the JSON error envelope by the API layer."""
from __future__ import annotations

TITLE_REQUIRED_MESSAGE = "Title is required and must be a non-empty string"


class BalanceBuddyError(Exception):
    status_code = 500
    default_detail = "Something went wrong!"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class TaskValidationError(BalanceBuddyError, ValueError):
    status_code = 400
    default_detail = TITLE_REQUIRED_MESSAGE


class TaskNotFoundError(BalanceBuddyError, LookupError):
    status_code = 404
    default_detail = "Task not found"


class SlotNotFoundError(BalanceBuddyError, LookupError):
    status_code = 404
    default_detail = "Slot not found"
