"""Error envelope shared by every failing response."""
from __future__ import annotations

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
