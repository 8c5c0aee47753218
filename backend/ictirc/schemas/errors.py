"""Error response schema shared by all exception handlers."""

from typing import Any, Literal, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Uniform failure body."""

    success: Literal[False] = False
    error: str
    code: str
    details: Optional[dict[str, Any]] = None
    request_id: Optional[str] = None
    timestamp: str
