"""Error envelope returned by all API endpoints."""

from typing import Any

from fastapi import HTTPException
from pydantic import BaseModel, Field


class ErrorBody(BaseModel):
    """Machine-readable error description."""

    code: int = Field(description="Stable numeric error code")
    message: str = Field(description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Wrapper placed in the ``detail`` field of error responses."""

    error: ErrorBody


def api_error(
    status_code: int,
    code: int,
    message: str,
    details: dict[str, Any] | None = None,
) -> HTTPException:
    """Build an HTTPException carrying the standard error envelope.

    Args:
        status_code: HTTP status to return
        code: Numeric error code
        message: Human-readable message
        details: Optional extra context

    Returns:
        HTTPException: Ready to be raised from a route handler
    """
    body = ErrorResponse(
        error=ErrorBody(code=code, message=message, details=details or {})
    )
    return HTTPException(status_code=status_code, detail=body.model_dump())
