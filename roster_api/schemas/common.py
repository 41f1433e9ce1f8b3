from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Standard message response."""
    message: str = Field(..., description="Human readable message")


class OperationResponse(BaseModel):
    """Uniform outcome of an operation: explicit success flag plus message on failure."""
    success: bool = Field(..., description="Whether the operation succeeded")
    message: Optional[str] = Field(default=None, description="Human readable failure message")

    @classmethod
    def failure(cls, message: str):
        return cls(success=False, message=message)


class MutationResponse(OperationResponse):
    """Outcome of a mutation. Failures omit nr_affected and ids."""
    nr_affected: Optional[int] = Field(default=None, description="Number of affected entities")
    ids: Optional[List[str]] = Field(default=None, description="Ids of affected entities")


class ErrorInfo(BaseModel):
    """Structured error description."""
    type: str = Field(..., description="Machine-readable error type code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(default=None, description="Optional error details (e.g., validation issues)")


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Standardized transport error envelope returned by exception handlers."""
    status: int = Field(..., description="HTTP status code")
    error: ErrorInfo = Field(..., description="Error details")
    correlation_id: Optional[str] = Field(default=None, description="Request correlation ID")
    path: Optional[str] = Field(default=None, description="Request path")
    method: Optional[str] = Field(default=None, description="HTTP method")
    timestamp: datetime = Field(..., description="Error timestamp (UTC)")
