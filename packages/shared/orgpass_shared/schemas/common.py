"""Response envelopes used across every endpoint."""

from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class FieldError(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """422 body: one entry per offending input field."""
    errors: List[FieldError]


class APIResponse(BaseModel, Generic[T]):
    """Success / failure envelope: ``{status, message, statusCode, data?}``."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    message: str
    status_code: int = Field(alias="statusCode")
    data: Optional[T] = None


class GuardErrorResponse(BaseModel):
    """Body returned when a protected route rejects the bearer credential."""
    error: str
