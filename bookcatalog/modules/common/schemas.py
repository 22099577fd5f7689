"""Shared pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TimestampSchema(BaseModel):
    """Store-assigned timestamps carried by every persisted record."""

    created_at: datetime = Field(description="When the record was created")
    updated_at: Optional[datetime] = Field(default=None, description="When the record was last updated")


class ErrorResponse(BaseModel):
    """Error body returned by every API endpoint."""

    detail: str


class FieldError(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(ErrorResponse):
    """Error body for rejected payloads."""

    errors: list[FieldError] = Field(default_factory=list)
