"""Pydantic schemas for book records."""

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from ..common.schemas import TimestampSchema

MIN_PUBLICATION_YEAR = 1500


def current_year() -> int:
    """The latest publication year a record may carry."""
    return datetime.now().year


class BookStatus(str, Enum):
    """Circulation status of a book."""

    AVAILABLE = "Available"
    ISSUED = "Issued"


NonEmptyText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class BookBase(BaseModel):
    """Fields shared by every book schema."""

    title: NonEmptyText = Field(description="Book title")
    author: NonEmptyText = Field(description="Author name")
    genre: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)] = Field(
        description="Free-form genre label"
    )
    year: int = Field(description="Publication year")


class BookPayload(BookBase):
    """Base for client-supplied payloads; enforces the publication year range."""

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: int) -> int:
        if v < MIN_PUBLICATION_YEAR:
            raise ValueError("Enter a realistic year")
        if v > current_year():
            raise ValueError("Year cannot be in the future")
        return v


class BookCreate(BookPayload):
    """Schema for creating a book; status defaults to Available."""

    status: BookStatus = Field(default=BookStatus.AVAILABLE, description="Circulation status")


class BookReplace(BookPayload):
    """Schema for a full-record update; every mutable field is required."""

    status: BookStatus = Field(description="Circulation status")


class BookCreateInternal(BaseModel):
    """Column values handed to FastCRUD on insert."""

    title: str
    author: str
    genre: str
    year: int
    status: str


class BookRead(TimestampSchema, BookBase):
    """Schema for reading book data."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    status: BookStatus
