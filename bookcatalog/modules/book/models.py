"""SQLAlchemy models for book records."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.models import StringIdMixin, TimestampMixin
from ...infrastructure.database.session import Base
from .schemas import BookStatus


class Book(Base, StringIdMixin, TimestampMixin):
    """A single catalogued book.

    The id and timestamps are assigned on instantiation; ``status`` is a
    plain enumerated value stored as text with no transition rules.
    """

    __tablename__ = "books"

    title: Mapped[str] = mapped_column(String(255), index=True)
    author: Mapped[str] = mapped_column(String(255), index=True)
    genre: Mapped[str] = mapped_column(String(100), index=True)
    year: Mapped[int] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(16), default=BookStatus.AVAILABLE.value)
