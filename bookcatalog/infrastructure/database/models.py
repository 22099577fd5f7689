import uuid as uuid_pkg
from datetime import UTC, datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, MappedAsDataclass, mapped_column


def generate_id() -> str:
    """Generate a new string record identifier."""
    return str(uuid_pkg.uuid4())


class StringIdMixin(MappedAsDataclass):
    """Mixin adding a store-assigned string primary key.

    The identifier is a UUID4 rendered as text so it is portable across
    Postgres and SQLite and travels over the wire unchanged. It is excluded
    from ``__init__`` so callers can never choose or overwrite it.

    Attributes:
        id: The primary key, generated when the model is instantiated.
    """

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default_factory=generate_id,
        init=False,
    )


class TimestampMixin(MappedAsDataclass):
    """Mixin for adding created_at and updated_at timestamp columns.

    Both timestamps are timezone-aware and set in UTC when the model is
    instantiated. They are excluded from ``__init__`` so they cannot be
    supplied by clients; services refresh ``updated_at`` on every update.

    Attributes:
        created_at: Timestamp when the record was created.
        updated_at: Timestamp when the record was last updated.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        init=False,
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        default_factory=lambda: datetime.now(UTC),
        nullable=True,
        init=False,
    )
