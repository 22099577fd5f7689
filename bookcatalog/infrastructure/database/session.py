from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass

from ..config.settings import DatabaseBackend, settings


def _engine_options() -> Dict[str, Any]:
    """Engine keyword arguments for the configured backend.

    SQLite connections are not pooled the way a Postgres server is, so the
    pool sizing only applies to Postgres.
    """
    options: Dict[str, Any] = {"echo": settings.LOG_SQL_QUERIES, "future": True}
    if settings.DATABASE_BACKEND == DatabaseBackend.POSTGRES:
        options["pool_size"] = settings.POSTGRES_POOL_SIZE
        options["max_overflow"] = settings.POSTGRES_MAX_OVERFLOW
    return options


engine = create_async_engine(settings.DATABASE_URL, **_engine_options())

local_session = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase, MappedAsDataclass):
    """Base class for all database models.

    Combines SQLAlchemy's DeclarativeBase with MappedAsDataclass so models
    get dataclass-style ``__init__``/``__repr__``/``__eq__`` generated from
    their mapped columns. Columns declared with ``init=False`` (ids,
    timestamps) are assigned by the model itself and cannot be passed in.

    Example:
        ```python
        class Book(Base):
            __tablename__ = "books"

            id: Mapped[str] = mapped_column(String(36), primary_key=True, init=False)
            title: Mapped[str] = mapped_column(String(255))
        ```
    """

    pass


async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for database session management.

    Yields one ``AsyncSession`` per request and closes it afterwards. Use it
    as ``Depends(async_session)``; tests replace it through
    ``app.dependency_overrides``.

    Yields:
        AsyncSession: A configured async database session.
    """
    async with local_session() as db:
        yield db


async def create_tables() -> None:
    """Create all tables in the database if they don't exist.

    Idempotent: existing tables are left unchanged. Used at startup when
    ``CREATE_TABLES_ON_STARTUP`` is enabled and by ``scripts/create_tables.py``.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
