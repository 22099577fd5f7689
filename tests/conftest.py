"""Test configuration and fixtures for the book catalog."""

import os
from datetime import UTC, datetime

# Must be set before bookcatalog reads its settings.
os.environ["ENVIRONMENT"] = "local"
os.environ["DATABASE_BACKEND"] = "sqlite"
os.environ["SQLITE_URI"] = ":memory:"
os.environ["SQLITE_ASYNC_PREFIX"] = "sqlite+aiosqlite:///"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["CORS_ORIGINS"] = "http://localhost:5173"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from bookcatalog.infrastructure.logging import configure_testing_logging, mark_logging_configured  # noqa: E402

configure_testing_logging()
mark_logging_configured()

from bookcatalog.infrastructure.database.session import Base, async_session  # noqa: E402
from bookcatalog.interfaces.main import app  # noqa: E402
from bookcatalog.modules.book.schemas import BookCreate, BookRead, BookStatus  # noqa: E402
from bookcatalog.modules.book.services import BookService  # noqa: E402
from bookcatalog.modules.catalog.client import BookApiClient  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture(scope="function")
async def test_db_engine():
    """In-memory SQLite engine shared by every connection of one test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(test_db_engine):
    return async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory):
    """HTTP client for the app; each request gets its own session on the test engine."""
    app.dependency_overrides = {}

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[async_session] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest_asyncio.fixture(scope="function")
async def book_api(client):
    """``BookApiClient`` wired to the app in-process, sharing the test database."""
    async with BookApiClient(base_url="http://test/api", transport=ASGITransport(app=app)) as api:
        yield api


@pytest.fixture
def book_service() -> BookService:
    return BookService()


@pytest.fixture
def book_payload() -> dict:
    return {"title": "Dune", "author": "Frank Herbert", "genre": "Science Fiction", "year": 1965}


@pytest_asyncio.fixture
async def test_book(book_service: BookService, db_session: AsyncSession) -> BookRead:
    """A stored, available book."""
    return await book_service.create_book(
        BookCreate(title="The Hobbit", author="J. R. R. Tolkien", genre="Fantasy", year=1937), db_session
    )


@pytest_asyncio.fixture
async def issued_book(book_service: BookService, db_session: AsyncSession) -> BookRead:
    """A stored, issued book."""
    return await book_service.create_book(
        BookCreate(title="1984", author="George Orwell", genre="Dystopian", year=1949, status=BookStatus.ISSUED),
        db_session,
    )


@pytest.fixture
def make_book():
    """Factory for unsaved ``BookRead`` objects, for pure view and cache tests."""

    def _make(index: int, **overrides) -> BookRead:
        fields = {
            "id": f"book-{index}",
            "title": f"Book {index}",
            "author": f"Author {index}",
            "genre": "Fiction",
            "year": 2000,
            "status": BookStatus.AVAILABLE,
            "created_at": datetime(2024, 1, 1, tzinfo=UTC),
        }
        fields.update(overrides)
        return BookRead(**fields)

    return _make
