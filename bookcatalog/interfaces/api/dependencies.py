"""FastAPI dependencies for use in API endpoints."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.database import async_session
from ...modules.book.services import BookService

DbSession = Annotated[AsyncSession, Depends(async_session)]


def get_book_service() -> BookService:
    """Dependency for providing a BookService instance."""
    return BookService()
