"""Book API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ...infrastructure.logging import get_logger
from ...modules.book.schemas import BookCreate, BookRead, BookReplace
from ...modules.book.services import BookService
from ...modules.common.exceptions import DomainError
from ...modules.common.schemas import ErrorResponse, ValidationErrorResponse
from ...modules.common.utils.error_handler import handle_exception
from .dependencies import DbSession, get_book_service

logger = get_logger(__name__)

router = APIRouter(prefix="/books", tags=["Books"])


def _unexpected(e: Exception, operation: str) -> HTTPException:
    http_exc = handle_exception(e)
    if http_exc:
        return http_exc
    logger.error(f"Unexpected error while trying to {operation}: {e}", exc_info=True)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get(
    "",
    summary="List Books",
    description="""
    Returns every book in the catalog, oldest first.

    The collection is neither filtered nor paginated: search, genre and
    status filters and paging are applied by the client over this snapshot.
    """,
    responses={
        200: {"description": "All books"},
        500: {"description": "Record store unavailable", "model": ErrorResponse},
    },
)
async def list_books(
    db: DbSession,
    book_service: BookService = Depends(get_book_service),
) -> List[BookRead]:
    """List all books."""
    try:
        return await book_service.list_books(db)
    except DomainError:
        raise
    except Exception as e:
        raise _unexpected(e, "list books")


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create Book",
    description="""
    Adds a book to the catalog.

    - **title**, **author**, **genre**: required, non-empty
    - **year**: required integer between 1500 and the current year
    - **status**: `Available` (default) or `Issued`

    The id and timestamps are assigned by the server; any sent by the client are ignored.
    """,
    responses={
        201: {"description": "Book created"},
        400: {"description": "Invalid book data", "model": ValidationErrorResponse},
        500: {"description": "Record store unavailable", "model": ErrorResponse},
    },
    response_description="The stored book with its id and timestamps",
)
async def create_book(
    book_data: BookCreate,
    db: DbSession,
    book_service: BookService = Depends(get_book_service),
) -> BookRead:
    """Create a new book."""
    try:
        return await book_service.create_book(book_data, db)
    except DomainError:
        raise
    except Exception as e:
        raise _unexpected(e, "create book")


@router.get(
    "/{book_id}",
    summary="Get Book",
    responses={
        200: {"description": "The book"},
        404: {"description": "Book not found", "model": ErrorResponse},
        500: {"description": "Record store unavailable", "model": ErrorResponse},
    },
)
async def get_book(
    book_id: str,
    db: DbSession,
    book_service: BookService = Depends(get_book_service),
) -> BookRead:
    """Get a specific book by ID."""
    try:
        return await book_service.get_book(book_id, db)
    except DomainError:
        raise
    except Exception as e:
        raise _unexpected(e, "get book")


@router.put(
    "/{book_id}",
    summary="Replace Book",
    description="""
    Replaces every mutable field of a book. Title, author, genre, year and
    status must all be sent; omitted fields are a validation error rather
    than keeping their old values.
    """,
    responses={
        200: {"description": "Book updated"},
        400: {"description": "Invalid book data", "model": ValidationErrorResponse},
        404: {"description": "Book not found", "model": ErrorResponse},
        500: {"description": "Record store unavailable", "model": ErrorResponse},
    },
)
async def update_book(
    book_id: str,
    book_data: BookReplace,
    db: DbSession,
    book_service: BookService = Depends(get_book_service),
) -> BookRead:
    """Update a book."""
    try:
        return await book_service.update_book(book_id, book_data, db)
    except DomainError:
        raise
    except Exception as e:
        raise _unexpected(e, "update book")


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Book",
    description="""
    Permanently deletes a book. Deleting an id that does not exist, including
    one that was already deleted, returns 404.
    """,
    responses={
        204: {"description": "Book deleted"},
        404: {"description": "Book not found", "model": ErrorResponse},
        500: {"description": "Record store unavailable", "model": ErrorResponse},
    },
)
async def delete_book(
    book_id: str,
    db: DbSession,
    book_service: BookService = Depends(get_book_service),
) -> Response:
    """Delete a book."""
    try:
        await book_service.delete_book(book_id, db)
    except DomainError:
        raise
    except Exception as e:
        raise _unexpected(e, "delete book")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
