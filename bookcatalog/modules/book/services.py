"""Book management service."""

from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any, Iterator, List, Mapping, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.logging import get_logger
from ..common.exceptions import ResourceNotFoundError, StoreUnavailableError
from ..common.utils.error_handler import validation_error_from_pydantic
from .crud import book_crud
from .schemas import BookCreate, BookCreateInternal, BookRead, BookReplace

logger = get_logger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class BookService:
    """Service for managing book records.

    Validates payloads, delegates persistence to FastCRUD and converts rows
    into ``BookRead``. Failures surface as domain errors:
    ``ValidationError`` for bad payloads, ``ResourceNotFoundError`` for
    unknown ids and ``StoreUnavailableError`` when the database fails.
    Nothing is retried.
    """

    async def list_books(self, db: AsyncSession) -> List[BookRead]:
        """Return every book, oldest first, without filtering or paging.

        Args:
            db: Database session

        Returns:
            All stored books
        """
        with self._store_errors("list books"):
            stmt = await book_crud.select(sort_columns="created_at", sort_orders="asc")
            result = await db.execute(stmt)
            rows = result.mappings().all()

        return [BookRead.model_validate(dict(row)) for row in rows]

    async def get_book(self, book_id: str, db: AsyncSession) -> BookRead:
        """Get a single book.

        Args:
            book_id: Book ID to retrieve
            db: Database session

        Returns:
            The stored book

        Raises:
            ResourceNotFoundError: If no book has this id
        """
        with self._store_errors("get book"):
            row = await book_crud.get(db=db, id=book_id)

        if row is None:
            raise ResourceNotFoundError("Book not found")
        return BookRead.model_validate(row)

    async def create_book(self, book_data: Union[BookCreate, Mapping[str, Any]], db: AsyncSession) -> BookRead:
        """Create a new book.

        Args:
            book_data: Book fields; status defaults to Available
            db: Database session

        Returns:
            The created book with its assigned id and timestamps
        """
        payload = self._validate(BookCreate, book_data)
        book_internal = BookCreateInternal(**payload.model_dump(mode="json"))

        with self._store_errors("create book"):
            created_book = await book_crud.create(
                db=db, object=book_internal, schema_to_select=BookRead, return_as_model=True
            )

        book = BookRead.model_validate(created_book)
        logger.info("Book created", extra={"book_id": book.id})
        return book

    async def update_book(
        self, book_id: str, book_data: Union[BookReplace, Mapping[str, Any]], db: AsyncSession
    ) -> BookRead:
        """Replace every mutable field of a book.

        Args:
            book_id: Book ID to update
            book_data: Complete set of book fields
            db: Database session

        Returns:
            The updated book
        """
        payload = self._validate(BookReplace, book_data)
        update_dict = payload.model_dump(mode="json")
        update_dict["updated_at"] = datetime.now(UTC)

        with self._store_errors("update book"):
            if not await book_crud.exists(db=db, id=book_id):
                raise ResourceNotFoundError("Book not found")
            await book_crud.update(db=db, object=update_dict, id=book_id)

        logger.info("Book updated", extra={"book_id": book_id})
        return await self.get_book(book_id, db)

    async def delete_book(self, book_id: str, db: AsyncSession) -> None:
        """Delete a book permanently.

        Deleting an id that does not exist, including one that was already
        deleted, raises ``ResourceNotFoundError``.

        Args:
            book_id: Book ID to delete
            db: Database session
        """
        with self._store_errors("delete book"):
            if not await book_crud.exists(db=db, id=book_id):
                raise ResourceNotFoundError("Book not found")
            await book_crud.db_delete(db=db, id=book_id)

        logger.info("Book deleted", extra={"book_id": book_id})

    @staticmethod
    def _validate(schema: Type[PayloadT], data: Union[PayloadT, Mapping[str, Any]]) -> PayloadT:
        if isinstance(data, schema):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump()
        try:
            return schema.model_validate(data)
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e, "Invalid book data") from e

    @staticmethod
    @contextmanager
    def _store_errors(operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Record store failed to {operation}", exc_info=True)
            raise StoreUnavailableError(f"Record store unavailable: could not {operation}") from e
