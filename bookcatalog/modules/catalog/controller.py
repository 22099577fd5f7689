"""Catalog screen logic: load once, derive pages locally, mutate and invalidate."""

from dataclasses import dataclass, replace
from typing import Any, Callable, List, Mapping, Optional, Protocol, Union

from ...infrastructure.logging import get_logger
from ..book.schemas import BookCreate, BookRead, BookReplace
from ..common.exceptions import DomainError
from .cache import BOOKS_QUERY_KEY, QueryCache
from .form import CATALOG_PATH, BookForm, FormResult, Notification
from .view import CatalogPage, CatalogView, paginate

logger = get_logger(__name__)

Confirmation = Union[bool, Callable[[str], bool]]

DELETE_PROMPT = "Are you sure you want to delete this book?"


class BookSource(Protocol):
    async def list_books(self) -> List[BookRead]: ...

    async def get_book(self, book_id: str) -> BookRead: ...

    async def create_book(self, book: BookCreate) -> BookRead: ...

    async def update_book(self, book_id: str, book: BookReplace) -> BookRead: ...

    async def delete_book(self, book_id: str) -> None: ...


@dataclass
class EditFormResult:
    form: Optional[BookForm]
    notification: Optional[Notification] = None
    navigate_to: Optional[str] = None


class CatalogController:
    """Coordinates the API client, the query cache and the catalog view.

    The collection is fetched once per invalidation cycle and every filter
    or page change is derived locally from that snapshot. Mutations never
    touch the cached list in place: they invalidate it and the next render
    refetches.

    A fetch that resolves after ``close()`` or after the collection was
    invalidated mid-flight is handed back to its caller but not cached.
    """

    def __init__(self, client: BookSource, cache: Optional[QueryCache] = None, view: Optional[CatalogView] = None):
        self.client = client
        self.cache = cache if cache is not None else QueryCache()
        self.view = view if view is not None else CatalogView()
        self._closed = False

    async def load_books(self) -> List[BookRead]:
        """Return the cached collection, fetching it if needed."""
        cached = self.cache.get(BOOKS_QUERY_KEY)
        if cached is not None:
            return cached

        generation = self.cache.generation(BOOKS_QUERY_KEY)
        books = await self.client.list_books()

        if self._closed or generation != self.cache.generation(BOOKS_QUERY_KEY):
            logger.debug("Discarding collection fetched for a stale or closed view")
            return books

        self.cache.set(BOOKS_QUERY_KEY, books)
        return books

    async def render(self) -> CatalogPage:
        """Current page for the view's filters; load failures become an error page."""
        try:
            books = await self.load_books()
        except DomainError as e:
            logger.warning(f"Failed to load books: {e}")
            return replace(paginate([], 1, self.view.page_size), error="Error loading books.")
        return self.view.render(books)

    async def delete_book(self, book_id: str, confirm: Confirmation = False) -> Optional[Notification]:
        """Delete a book once the user confirms.

        Args:
            book_id: Book to delete
            confirm: ``True``, or a callable given the prompt text that
                returns whether the user agreed

        Returns:
            None when not confirmed, otherwise a success or error notification
        """
        confirmed = confirm(DELETE_PROMPT) if callable(confirm) else confirm
        if not confirmed:
            return None

        try:
            await self.client.delete_book(book_id)
        except DomainError as e:
            logger.warning(f"Failed to delete book {book_id}: {e}")
            return Notification("Failed to delete book.", "error")

        self.cache.invalidate(BOOKS_QUERY_KEY)
        return Notification("Book deleted successfully!", "success")

    def add_form(self) -> BookForm:
        return BookForm()

    async def edit_form(self, book_id: str) -> EditFormResult:
        """Load a book into an edit form, or send the user back to the catalog."""
        try:
            book = await self.client.get_book(book_id)
        except DomainError as e:
            logger.warning(f"Failed to load book {book_id}: {e}")
            return EditFormResult(
                form=None,
                notification=Notification("Failed to load book details.", "error"),
                navigate_to=CATALOG_PATH,
            )
        return EditFormResult(form=BookForm(book))

    async def submit_form(self, form: BookForm, data: Mapping[str, Any]) -> FormResult:
        return await form.submit(data, self.client, self.cache)

    def close(self) -> None:
        """Mark the view as gone; in-flight fetches will not populate the cache."""
        self._closed = True
