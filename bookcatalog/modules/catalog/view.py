"""Search, filter and pagination over a fetched book collection.

Everything here is pure: the visible page is a function of the snapshot and
``(search, genre, status, page)`` only, so no request is made when a filter
changes.
"""

import math
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Union

from ..book.schemas import BookRead, BookStatus

PAGE_SIZE = 10


def filter_books(
    books: Sequence[BookRead],
    search: str = "",
    genre: Optional[str] = None,
    status: Optional[Union[BookStatus, str]] = None,
) -> List[BookRead]:
    """Apply the text, genre and status filters in that order.

    The search string matches title or author case-insensitively; an empty
    search, genre or status keeps everything.
    """
    needle = search.lower()
    filtered = [book for book in books if needle in book.title.lower() or needle in book.author.lower()]
    if genre:
        filtered = [book for book in filtered if book.genre == genre]
    if status:
        filtered = [book for book in filtered if book.status == status]
    return filtered


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages for ``count`` items; an empty result still has one page."""
    return max(1, math.ceil(count / page_size))


def genre_options(books: Sequence[BookRead]) -> List[str]:
    """Distinct genres in first-seen order, for the genre dropdown."""
    return list(dict.fromkeys(book.genre for book in books))


@dataclass(frozen=True)
class CatalogPage:
    """One rendered page of the catalog."""

    items: List[BookRead]
    page: int
    total_pages: int
    total: int
    genres: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def paginate(items: Sequence[BookRead], page: int = 1, page_size: int = PAGE_SIZE) -> CatalogPage:
    """Slice out one page, clamping ``page`` into ``[1, total_pages]``."""
    pages = total_pages(len(items), page_size)
    page = min(max(1, page), pages)
    start = (page - 1) * page_size
    return CatalogPage(items=list(items[start : start + page_size]), page=page, total_pages=pages, total=len(items))


@dataclass(frozen=True)
class CatalogFilters:
    search: str = ""
    genre: str = ""
    status: str = ""
    page: int = 1


class CatalogView:
    """Filter state for the catalog screen.

    Changing the search text, genre or status always returns to page 1.
    """

    def __init__(self, page_size: int = PAGE_SIZE) -> None:
        self.page_size = page_size
        self.filters = CatalogFilters()

    def set_search(self, search: str) -> None:
        self.filters = replace(self.filters, search=search, page=1)

    def set_genre(self, genre: Optional[str]) -> None:
        self.filters = replace(self.filters, genre=genre or "", page=1)

    def set_status(self, status: Optional[Union[BookStatus, str]]) -> None:
        value = status.value if isinstance(status, BookStatus) else (status or "")
        self.filters = replace(self.filters, status=value, page=1)

    def set_page(self, page: int) -> None:
        self.filters = replace(self.filters, page=page)

    def render(self, books: Sequence[BookRead]) -> CatalogPage:
        filters = self.filters
        filtered = filter_books(books, filters.search, filters.genre, filters.status)
        page = paginate(filtered, filters.page, self.page_size)
        return replace(page, genres=genre_options(books))
