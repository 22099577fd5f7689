from .cache import BOOKS_QUERY_KEY, QueryCache
from .client import BookApiClient
from .controller import CatalogController
from .form import BookForm, FormResult, Notification, validate_book_form
from .view import PAGE_SIZE, CatalogPage, CatalogView, filter_books, paginate, total_pages

__all__ = [
    "BOOKS_QUERY_KEY",
    "PAGE_SIZE",
    "BookApiClient",
    "BookForm",
    "CatalogController",
    "CatalogPage",
    "CatalogView",
    "FormResult",
    "Notification",
    "QueryCache",
    "filter_books",
    "paginate",
    "total_pages",
    "validate_book_form",
]
