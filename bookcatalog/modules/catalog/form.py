"""Add/edit form for book records."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple

from pydantic import ValidationError as PydanticValidationError

from ...infrastructure.logging import get_logger
from ..book.schemas import BookCreate, BookRead, BookReplace, BookStatus
from ..common.exceptions import DomainError
from .cache import BOOKS_QUERY_KEY, QueryCache

logger = get_logger(__name__)

FORM_FIELDS = ("title", "author", "genre", "year", "status")

FIELD_LABELS = {
    "title": "Title",
    "author": "Author",
    "genre": "Genre",
    "year": "Year",
    "status": "Status",
}

# pydantic error type -> message, for errors that don't carry their own text.
_YEAR_MESSAGES = {
    "int_parsing": "Year must be a number",
    "int_type": "Year must be a number",
    "int_from_float": "Year must be an integer",
    "float_parsing": "Year must be a number",
}

CATALOG_PATH = "/"


class BookWriter(Protocol):
    async def create_book(self, book: BookCreate) -> BookRead: ...

    async def update_book(self, book_id: str, book: BookReplace) -> BookRead: ...


@dataclass(frozen=True)
class Notification:
    """Transient message shown to the user after an action."""

    message: str
    variant: str = "success"


@dataclass
class FormResult:
    """Outcome of a form submission.

    On success ``navigate_to`` points back at the catalog; otherwise the
    form stays open with ``values`` as entered.
    """

    ok: bool
    values: Dict[str, Any]
    errors: Dict[str, str] = field(default_factory=dict)
    book: Optional[BookRead] = None
    notification: Optional[Notification] = None
    navigate_to: Optional[str] = None


def _clean(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep known fields, dropping blanks so they report as missing."""
    cleaned = {}
    for name in FORM_FIELDS:
        value = data.get(name)
        if isinstance(value, str):
            value = value.strip()
        if value is None or value == "":
            continue
        cleaned[name] = value
    return cleaned


def _is_fractional(value: Any) -> bool:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and not number.is_integer()


def _message(name: str, error: Dict[str, Any]) -> str:
    error_type = error.get("type", "")
    if name == "status":
        return "Status must be Available or Issued"
    if error_type in ("missing", "string_too_short"):
        return f"{FIELD_LABELS[name]} is required"
    if name == "year":
        if error_type == "value_error":
            return str(error["ctx"]["error"])
        if error_type == "int_parsing" and _is_fractional(error.get("input")):
            return "Year must be an integer"
        return _YEAR_MESSAGES.get(error_type, "Year must be a number")
    return str(error.get("msg", "Invalid value"))


def validate_book_form(data: Mapping[str, Any]) -> Tuple[Optional[BookReplace], Dict[str, str]]:
    """Validate raw form input.

    Returns:
        ``(payload, {})`` when valid, ``(None, {field: message})`` otherwise.
        Only the first error per field is reported.
    """
    try:
        return BookReplace.model_validate(_clean(data)), {}
    except PydanticValidationError as e:
        errors: Dict[str, str] = {}
        for error in e.errors():
            name = str(error["loc"][0]) if error.get("loc") else "form"
            if name in FIELD_LABELS and name not in errors:
                errors[name] = _message(name, error)
        return None, errors


class BookForm:
    """Form shared by the Add and Edit flows.

    Constructed with an existing ``BookRead`` it is in edit mode and starts
    pre-populated from that record; otherwise it starts blank with status
    Available.
    """

    def __init__(self, book: Optional[BookRead] = None) -> None:
        self.book = book
        if book is not None:
            self.values: Dict[str, Any] = {name: getattr(book, name) for name in FORM_FIELDS}
            self.values["status"] = book.status.value
        else:
            self.values = {"title": "", "author": "", "genre": "", "year": "", "status": BookStatus.AVAILABLE.value}
        self.errors: Dict[str, str] = {}

    @property
    def is_editing(self) -> bool:
        return self.book is not None

    def validate(self, data: Mapping[str, Any]) -> Optional[BookReplace]:
        """Validate ``data``, keeping the entered values and any field errors on the form."""
        self.values = {name: data.get(name, "") for name in FORM_FIELDS}
        payload, self.errors = validate_book_form(data)
        return payload

    async def submit(self, data: Mapping[str, Any], client: BookWriter, cache: QueryCache) -> FormResult:
        """Validate and send the form.

        Editing calls ``update_book``, otherwise ``create_book``. A
        successful call invalidates the cached collection. API failures are
        reported as an error notification and never raised.
        """
        payload = self.validate(data)
        if payload is None:
            return FormResult(ok=False, values=dict(self.values), errors=dict(self.errors))

        action = "update" if self.is_editing else "add"
        try:
            if self.book is not None:
                book = await client.update_book(self.book.id, payload)
            else:
                book = await client.create_book(BookCreate.model_validate(payload.model_dump()))
        except DomainError as e:
            logger.warning(f"Failed to {action} book: {e}")
            return FormResult(
                ok=False,
                values=dict(self.values),
                errors=dict(self.errors),
                notification=Notification(f"Failed to {action} book.", "error"),
            )

        cache.invalidate(BOOKS_QUERY_KEY)
        message = "Book updated successfully!" if self.is_editing else "Book added successfully!"
        return FormResult(
            ok=True,
            values=dict(self.values),
            book=book,
            notification=Notification(message, "success"),
            navigate_to=CATALOG_PATH,
        )
