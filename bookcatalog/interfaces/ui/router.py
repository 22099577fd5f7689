"""HTMX UI router for the catalog screen and the add/edit form."""

from html import escape
from typing import Any, List, Mapping, Optional

from fastapi import APIRouter, Depends, Form, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.database.session import async_session
from ...infrastructure.logging import get_logger
from ...modules.book.schemas import BookCreate, BookRead, BookStatus
from ...modules.book.services import BookService
from ...modules.catalog.controller import DELETE_PROMPT
from ...modules.catalog.form import FIELD_LABELS, BookForm, Notification
from ...modules.catalog.view import CatalogPage, CatalogView
from ...modules.common.exceptions import DomainError, ResourceNotFoundError
from ..api.dependencies import get_book_service

logger = get_logger(__name__)

router = APIRouter(prefix="/ui", tags=["ui"])

BOOKS_CHANGED_EVENT = "books-changed"

_BANNER_STYLES = {
    "success": "bg-green-100 border border-green-400 text-green-700",
    "error": "bg-red-100 border border-red-400 text-red-700",
}


def _notification_html(notification: Notification) -> str:
    style = _BANNER_STYLES.get(notification.variant, _BANNER_STYLES["error"])
    return f"""
    <div class="{style} px-4 py-3 rounded" role="alert">
        {escape(notification.message)}
    </div>
    """


def _option(value: str, label: str, selected: str) -> str:
    is_selected = " selected" if value == selected else ""
    return f'<option value="{escape(value, quote=True)}"{is_selected}>{escape(label)}</option>'


def _genre_select_html(genres: List[str], selected: str) -> str:
    """Genre dropdown, swapped out-of-band so its options track the loaded collection."""
    options = [_option("", "All Genres", selected)]
    options += [_option(genre, genre, selected) for genre in genres]
    return f"""
    <select id="genre-filter" name="genre" hx-swap-oob="true"
            class="border rounded px-2 py-1">
        {"".join(options)}
    </select>
    """


def _book_row_html(book: BookRead) -> str:
    return f"""
    <tr class="border-t">
        <td class="px-3 py-2">{escape(book.title)}</td>
        <td class="px-3 py-2">{escape(book.author)}</td>
        <td class="px-3 py-2">{escape(book.genre)}</td>
        <td class="px-3 py-2">{book.year}</td>
        <td class="px-3 py-2">{book.status.value}</td>
        <td class="px-3 py-2 text-center">
            <button hx-get="/ui/books/{book.id}/edit"
                    hx-target="#form-panel"
                    hx-swap="innerHTML"
                    class="bg-yellow-500 hover:bg-yellow-600 text-white px-2 py-1 rounded text-xs">
                Edit
            </button>
            <button hx-delete="/ui/books/{book.id}"
                    hx-target="#notifications"
                    hx-swap="innerHTML"
                    hx-confirm="{DELETE_PROMPT}"
                    class="bg-red-500 hover:bg-red-600 text-white px-2 py-1 rounded text-xs">
                Delete
            </button>
        </td>
    </tr>
    """  # noqa: E501


def _pagination_html(page: CatalogPage) -> str:
    def page_button(number: int, label: str, enabled: bool) -> str:
        if not enabled:
            return f'<button disabled class="px-2 py-1 rounded text-gray-400">{label}</button>'
        return f"""
        <button hx-get="/ui/books" hx-vals='{{"page": "{number}"}}' hx-include="#filters"
                hx-target="#catalog" hx-swap="innerHTML"
                class="px-2 py-1 rounded hover:bg-gray-200">{label}</button>
        """

    numbers = "".join(
        page_button(number, str(number), number != page.page) for number in range(1, page.total_pages + 1)
    )
    return f"""
    <div class="flex justify-center items-center gap-1 mt-4">
        {page_button(page.page - 1, "&laquo;", page.has_previous)}
        {numbers}
        {page_button(page.page + 1, "&raquo;", page.has_next)}
    </div>
    """


def _catalog_html(page: CatalogPage, genre: str) -> str:
    if page.items:
        rows = "".join(_book_row_html(book) for book in page.items)
    else:
        rows = '<tr><td colspan="6" class="px-3 py-4 text-center text-gray-500 italic">No books found.</td></tr>'

    return f"""
    <table class="w-full bg-white rounded shadow">
        <thead>
            <tr class="text-left">
                <th class="px-3 py-2">Title</th>
                <th class="px-3 py-2">Author</th>
                <th class="px-3 py-2">Genre</th>
                <th class="px-3 py-2">Published Year</th>
                <th class="px-3 py-2">Status</th>
                <th class="px-3 py-2 text-center">Actions</th>
            </tr>
        </thead>
        <tbody>{rows}</tbody>
    </table>
    {_pagination_html(page)}
    <input type="hidden" id="current-page" name="page" value="{page.page}" hx-swap-oob="true">
    {_genre_select_html(page.genres, genre)}
    """


def _field_html(name: str, value: Any, error: Optional[str]) -> str:
    label = FIELD_LABELS[name]
    error_html = f'<p class="text-red-600 text-sm">{escape(error)}</p>' if error else ""

    if name == "status":
        options = "".join(_option(status.value, status.value, str(value)) for status in BookStatus)
        control = f'<select name="status" class="w-full border rounded px-2 py-1">{options}</select>'
    else:
        input_type = "number" if name == "year" else "text"
        control = (
            f'<input type="{input_type}" name="{name}" value="{escape(str(value), quote=True)}" '
            f'class="w-full border rounded px-2 py-1">'
        )

    return f"""
    <label class="block mb-3">
        <span class="text-sm font-medium">{label}</span>
        {control}
        {error_html}
    </label>
    """


def _form_html(form: BookForm, notification: Optional[Notification] = None) -> str:
    if form.book is not None:
        heading = "Edit Book"
        action = f'hx-put="/ui/books/{form.book.id}"'
        submit_label = "Update Book"
    else:
        heading = "Add New Book"
        action = 'hx-post="/ui/books"'
        submit_label = "Add Book"

    fields = "".join(_field_html(name, form.values.get(name, ""), form.errors.get(name)) for name in FIELD_LABELS)
    banner = _notification_html(notification) if notification else ""

    return f"""
    <div class="bg-white p-4 rounded shadow">
        <h2 class="text-xl font-bold mb-3">{heading}</h2>
        {banner}
        <form {action} hx-target="#form-panel" hx-swap="innerHTML">
            {fields}
            <div class="flex gap-2">
                <button type="submit" class="bg-blue-500 hover:bg-blue-600 text-white px-3 py-1 rounded">
                    {submit_label}
                </button>
                <button type="button" onclick="document.getElementById('form-panel').innerHTML = ''"
                        class="bg-gray-300 hover:bg-gray-400 px-3 py-1 rounded">
                    Cancel
                </button>
            </div>
        </form>
    </div>
    """


def _changed_response(notification: Notification) -> HTMLResponse:
    """Banner for the notification area plus the event that makes the catalog reload."""
    headers = {"HX-Trigger": BOOKS_CHANGED_EVENT, "HX-Retarget": "#notifications"}
    return HTMLResponse(_notification_html(notification), headers=headers)


def _form_data(title: str, author: str, genre: str, year: str, status: str) -> Mapping[str, Any]:
    return {"title": title, "author": author, "genre": genre, "year": year, "status": status}


@router.get("/books", response_class=HTMLResponse)
async def list_books_ui(
    search: str = Query(""),
    genre: str = Query(""),
    status: str = Query(""),
    page: int = Query(1),
    db: AsyncSession = Depends(async_session),
    book_service: BookService = Depends(get_book_service),
):
    """Render the catalog table for the given filters and page."""
    view = CatalogView()
    view.set_search(search)
    view.set_genre(genre)
    view.set_status(status)
    view.set_page(page)

    try:
        books = await book_service.list_books(db)
    except DomainError as e:
        logger.warning(f"Failed to load books: {e}")
        return HTMLResponse(_notification_html(Notification("Error loading books.", "error")))

    return HTMLResponse(_catalog_html(view.render(books), genre))


@router.get("/books/new", response_class=HTMLResponse)
async def new_book_form_ui():
    """Blank add form."""
    return HTMLResponse(_form_html(BookForm()))


@router.get("/books/{book_id}/edit", response_class=HTMLResponse)
async def edit_book_form_ui(
    book_id: str,
    db: AsyncSession = Depends(async_session),
    book_service: BookService = Depends(get_book_service),
):
    """Edit form pre-populated from the stored record."""
    try:
        book = await book_service.get_book(book_id, db)
    except DomainError as e:
        logger.warning(f"Failed to load book {book_id}: {e}")
        return HTMLResponse(_notification_html(Notification("Failed to load book details.", "error")))

    return HTMLResponse(_form_html(BookForm(book)))


@router.post("/books", response_class=HTMLResponse)
async def create_book_ui(
    title: str = Form(""),
    author: str = Form(""),
    genre: str = Form(""),
    year: str = Form(""),
    status: str = Form(BookStatus.AVAILABLE.value),
    db: AsyncSession = Depends(async_session),
    book_service: BookService = Depends(get_book_service),
):
    """Create a book from the add form."""
    form = BookForm()
    data = _form_data(title, author, genre, year, status)
    payload = form.validate(data)
    if payload is None:
        return HTMLResponse(_form_html(form))

    try:
        await book_service.create_book(BookCreate.model_validate(payload.model_dump()), db)
    except DomainError as e:
        logger.warning(f"Failed to add book: {e}")
        return HTMLResponse(_form_html(form, Notification("Failed to add book.", "error")))

    return _changed_response(Notification("Book added successfully!", "success"))


@router.put("/books/{book_id}", response_class=HTMLResponse)
async def update_book_ui(
    book_id: str,
    title: str = Form(""),
    author: str = Form(""),
    genre: str = Form(""),
    year: str = Form(""),
    status: str = Form(""),
    db: AsyncSession = Depends(async_session),
    book_service: BookService = Depends(get_book_service),
):
    """Replace a book from the edit form."""
    try:
        book = await book_service.get_book(book_id, db)
    except DomainError as e:
        logger.warning(f"Failed to load book {book_id}: {e}")
        return _changed_response(Notification("Failed to load book details.", "error"))

    form = BookForm(book)
    payload = form.validate(_form_data(title, author, genre, year, status))
    if payload is None:
        return HTMLResponse(_form_html(form))

    try:
        await book_service.update_book(book_id, payload, db)
    except DomainError as e:
        logger.warning(f"Failed to update book {book_id}: {e}")
        return HTMLResponse(_form_html(form, Notification("Failed to update book.", "error")))

    return _changed_response(Notification("Book updated successfully!", "success"))


@router.delete("/books/{book_id}", response_class=HTMLResponse)
async def delete_book_ui(
    book_id: str,
    db: AsyncSession = Depends(async_session),
    book_service: BookService = Depends(get_book_service),
):
    """Delete a book; the browser has already asked for confirmation."""
    try:
        await book_service.delete_book(book_id, db)
    except ResourceNotFoundError:
        logger.info(f"Book {book_id} was already gone")
        return _changed_response(Notification("Failed to delete book.", "error"))
    except DomainError as e:
        logger.warning(f"Failed to delete book {book_id}: {e}")
        return HTMLResponse(_notification_html(Notification("Failed to delete book.", "error")))

    return _changed_response(Notification("Book deleted successfully!", "success"))
