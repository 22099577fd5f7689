"""Tests for the catalog controller."""

from unittest.mock import AsyncMock

import pytest

from bookcatalog.modules.book.schemas import BookStatus
from bookcatalog.modules.catalog.cache import BOOKS_QUERY_KEY
from bookcatalog.modules.catalog.client import BookApiClient
from bookcatalog.modules.catalog.controller import DELETE_PROMPT, CatalogController
from bookcatalog.modules.common.exceptions import NetworkError, ResourceNotFoundError, StoreUnavailableError


@pytest.fixture
def books(make_book):
    return [make_book(i, genre="Fantasy" if i % 2 else "Classic") for i in range(15)]


@pytest.fixture
def fake_client(books):
    client = AsyncMock()
    client.list_books.return_value = books
    return client


@pytest.mark.asyncio
async def test_collection_is_fetched_once(fake_client):
    controller = CatalogController(fake_client)

    first = await controller.render()
    controller.view.set_genre("Fantasy")
    filtered = await controller.render()
    controller.view.set_page(2)
    await controller.render()

    assert fake_client.list_books.await_count == 1
    assert first.total == 15
    assert first.total_pages == 2
    assert filtered.total == 7


@pytest.mark.asyncio
async def test_load_failure_renders_error_page(fake_client):
    fake_client.list_books.side_effect = StoreUnavailableError("down")
    controller = CatalogController(fake_client)

    page = await controller.render()

    assert page.error == "Error loading books."
    assert page.items == []
    assert page.total_pages == 1
    assert BOOKS_QUERY_KEY not in controller.cache


@pytest.mark.asyncio
async def test_delete_requires_confirmation(fake_client):
    controller = CatalogController(fake_client)
    prompts = []

    def decline(prompt: str) -> bool:
        prompts.append(prompt)
        return False

    assert await controller.delete_book("book-1") is None
    assert await controller.delete_book("book-1", confirm=decline) is None

    fake_client.delete_book.assert_not_called()
    assert prompts == [DELETE_PROMPT]


@pytest.mark.asyncio
async def test_delete_invalidates_and_refetches(fake_client):
    controller = CatalogController(fake_client)
    await controller.render()

    notification = await controller.delete_book("book-1", confirm=lambda prompt: True)
    await controller.render()

    assert notification.message == "Book deleted successfully!"
    assert notification.variant == "success"
    fake_client.delete_book.assert_awaited_once_with("book-1")
    assert fake_client.list_books.await_count == 2


@pytest.mark.asyncio
async def test_delete_failure_keeps_cache(fake_client):
    fake_client.delete_book.side_effect = NetworkError("connection refused")
    controller = CatalogController(fake_client)
    await controller.render()

    notification = await controller.delete_book("book-1", confirm=True)

    assert notification.message == "Failed to delete book."
    assert notification.variant == "error"
    assert BOOKS_QUERY_KEY in controller.cache


@pytest.mark.asyncio
async def test_edit_form_load_failure_returns_to_catalog(fake_client):
    fake_client.get_book.side_effect = ResourceNotFoundError("Book not found")
    controller = CatalogController(fake_client)

    result = await controller.edit_form("missing")

    assert result.form is None
    assert result.notification.message == "Failed to load book details."
    assert result.navigate_to == "/"


@pytest.mark.asyncio
async def test_fetch_resolving_after_close_is_not_cached(fake_client, books):
    controller = CatalogController(fake_client)

    async def list_then_close():
        controller.close()
        return books

    fake_client.list_books.side_effect = list_then_close

    result = await controller.load_books()

    assert result == books
    assert BOOKS_QUERY_KEY not in controller.cache


@pytest.mark.asyncio
async def test_fetch_invalidated_mid_flight_is_not_cached(fake_client, books):
    controller = CatalogController(fake_client)

    async def list_then_invalidate():
        controller.cache.invalidate(BOOKS_QUERY_KEY)
        return books

    fake_client.list_books.side_effect = list_then_invalidate

    await controller.load_books()

    assert BOOKS_QUERY_KEY not in controller.cache


@pytest.mark.asyncio
async def test_add_edit_search_filter_delete(book_api: BookApiClient):
    """Full catalog session against the running API."""
    controller = CatalogController(book_api)

    page = await controller.render()
    assert page.items == []
    assert page.total_pages == 1

    form = controller.add_form()
    result = await controller.submit_form(
        form, {**form.values, "title": "Dune", "author": "Frank Herbert", "genre": "Science Fiction", "year": "1965"}
    )
    assert result.ok
    assert result.notification.message == "Book added successfully!"
    assert result.navigate_to == "/"

    controller.view.set_search("dune")
    page = await controller.render()
    assert [book.title for book in page.items] == ["Dune"]
    assert page.items[0].status == BookStatus.AVAILABLE
    book_id = page.items[0].id

    edit = await controller.edit_form(book_id)
    assert edit.form.values["title"] == "Dune"
    values = {**edit.form.values, "status": "Issued"}
    result = await controller.submit_form(edit.form, values)
    assert result.ok
    assert result.notification.message == "Book updated successfully!"

    controller.view.set_search("")
    controller.view.set_status("Issued")
    page = await controller.render()
    assert [book.id for book in page.items] == [book_id]

    controller.view.set_status("Available")
    assert (await controller.render()).items == []

    notification = await controller.delete_book(book_id, confirm=True)
    assert notification.message == "Book deleted successfully!"

    controller.view.set_status("")
    page = await controller.render()
    assert page.items == []
    assert page.total == 0
