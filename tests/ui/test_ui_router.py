"""Tests for the HTMX UI routes."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from bookcatalog.interfaces.api.dependencies import get_book_service
from bookcatalog.interfaces.main import app
from bookcatalog.modules.book.schemas import current_year
from bookcatalog.modules.common.exceptions import StoreUnavailableError


@pytest.fixture
def form_fields() -> dict:
    return {"title": "Dune", "author": "Frank Herbert", "genre": "Science Fiction", "year": "1965", "status": "Available"}


class TestCatalogUI:
    """Catalog screen fragments."""

    @pytest.mark.asyncio
    async def test_index_page(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        assert 'id="catalog"' in response.text
        assert "htmx.org" in response.text

    @pytest.mark.asyncio
    async def test_empty_catalog(self, client: AsyncClient):
        response = await client.get("/ui/books")

        assert response.status_code == 200
        assert "No books found." in response.text

    @pytest.mark.asyncio
    async def test_catalog_lists_and_filters(self, client: AsyncClient, test_book, issued_book):
        response = await client.get("/ui/books")
        assert "The Hobbit" in response.text
        assert "1984" in response.text
        assert '<option value="Fantasy"' in response.text

        response = await client.get("/ui/books", params={"search": "orwell"})
        assert "1984" in response.text
        assert "The Hobbit" not in response.text

        response = await client.get("/ui/books", params={"status": "Available"})
        assert "The Hobbit" in response.text
        assert "1984" not in response.text

    @pytest.mark.asyncio
    async def test_catalog_uses_the_shared_book_service(self, client: AsyncClient):
        service = MagicMock()
        service.list_books = AsyncMock(side_effect=StoreUnavailableError("could not list books"))
        app.dependency_overrides[get_book_service] = lambda: service

        response = await client.get("/ui/books")

        assert response.status_code == 200
        assert "Error loading books." in response.text
        service.list_books.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_catalog_escapes_book_text(self, client: AsyncClient, form_fields: dict):
        await client.post("/api/books", json={**form_fields, "year": 1965, "title": "<script>alert(1)</script>"})

        response = await client.get("/ui/books")

        assert "<script>alert(1)</script>" not in response.text
        assert "&lt;script&gt;" in response.text

    @pytest.mark.asyncio
    async def test_catalog_pages_of_ten(self, client: AsyncClient, form_fields: dict):
        for i in range(12):
            await client.post("/api/books", json={**form_fields, "year": 1965, "title": f"Volume {i:02d}"})

        first = await client.get("/ui/books")
        second = await client.get("/ui/books", params={"page": 2})

        assert "Volume 09" in first.text and "Volume 10" not in first.text
        assert "Volume 10" in second.text and "Volume 11" in second.text
        assert 'value="2" hx-swap-oob="true"' in second.text


class TestBookFormUI:
    """Add/edit form fragments."""

    @pytest.mark.asyncio
    async def test_new_form(self, client: AsyncClient):
        response = await client.get("/ui/books/new")

        assert response.status_code == 200
        assert "Add New Book" in response.text
        assert 'hx-post="/ui/books"' in response.text

    @pytest.mark.asyncio
    async def test_create_book(self, client: AsyncClient, form_fields: dict):
        response = await client.post("/ui/books", data=form_fields)

        assert response.status_code == 200
        assert "Book added successfully!" in response.text
        assert response.headers["HX-Trigger"] == "books-changed"

        listing = await client.get("/api/books")
        assert [book["title"] for book in listing.json()] == ["Dune"]

    @pytest.mark.asyncio
    async def test_create_book_shows_field_errors(self, client: AsyncClient, form_fields: dict):
        response = await client.post("/ui/books", data={**form_fields, "title": "", "year": str(current_year() + 1)})

        assert response.status_code == 200
        assert "Title is required" in response.text
        assert "Year cannot be in the future" in response.text
        assert 'value="Frank Herbert"' in response.text
        assert "HX-Trigger" not in response.headers

        listing = await client.get("/api/books")
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_edit_form_prefilled(self, client: AsyncClient, test_book):
        response = await client.get(f"/ui/books/{test_book.id}/edit")

        assert "Edit Book" in response.text
        assert 'value="The Hobbit"' in response.text
        assert f'hx-put="/ui/books/{test_book.id}"' in response.text

    @pytest.mark.asyncio
    async def test_edit_form_missing_book(self, client: AsyncClient):
        response = await client.get("/ui/books/missing/edit")

        assert "Failed to load book details." in response.text

    @pytest.mark.asyncio
    async def test_update_book(self, client: AsyncClient, test_book):
        data = {"title": "The Hobbit", "author": "J. R. R. Tolkien", "genre": "Fantasy", "year": "1937", "status": "Issued"}

        response = await client.put(f"/ui/books/{test_book.id}", data=data)

        assert "Book updated successfully!" in response.text
        assert response.headers["HX-Trigger"] == "books-changed"
        fetched = await client.get(f"/api/books/{test_book.id}")
        assert fetched.json()["status"] == "Issued"

    @pytest.mark.asyncio
    async def test_delete_book(self, client: AsyncClient, test_book):
        response = await client.delete(f"/ui/books/{test_book.id}")

        assert "Book deleted successfully!" in response.text
        assert response.headers["HX-Trigger"] == "books-changed"
        assert (await client.get(f"/api/books/{test_book.id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_book(self, client: AsyncClient):
        response = await client.delete("/ui/books/missing")

        assert "Failed to delete book." in response.text
