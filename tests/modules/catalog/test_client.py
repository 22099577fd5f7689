"""Tests for the book API client."""

import httpx
import pytest

from bookcatalog.modules.book.schemas import BookCreate, BookReplace, BookStatus
from bookcatalog.modules.catalog.client import BookApiClient
from bookcatalog.modules.common.exceptions import (
    CorsRejectedError,
    NetworkError,
    ResourceNotFoundError,
    StoreUnavailableError,
    ValidationError,
)


def _client_for(handler) -> BookApiClient:
    return BookApiClient(base_url="http://catalog.test/api", transport=httpx.MockTransport(handler))


class TestBookApiClient:
    """Client round trips against the in-process app."""

    @pytest.mark.asyncio
    async def test_crud_round_trip(self, book_api: BookApiClient):
        created = await book_api.create_book(
            BookCreate(title="Dune", author="Frank Herbert", genre="Science Fiction", year=1965)
        )
        assert created.status == BookStatus.AVAILABLE

        listed = await book_api.list_books()
        assert [book.id for book in listed] == [created.id]

        updated = await book_api.update_book(
            created.id,
            BookReplace(title="Dune", author="Frank Herbert", genre="Science Fiction", year=1965, status="Issued"),
        )
        assert updated.status == BookStatus.ISSUED
        assert (await book_api.get_book(created.id)).status == BookStatus.ISSUED

        await book_api.delete_book(created.id)
        assert await book_api.list_books() == []

    @pytest.mark.asyncio
    async def test_not_found(self, book_api: BookApiClient):
        with pytest.raises(ResourceNotFoundError, match="Book not found"):
            await book_api.get_book("missing")

        with pytest.raises(ResourceNotFoundError):
            await book_api.delete_book("missing")


class TestClientErrorMapping:
    """Error responses become the matching domain errors."""

    @pytest.mark.asyncio
    async def test_validation_error_keeps_field_errors(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400,
                json={"detail": "Invalid request data", "errors": [{"field": "year", "message": "Enter a realistic year"}]},
            )

        async with _client_for(handler) as client:
            with pytest.raises(ValidationError) as exc_info:
                await client.list_books()

        assert exc_info.value.fields == ["year"]

    @pytest.mark.asyncio
    async def test_forbidden_origin(self):
        async with _client_for(lambda request: httpx.Response(403, json={"detail": "Not allowed by CORS"})) as client:
            with pytest.raises(CorsRejectedError, match="Not allowed by CORS"):
                await client.list_books()

    @pytest.mark.asyncio
    async def test_server_error(self):
        async with _client_for(lambda request: httpx.Response(500, text="oops")) as client:
            with pytest.raises(StoreUnavailableError, match="HTTP 500"):
                await client.list_books()

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client_for(handler) as client:
            with pytest.raises(NetworkError):
                await client.list_books()

    @pytest.mark.asyncio
    async def test_requests_target_books_path(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, request.url.path))
            return httpx.Response(204)

        async with _client_for(handler) as client:
            await client.delete_book("abc")

        assert seen == [("DELETE", "/api/books/abc")]
