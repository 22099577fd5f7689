"""Async HTTP client for the book REST API."""

from typing import Any, Dict, List, Optional, Union

import httpx
from pydantic import TypeAdapter

from ...infrastructure.config.settings import get_settings
from ...infrastructure.logging import get_logger
from ..book.schemas import BookCreate, BookRead, BookReplace
from ..common.constants import STATUS_MAPPING
from ..common.exceptions import DomainError, NetworkError, StoreUnavailableError, ValidationError

logger = get_logger(__name__)

_book_list = TypeAdapter(List[BookRead])


class BookApiClient:
    """Typed wrapper around the ``/books`` endpoints.

    Error responses are turned back into the domain exceptions the server
    raised (404 → ``ResourceNotFoundError`` and so on); transport failures
    become ``NetworkError``. Requests are never retried.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        settings = get_settings()
        client_kwargs: Dict[str, Any] = {
            "base_url": (base_url or settings.CATALOG_API_URL).rstrip("/"),
            "timeout": timeout if timeout is not None else settings.CATALOG_API_TIMEOUT,
            "headers": {"Accept": "application/json", **(headers or {})},
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**client_kwargs)

    async def list_books(self) -> List[BookRead]:
        response = await self._request("GET", "/books")
        return _book_list.validate_python(response.json())

    async def get_book(self, book_id: str) -> BookRead:
        response = await self._request("GET", f"/books/{book_id}")
        return BookRead.model_validate(response.json())

    async def create_book(self, book: Union[BookCreate, BookReplace]) -> BookRead:
        response = await self._request("POST", "/books", json=book.model_dump(mode="json"))
        return BookRead.model_validate(response.json())

    async def update_book(self, book_id: str, book: BookReplace) -> BookRead:
        response = await self._request("PUT", f"/books/{book_id}", json=book.model_dump(mode="json"))
        return BookRead.model_validate(response.json())

    async def delete_book(self, book_id: str) -> None:
        await self._request("DELETE", f"/books/{book_id}")

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(f"{method} {path} failed: {exc}")
            raise NetworkError(f"Request failed: {method} {path}: {exc}") from exc

        if response.is_success:
            return response

        raise self._error_from_response(response)

    @staticmethod
    def _error_from_response(response: httpx.Response) -> DomainError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        detail = str(body.get("detail") or f"HTTP {response.status_code}")

        error_class = STATUS_MAPPING.get(response.status_code)
        if error_class is ValidationError:
            return ValidationError(detail, errors=body.get("errors") or [])
        if error_class is not None:
            return error_class(detail)
        if response.status_code >= 500:
            return StoreUnavailableError(detail)
        return DomainError(detail)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "BookApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
