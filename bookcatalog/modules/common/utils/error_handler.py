"""Utility functions for mapping domain exceptions to HTTP exceptions."""

from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from ..constants import EXCEPTION_MAPPING
from ..exceptions import DomainError, ValidationError

# Request locations FastAPI prefixes to error paths; not part of the field name.
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def describe_validation_errors(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic/FastAPI error dicts into ``{"field", "message"}`` pairs.

    Errors on the whole body (wrong JSON type, missing body) are reported on
    the field ``body``.
    """
    described = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_PREFIXES and len(loc) > 1:
            loc = loc[1:]
        message = str(error.get("msg", "Invalid value"))
        ctx_error = (error.get("ctx") or {}).get("error")
        if error.get("type") == "value_error" and ctx_error is not None:
            message = str(ctx_error)
        described.append({"field": ".".join(loc) or "body", "message": message})
    return described


def validation_error_from_pydantic(error: PydanticValidationError, message: str = "Invalid data") -> ValidationError:
    """Convert a pydantic ``ValidationError`` into the domain ``ValidationError``."""
    return ValidationError(message, errors=describe_validation_errors(error.errors()))


def map_exception(error: DomainError) -> HTTPException:
    """Map a domain exception to a corresponding HTTP exception."""
    for exception_class, mapper in EXCEPTION_MAPPING.items():
        if isinstance(error, exception_class):
            return mapper(str(error))

    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


def error_response(error: DomainError) -> JSONResponse:
    """Render a domain exception as the standard JSON error body."""
    http_exception = map_exception(error)
    content: Dict[str, Any] = {"detail": http_exception.detail}
    if isinstance(error, ValidationError):
        content["errors"] = error.errors
    return JSONResponse(status_code=http_exception.status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers for domain and request validation errors."""

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
        """Convert domain exceptions to appropriate HTTP responses."""
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report rejected request payloads as 400 with the offending fields."""
        return error_response(ValidationError("Invalid request data", errors=describe_validation_errors(exc.errors())))


def handle_exception(error: Exception) -> Optional[HTTPException]:
    """
    Handle an exception and return an appropriate HTTP exception if possible.

    For use in route handlers when you want to handle exceptions manually.

    Args:
        error: The exception to handle

    Returns:
        An HTTPException if the error can be mapped, None otherwise
    """
    if isinstance(error, DomainError):
        return map_exception(error)
    elif isinstance(error, HTTPException):
        return error
    return None
