"""Common constants used across the application."""

from typing import Callable, Dict, Type

from fastapi import HTTPException, status

from .exceptions import (
    CorsRejectedError,
    DomainError,
    ResourceNotFoundError,
    StoreUnavailableError,
    ValidationError,
)

EXCEPTION_MAPPING: Dict[Type[DomainError], Callable[[str], HTTPException]] = {
    ResourceNotFoundError: lambda message: HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message),
    ValidationError: lambda message: HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message),
    CorsRejectedError: lambda message: HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message),
    StoreUnavailableError: lambda message: HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message),
}

# Used by the API client to turn error responses back into domain errors.
STATUS_MAPPING: Dict[int, Type[DomainError]] = {
    status.HTTP_400_BAD_REQUEST: ValidationError,
    422: ValidationError,
    status.HTTP_403_FORBIDDEN: CorsRejectedError,
    status.HTTP_404_NOT_FOUND: ResourceNotFoundError,
}
