"""Domain exception classes for business logic errors."""

from typing import Dict, List, Optional


class DomainError(Exception):
    """Base class for all domain-specific errors."""

    pass


class ResourceNotFoundError(DomainError):
    """Raised when a requested resource cannot be found."""

    pass


class ValidationError(DomainError):
    """Raised when data validation fails.

    ``errors`` lists the offending fields as ``{"field": ..., "message": ...}``.
    """

    def __init__(self, message: str = "Invalid data", errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors: List[Dict[str, str]] = errors or []

    @property
    def fields(self) -> List[str]:
        return [error["field"] for error in self.errors]


class StoreUnavailableError(DomainError):
    """Raised when the record store cannot be reached or an operation on it fails."""

    pass


class CorsRejectedError(DomainError):
    """Raised when a request comes from an origin outside the allow-list."""

    pass


class NetworkError(DomainError):
    """Raised client-side when the API cannot be reached."""

    pass
