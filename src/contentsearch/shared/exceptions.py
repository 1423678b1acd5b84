"""Custom exception hierarchy for contentsearch."""

from typing import Any


class ContentSearchError(Exception):
    """Base exception for all contentsearch errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ----- Validation Errors -----


class ValidationError(ContentSearchError):
    """Indexing input validation failed."""

    pass


class MissingFieldError(ValidationError):
    """A required indexing field is missing or empty."""

    def __init__(self, field: str) -> None:
        super().__init__(
            message=f"'{field}' is required and must not be empty",
            details={"field": field},
        )


# ----- Storage Errors -----


class StorageError(ContentSearchError):
    """Backing store is unreachable or rejected the operation."""

    pass


# ----- Query Errors -----


class QueryError(ContentSearchError):
    """Search query, filter or pagination is malformed."""

    pass


# ----- Tenant Errors -----


class TenantContextError(ContentSearchError):
    """No tenant is known for an operation outside single-tenant mode."""

    pass
