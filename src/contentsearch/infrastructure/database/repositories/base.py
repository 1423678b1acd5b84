"""Base repository with tenant isolation."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar, cast
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from contentsearch.shared.exceptions import StorageError
from contentsearch.shared.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate database and connection failures into StorageError.

    Wrap the whole unit of work, including the commit, so connection and
    constraint errors surface with the same type. Drivers report refused or
    timed out connections as OSError, which SQLAlchemy passes through as-is.
    """
    try:
        yield
    except (SQLAlchemyError, OSError, TimeoutError) as exc:
        logger.error("search_storage_error", operation=operation, error=str(exc))
        raise StorageError(
            f"Search index storage failed during {operation}",
            details={"operation": operation, "error_type": type(exc).__name__},
        ) from exc


class BaseRepository(Generic[T]):
    """Base repository with automatic tenant filtering.

    IMPORTANT: This base class ensures all queries are filtered by
    organization_id, preventing cross-tenant data access.

    All tenant-scoped repositories MUST inherit from this class.
    """

    model_class: type[T]

    def __init__(self, session: AsyncSession, *, organization_id: UUID) -> None:
        self.session = session
        self.organization_id = organization_id

    @property
    def dialect_name(self) -> str:
        """Name of the SQL dialect behind the session."""
        return self.session.get_bind().dialect.name

    def _tenant_filter(self) -> Any:
        model = cast(Any, self.model_class)
        return model.organization_id == self.organization_id

    def _base_query(self) -> Any:
        """Create a base query filtered by tenant.

        All queries should start from this method to ensure tenant isolation.
        """
        model = cast(Any, self.model_class)
        return select(model).where(self._tenant_filter())

    async def create(self, entity: T) -> T:
        """Create a new entity.

        Automatically sets organization_id from the repository tenant.
        """
        entity_any = cast(Any, entity)
        entity_any.organization_id = self.organization_id
        self.session.add(entity_any)
        await self.session.flush()
        return cast(T, entity_any)
