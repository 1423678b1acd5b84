"""SQLAlchemy models."""

from contentsearch.infrastructure.database.models.base import Base
from contentsearch.infrastructure.database.models.search_index import IndexRecord

__all__ = [
    "Base",
    "IndexRecord",
]
