"""Database repositories."""

from contentsearch.infrastructure.database.repositories.base import BaseRepository, storage_errors
from contentsearch.infrastructure.database.repositories.search_index import SearchIndexRepository

__all__ = [
    "BaseRepository",
    "SearchIndexRepository",
    "storage_errors",
]
