"""Search index repository."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement, Row, delete, func, select

from contentsearch.infrastructure.database.fulltext import FullTextExpressions
from contentsearch.infrastructure.database.models.search_index import IndexRecord
from contentsearch.infrastructure.database.repositories.base import BaseRepository

# Columns exposed to search callers. cp_delete_uri and keyword_hash stay internal.
RESULT_COLUMNS = (
    IndexRecord.title,
    IndexRecord.description,
    IndexRecord.keywords,
    IndexRecord.module,
    IndexRecord.entry_key,
    IndexRecord.entry_plural,
    IndexRecord.uri,
    IndexRecord.cp_edit_uri,
)


class SearchIndexRepository(BaseRepository[IndexRecord]):
    """Repository for IndexRecord entities."""

    model_class = IndexRecord

    def _entry_filter(self, module: str, entry_key: str, entry_id: int) -> list[Any]:
        return [
            IndexRecord.module == module,
            IndexRecord.entry_key == entry_key,
            IndexRecord.entry_id == entry_id,
        ]

    async def get_entry(self, module: str, entry_key: str, entry_id: int) -> IndexRecord | None:
        """Get the record of one entry, if indexed."""
        query = self._base_query().where(*self._entry_filter(module, entry_key, entry_id))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def delete_entry(self, module: str, entry_key: str, entry_id: int) -> int:
        """Delete all records of one entry and return how many were removed."""
        result = await self.session.execute(
            delete(IndexRecord)
            .where(self._tenant_filter())
            .where(*self._entry_filter(module, entry_key, entry_id))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def get_by_keyword_hash(self, keyword_hash: str) -> Sequence[Row[Any]]:
        """Get result rows of records indexed from the same keyword source."""
        query = (
            select(*RESULT_COLUMNS)
            .where(self._tenant_filter())
            .where(IndexRecord.keyword_hash == keyword_hash)
            .order_by(IndexRecord.id.asc())
        )
        result = await self.session.execute(query)
        return result.all()

    async def search(
        self,
        fulltext: FullTextExpressions,
        *,
        predicate: ColumnElement[bool],
        limit: int | None,
        offset: int,
    ) -> Sequence[Row[Any]]:
        """Ranked full-text search.

        Rows carry the result columns plus ``relevance``. Ordered by relevance,
        then record id so that pagination is stable across equal scores.
        """
        query = (
            select(*RESULT_COLUMNS, fulltext.relevance.label("relevance"))
            .where(self._tenant_filter())
            .where(fulltext.match)
            .where(predicate)
            .order_by(fulltext.relevance.desc(), IndexRecord.id.asc())
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return result.all()

    async def count_matches(self, fulltext: FullTextExpressions) -> int:
        """Count records qualifying for the boolean full-text match."""
        query = (
            select(func.count())
            .select_from(IndexRecord)
            .where(self._tenant_filter())
            .where(fulltext.match)
        )
        result = await self.session.execute(query)
        return result.scalar_one()
