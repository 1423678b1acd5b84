"""Query planner - filtered, ranked retrieval over the search index."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, and_, or_, true
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from contentsearch.config import Settings, get_settings
from contentsearch.domain.search.types import FilterSpec, SearchResult
from contentsearch.infrastructure.database.fulltext import get_fulltext_backend
from contentsearch.infrastructure.database.models.search_index import IndexRecord
from contentsearch.infrastructure.database.repositories.base import storage_errors
from contentsearch.infrastructure.database.repositories.search_index import (
    SearchIndexRepository,
)
from contentsearch.observability.metrics import RESULTS_RETURNED, track_operation
from contentsearch.shared.context import resolve_organization_id
from contentsearch.shared.exceptions import QueryError
from contentsearch.shared.logging import get_logger
from contentsearch.shared.search_tokens import query_terms

logger = get_logger(__name__)


def _plural_set(module: str, plurals: Any) -> list[str]:
    # A single plural is a one-element set
    if isinstance(plurals, str):
        return [plurals]
    if isinstance(plurals, Iterable):
        values = list(plurals)
        if all(isinstance(value, str) for value in values):
            return values
    raise QueryError(
        "Filter values must be a plural key or a collection of plural keys",
        details={"module": module, "type": type(plurals).__name__},
    )


def _to_result(row: Any, relevance: float = 0.0) -> SearchResult:
    return SearchResult(
        title=row.title,
        description=row.description,
        keywords=row.keywords,
        module=row.module,
        entry_key=row.entry_key,
        entry_plural=row.entry_plural,
        uri=row.uri,
        cp_edit_uri=row.cp_edit_uri,
        relevance=relevance,
    )


class QueryPlanner:
    """Answers ranked free-text queries against the search index.

    Records qualify through a prefix (wildcard) match of any query term and
    are ordered by a separate exact-term relevance score. The score never
    qualifies a record on its own.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        organization_id: UUID | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.organization_id = organization_id
        self.settings = settings or get_settings()

    def _get_organization_id(self) -> UUID:
        return resolve_organization_id(
            self.organization_id,
            single_tenant_mode=self.settings.single_tenant_mode,
        )

    def _terms(self, query: str) -> list[str]:
        if not isinstance(query, str):
            raise QueryError(
                "Search query must be a string",
                details={"type": type(query).__name__},
            )
        terms = query_terms(query, max_terms=self.settings.search_max_query_terms)
        if not terms:
            raise QueryError(
                "Search query contains no searchable terms",
                details={"query": query},
            )
        return terms

    def filter(self, filter_spec: FilterSpec | None) -> ColumnElement[bool]:
        """Build the module/plural restriction for a search.

        Args:
            filter_spec: Modules as keys, entry plurals (string or collection)
                as values. A record matches if any module entry matches.

        Returns:
            Predicate to AND with the full-text match, matching everything for
            an empty spec
        """
        if not filter_spec:
            return true()
        if not isinstance(filter_spec, Mapping):
            raise QueryError(
                "Filter must map modules to entry plurals",
                details={"type": type(filter_spec).__name__},
            )

        clauses = []
        for module, plurals in filter_spec.items():
            if not isinstance(module, str):
                raise QueryError(
                    "Filter modules must be strings",
                    details={"type": type(module).__name__},
                )
            clauses.append(
                and_(
                    IndexRecord.module == module,
                    IndexRecord.entry_plural.in_(_plural_set(module, plurals)),
                )
            )
        return or_(*clauses)

    async def search(
        self,
        query: str,
        limit: int | None = 8,
        offset: int = 0,
        filter_spec: FilterSpec | None = None,
    ) -> list[SearchResult]:
        """Search the index.

        Args:
            query: Free-text query
            limit: Maximum number of results, None for all
            offset: Number of ranked results to skip
            filter_spec: Optional module/plural restriction, see filter()

        Returns:
            Results ordered by relevance (highest first), ties by record id

        Raises:
            QueryError: No searchable terms, malformed filter or pagination
            StorageError: The database is unavailable
            TenantContextError: No tenant outside single-tenant mode
        """
        with track_operation("search"):
            terms = self._terms(query)
            if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 0):
                raise QueryError("limit must be a non-negative integer", details={"limit": limit})
            if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
                raise QueryError("offset must be a non-negative integer", details={"offset": offset})

            predicate = self.filter(filter_spec)
            organization_id = self._get_organization_id()

            with storage_errors("search"):
                async with self.session_factory() as session:
                    repo = SearchIndexRepository(session, organization_id=organization_id)
                    fulltext = get_fulltext_backend(
                        repo.dialect_name,
                        text_config=self.settings.search_text_config,
                    ).expressions(terms)
                    rows = await repo.search(
                        fulltext,
                        predicate=predicate,
                        limit=limit,
                        offset=offset,
                    )

        results = [_to_result(row, float(row.relevance or 0.0)) for row in rows]
        RESULTS_RETURNED.observe(len(results))

        logger.info(
            "search_completed",
            query=query,
            terms=len(terms),
            results_count=len(results),
            limit=limit,
            offset=offset,
            organization_id=str(organization_id),
        )
        return results

    async def count(self, query: str) -> int:
        """Count records matching a query, ignoring filters and pagination."""
        with track_operation("count"):
            terms = self._terms(query)
            organization_id = self._get_organization_id()

            with storage_errors("count"):
                async with self.session_factory() as session:
                    repo = SearchIndexRepository(session, organization_id=organization_id)
                    fulltext = get_fulltext_backend(
                        repo.dialect_name,
                        text_config=self.settings.search_text_config,
                    ).expressions(terms)
                    total = await repo.count_matches(fulltext)

        logger.debug("search_counted", query=query, total=total)
        return total

    async def find_by_keyword_hash(self, keyword_hash: str) -> list[SearchResult]:
        """Find records indexed from the same raw keyword source."""
        organization_id = self._get_organization_id()

        with storage_errors("find_by_keyword_hash"):
            async with self.session_factory() as session:
                repo = SearchIndexRepository(session, organization_id=organization_id)
                rows: Sequence[Any] = await repo.get_by_keyword_hash(keyword_hash)

        return [_to_result(row) for row in rows]
