"""Full-text match primitives per SQL dialect.

Both backends expose the same two expressions over title, description and
keywords of an IndexRecord:

- ``match``: boolean relevance, true when any query term matches a word of the
  record as a prefix (wildcard-suffixed term).
- ``relevance``: continuous score over exact terms, used only for ordering.

Query terms always reach the database as bound parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import ColumnElement, Float, String, event, func, literal, literal_column
from sqlalchemy.ext.asyncio import AsyncEngine

from contentsearch.infrastructure.database.models.search_index import IndexRecord
from contentsearch.shared.exceptions import QueryError
from contentsearch.shared.search_tokens import (
    boolean_match,
    document_tokens,
    term_frequency_score,
)


@dataclass(frozen=True)
class FullTextExpressions:
    """SQL expressions for one query."""

    match: ColumnElement[bool]
    relevance: ColumnElement[float]


class FullTextBackend(Protocol):
    """Builds match/relevance expressions for a list of query terms."""

    def expressions(self, terms: list[str]) -> FullTextExpressions:
        """Return the match predicate and relevance score for terms."""


class PostgresFullText:
    """PostgreSQL tsvector/tsquery backend."""

    def __init__(self, text_config: str = "simple") -> None:
        # Settings restrict the config name to [a-z_]+, safe as a literal.
        self._config = literal_column(f"'{text_config}'::regconfig")

    def _document(self) -> ColumnElement[Any]:
        return func.to_tsvector(
            self._config,
            func.concat_ws(
                literal_column("' '"),
                IndexRecord.title,
                IndexRecord.description,
                IndexRecord.keywords,
            ),
        )

    def expressions(self, terms: list[str]) -> FullTextExpressions:
        document = self._document()
        prefix_query = func.to_tsquery(
            self._config,
            literal(" | ".join(f"{term}:*" for term in terms), String),
        )
        exact_query = func.to_tsquery(
            self._config,
            literal(" | ".join(terms), String),
        )
        return FullTextExpressions(
            match=document.bool_op("@@")(prefix_query),
            relevance=func.ts_rank(document, exact_query, type_=Float),
        )


def _split_terms(terms: str | None) -> list[str]:
    return terms.split() if terms else []


def _sqlite_search_match(
    title: str | None,
    description: str | None,
    keywords: str | None,
    terms: str | None,
) -> int:
    tokens = document_tokens(title, description, keywords)
    return 1 if boolean_match(tokens, _split_terms(terms)) else 0


def _sqlite_search_rank(
    title: str | None,
    description: str | None,
    keywords: str | None,
    terms: str | None,
) -> float:
    tokens = document_tokens(title, description, keywords)
    return term_frequency_score(tokens, _split_terms(terms))


class SQLiteFullText:
    """SQLite backend using Python scoring functions registered per connection.

    Requires ``install_sqlite_functions`` on the engine.
    """

    def expressions(self, terms: list[str]) -> FullTextExpressions:
        joined = " ".join(terms)
        match = func.search_match(
            IndexRecord.title,
            IndexRecord.description,
            IndexRecord.keywords,
            literal(joined, String),
        )
        relevance = func.search_rank(
            IndexRecord.title,
            IndexRecord.description,
            IndexRecord.keywords,
            literal(joined, String),
            type_=Float,
        )
        return FullTextExpressions(match=match > 0, relevance=relevance)


def _register_sqlite_functions(dbapi_connection: Any, connection_record: Any) -> None:
    dbapi_connection.create_function("search_match", 4, _sqlite_search_match)
    dbapi_connection.create_function("search_rank", 4, _sqlite_search_rank)


def install_sqlite_functions(engine: AsyncEngine) -> None:
    """Register the scoring functions on every new SQLite connection."""
    sync_engine = engine.sync_engine
    if not event.contains(sync_engine, "connect", _register_sqlite_functions):
        event.listen(sync_engine, "connect", _register_sqlite_functions)


def get_fulltext_backend(dialect_name: str, *, text_config: str = "simple") -> FullTextBackend:
    """Select the full-text backend for a SQLAlchemy dialect name."""
    if dialect_name == "postgresql":
        return PostgresFullText(text_config)
    if dialect_name == "sqlite":
        return SQLiteFullText()
    raise QueryError(
        f"Full-text search is not supported on '{dialect_name}'",
        details={"dialect": dialect_name},
    )
