"""Index writer - keeps one search record per content entry."""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from contentsearch.config import Settings, get_settings
from contentsearch.domain.search.keywords import CommaKeywordNormalizer, join_keyword_list
from contentsearch.domain.search.ports import KeywordNormalizer
from contentsearch.domain.search.types import IndexOptions
from contentsearch.infrastructure.database.models.search_index import IndexRecord
from contentsearch.infrastructure.database.repositories.base import storage_errors
from contentsearch.infrastructure.database.repositories.search_index import (
    SearchIndexRepository,
)
from contentsearch.observability.metrics import track_operation
from contentsearch.shared.context import resolve_organization_id
from contentsearch.shared.exceptions import MissingFieldError, ValidationError
from contentsearch.shared.logging import get_logger
from contentsearch.shared.markup import strip_tags

logger = get_logger(__name__)

# Column widths of the search_index table.
_FIELD_LIMITS = {
    "module": 100,
    "entry_key": 100,
    "entry_plural": 100,
    "uri": 255,
    "title": 255,
    "keyword_hash": 255,
    "cp_edit_uri": 255,
    "cp_delete_uri": 255,
}


def _require_text(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MissingFieldError(field)
    _check_length(field, value)
    return value


def _check_length(field: str, value: str) -> None:
    limit = _FIELD_LIMITS.get(field)
    if limit is not None and len(value) > limit:
        raise ValidationError(
            f"'{field}' exceeds {limit} characters",
            details={"field": field, "max_length": limit, "length": len(value)},
        )


def _require_entry_id(entry_id: Any) -> int:
    # bool is an int subclass, True must not pass as entry 1
    if isinstance(entry_id, bool) or not isinstance(entry_id, int):
        raise ValidationError(
            "'entry_id' must be an integer",
            details={"field": "entry_id", "type": type(entry_id).__name__},
        )
    if entry_id < 1:
        raise ValidationError(
            "'entry_id' must be positive",
            details={"field": "entry_id", "value": entry_id},
        )
    return entry_id


def _optional_text(field: str, value: Any) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(
            f"'{field}' must be a string",
            details={"field": field, "type": type(value).__name__},
        )
    _check_length(field, value)
    return value


class IndexWriter:
    """Writes and removes search index records for content entries.

    Stateless apart from its collaborators: build one per process and call it
    from the content modules on create, update and delete.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        keyword_normalizer: KeywordNormalizer | None = None,
        organization_id: UUID | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.keyword_normalizer = keyword_normalizer or CommaKeywordNormalizer()
        self.organization_id = organization_id
        self.settings = settings or get_settings()

    def _get_organization_id(self) -> UUID:
        return resolve_organization_id(
            self.organization_id,
            single_tenant_mode=self.settings.single_tenant_mode,
        )

    def _resolve_keywords(self, keywords: Any) -> tuple[str | None, str | None]:
        """Return (keywords, keyword_hash) for the keywords option."""
        if keywords is None:
            return None, None

        if isinstance(keywords, (list, tuple)):
            joined = join_keyword_list(keywords)
            return (joined or None), None

        if isinstance(keywords, str):
            if not keywords.strip():
                return None, None
            _check_length("keyword_hash", keywords)
            # The raw string stays available for lookups by keyword source
            return (self.keyword_normalizer.normalize(keywords) or None), keywords

        raise ValidationError(
            "'keywords' must be a string or a list of strings",
            details={"field": "keywords", "type": type(keywords).__name__},
        )

    def build_record(
        self,
        module: str,
        entry_key: str,
        entry_plural: str,
        entry_id: int,
        uri: str,
        title: str,
        description: str | None = None,
        options: IndexOptions | Mapping[str, Any] | None = None,
    ) -> IndexRecord:
        """Validate input and build the record to store, without persisting it."""
        module = _require_text("module", module)
        entry_key = _require_text("entry_key", entry_key)
        entry_plural = _require_text("entry_plural", entry_plural)
        entry_id = _require_entry_id(entry_id)
        uri = _require_text("uri", uri)
        if not isinstance(title, str) or not title.strip():
            raise MissingFieldError("title")

        # The column holds the plain text, markup does not count towards the limit
        plain_title = strip_tags(title)
        if not plain_title:
            raise MissingFieldError("title")
        _check_length("title", plain_title)

        if description is not None and not isinstance(description, str):
            raise ValidationError(
                "'description' must be a string",
                details={"field": "description", "type": type(description).__name__},
            )

        opts = IndexOptions.coerce(options)
        keywords, keyword_hash = self._resolve_keywords(opts.keywords)

        return IndexRecord(
            module=module,
            entry_key=entry_key,
            entry_plural=entry_plural,
            entry_id=entry_id,
            uri=uri,
            title=plain_title,
            description=strip_tags(description),
            keywords=keywords,
            keyword_hash=keyword_hash,
            cp_edit_uri=_optional_text("cp_edit_uri", opts.cp_edit_uri),
            cp_delete_uri=_optional_text("cp_delete_uri", opts.cp_delete_uri),
        )

    async def index(
        self,
        module: str,
        entry_key: str,
        entry_plural: str,
        entry_id: int,
        uri: str,
        title: str,
        description: str | None = None,
        options: IndexOptions | Mapping[str, Any] | None = None,
    ) -> int:
        """Store an entry in the search index, replacing any previous record.

        Usage:
            await writer.index(
                "blog",
                "blog:post",
                "blog:posts",
                post.id,
                f"blog/{post.created_on:%Y/%m}/{post.slug}",
                post.title,
                post.intro,
                {
                    "cp_edit_uri": f"admin/blog/edit/{post.id}",
                    "cp_delete_uri": f"admin/blog/delete/{post.id}",
                    "keywords": post.keywords,
                },
            )

        Args:
            module: The module that owns this entry
            entry_key: Singular type key of the entry (e.g. "blog:post")
            entry_plural: Plural type key used to group entries in filters
            entry_id: Id of the entry within its module
            uri: Link to the entry relative to the site root
            title: Title or name of the entry
            description: Body of the entry, markup is stripped
            options: keywords, cp_edit_uri, cp_delete_uri

        Returns:
            Id of the new index record

        Raises:
            ValidationError: Required fields missing or malformed
            StorageError: The database is unavailable or rejected the write
            TenantContextError: No tenant outside single-tenant mode
        """
        with track_operation("index"):
            record = self.build_record(
                module, entry_key, entry_plural, entry_id, uri, title, description, options
            )
            organization_id = self._get_organization_id()

            with storage_errors("index"):
                async with self.session_factory() as session, session.begin():
                    repo = SearchIndexRepository(session, organization_id=organization_id)
                    # Drop it so we can create a new record in the same transaction
                    replaced = await repo.delete_entry(module, entry_key, entry_id)
                    record = await repo.create(record)
                    record_id = record.id

        logger.info(
            "search_entry_indexed",
            module=module,
            entry_key=entry_key,
            entry_id=entry_id,
            record_id=record_id,
            replaced=replaced,
            organization_id=str(organization_id),
        )
        return record_id

    async def drop(self, module: str, entry_key: str, entry_id: int) -> int:
        """Delete the index record of an entry.

        Returns:
            Number of records removed, 0 if the entry was not indexed

        Raises:
            StorageError: The database is unavailable or rejected the delete
            TenantContextError: No tenant outside single-tenant mode
        """
        with track_operation("drop"):
            organization_id = self._get_organization_id()

            with storage_errors("drop"):
                async with self.session_factory() as session, session.begin():
                    repo = SearchIndexRepository(session, organization_id=organization_id)
                    removed = await repo.delete_entry(module, entry_key, entry_id)

        logger.info(
            "search_entry_dropped",
            module=module,
            entry_key=entry_key,
            entry_id=entry_id,
            removed=removed,
            organization_id=str(organization_id),
        )
        return removed

    drop_index = drop
