"""Search index model shared by all content modules."""

from __future__ import annotations

from sqlalchemy import Index, Integer, String, Text, UniqueConstraint, func, literal_column
from sqlalchemy.orm import Mapped, mapped_column

from contentsearch.infrastructure.database.models.base import (
    Base,
    IntegerPrimaryKeyMixin,
    TenantMixin,
)

# Text search configuration baked into the GIN index. Queries only use the
# index when Settings.search_text_config matches it.
FTS_INDEX_CONFIG = "simple"


class IndexRecord(Base, IntegerPrimaryKeyMixin, TenantMixin):
    """One searchable entry of a content module.

    Primary access patterns:
    - organization_id + module + entry_key + entry_id -> record (upsert/drop)
    - organization_id + full-text match on title/description/keywords (search)
    """

    __tablename__ = "search_index"

    module: Mapped[str] = mapped_column(String(100), nullable=False)
    entry_key: Mapped[str] = mapped_column(String(100), nullable=False)
    entry_plural: Mapped[str] = mapped_column(String(100), nullable=False)
    entry_id: Mapped[int] = mapped_column(Integer, nullable=False)
    uri: Mapped[str] = mapped_column(String(255), nullable=False)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    keywords: Mapped[str | None] = mapped_column(Text, nullable=True)
    keyword_hash: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    cp_edit_uri: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cp_delete_uri: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "organization_id",
            "module",
            "entry_key",
            "entry_id",
            name="uq_search_index_entry",
        ),
        Index("ix_search_index_module_plural", "module", "entry_plural"),
    )

    def __repr__(self) -> str:
        return (
            f"<IndexRecord {self.module}/{self.entry_key}/{self.entry_id} "
            f"org={self.organization_id}>"
        )


# GIN index backing the PostgreSQL full-text match
Index(
    "ix_search_index_fts",
    func.to_tsvector(
        literal_column(f"'{FTS_INDEX_CONFIG}'::regconfig"),
        func.concat_ws(
            literal_column("' '"),
            IndexRecord.title,
            IndexRecord.description,
            IndexRecord.keywords,
        ),
    ),
    postgresql_using="gin",
).ddl_if(dialect="postgresql")
