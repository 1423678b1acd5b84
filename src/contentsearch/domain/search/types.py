"""Value types of the search domain."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from typing import Any

from contentsearch.shared.exceptions import ValidationError

# A module maps to one plural or a collection of plurals.
FilterSpec = Mapping[str, str | Iterable[str]]


@dataclass(frozen=True)
class IndexOptions:
    """Optional data stored alongside an index record.

    keywords may be a list (joined as-is) or a string resolved through the
    keyword normalizer, whose raw value is kept as keyword_hash.
    """

    keywords: str | list[str] | tuple[str, ...] | None = None
    cp_edit_uri: str | None = None
    cp_delete_uri: str | None = None

    @classmethod
    def coerce(cls, options: IndexOptions | Mapping[str, Any] | None) -> IndexOptions:
        """Accept an IndexOptions, a plain mapping, or None."""
        if options is None:
            return cls()
        if isinstance(options, IndexOptions):
            return options
        if not isinstance(options, Mapping):
            raise ValidationError(
                "options must be a mapping",
                details={"field": "options", "type": type(options).__name__},
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValidationError(
                f"Unknown index options: {', '.join(unknown)}",
                details={"field": "options", "unknown": unknown},
            )
        return cls(**dict(options))


@dataclass(frozen=True)
class SearchResult:
    """A ranked search hit as exposed to callers."""

    title: str
    description: str
    keywords: str | None
    module: str
    entry_key: str
    entry_plural: str
    uri: str
    cp_edit_uri: str | None
    relevance: float = 0.0
