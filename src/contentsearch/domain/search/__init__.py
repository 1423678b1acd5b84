"""Search domain - unified index across content modules.

This module provides:
- IndexWriter: index / drop entries on content lifecycle events
- QueryPlanner: filter, count and ranked search
- KeywordNormalizer: port for the keyword service, with a default implementation
"""

from contentsearch.domain.search.keywords import CommaKeywordNormalizer, join_keyword_list
from contentsearch.domain.search.planner import QueryPlanner
from contentsearch.domain.search.ports import KeywordNormalizer
from contentsearch.domain.search.types import FilterSpec, IndexOptions, SearchResult
from contentsearch.domain.search.writer import IndexWriter

__all__ = [
    "IndexWriter",
    "QueryPlanner",
    "KeywordNormalizer",
    "CommaKeywordNormalizer",
    "join_keyword_list",
    "FilterSpec",
    "IndexOptions",
    "SearchResult",
]
