"""Keyword canonicalization."""

from __future__ import annotations

from collections.abc import Iterable

KEYWORD_SEPARATOR = ","


def join_keyword_list(keywords: Iterable[str]) -> str:
    """Join caller-supplied keywords into one comma-separated string.

    Order is preserved. Elements are stripped, empty ones dropped, elements
    containing the separator are split, and exact duplicates are removed so
    the stored list never contains the same keyword twice.
    """
    joined: list[str] = []
    seen: set[str] = set()

    for keyword in keywords:
        for part in str(keyword).split(KEYWORD_SEPARATOR):
            part = part.strip()
            if not part or part in seen:
                continue
            seen.add(part)
            joined.append(part)

    return KEYWORD_SEPARATOR.join(joined)


class CommaKeywordNormalizer:
    """Default keyword normalizer for comma-separated keyword strings.

    Collapses whitespace, lowercases and deduplicates keywords in order.
    """

    def normalize(self, raw: str) -> str:
        keywords: list[str] = []
        seen: set[str] = set()

        for part in raw.split(KEYWORD_SEPARATOR):
            keyword = " ".join(part.split()).lower()
            if not keyword or keyword in seen:
                continue
            seen.add(keyword)
            keywords.append(keyword)

        return KEYWORD_SEPARATOR.join(keywords)
