"""Search tokenization utilities.

Queries are never interpolated into SQL. They are reduced to a list of plain
word terms first, and only those terms are handed to the full-text backend as
bound parameters. Boolean-mode syntax (``*``, ``+``, ``-``, quotes, parentheses)
is treated as a separator.

The same tokenizer is used for documents by the SQLite scoring functions so
that matching behaves identically for queries and indexed text.
"""

from __future__ import annotations

import re
from collections import Counter

# Unicode-aware "word" tokens, excluding underscores.
_WORD_RE = re.compile(r"[^\W_]+", flags=re.UNICODE)

# Upper bound for a single term, longer words are truncated.
_MAX_TERM_LENGTH = 128


def _normalize_token(token: str) -> str:
    t = token.casefold()
    if len(t) > _MAX_TERM_LENGTH:
        t = t[:_MAX_TERM_LENGTH]
    return t


def tokenize(text: str | None) -> list[str]:
    """Split text into casefolded word tokens, keeping duplicates and order."""
    if not text:
        return []
    return [_normalize_token(raw) for raw in _WORD_RE.findall(text)]


def query_terms(query: str, *, max_terms: int = 32) -> list[str]:
    """Extract unique search terms from a user query, in query order."""
    terms: list[str] = []
    seen: set[str] = set()

    for token in tokenize(query):
        if token in seen:
            continue
        seen.add(token)
        terms.append(token)
        if len(terms) >= max_terms:
            break

    return terms


def document_tokens(*fields: str | None) -> list[str]:
    """Tokenize the searchable fields of a record as one document."""
    tokens: list[str] = []
    for field in fields:
        tokens.extend(tokenize(field))
    return tokens


def boolean_match(tokens: list[str], terms: list[str]) -> bool:
    """True if any term is a prefix of any document token."""
    if not terms:
        return False
    prefixes = tuple(terms)
    return any(token.startswith(prefixes) for token in tokens)


def term_frequency_score(tokens: list[str], terms: list[str], *, k1: float = 1.2) -> float:
    """Saturated term-frequency relevance over exact (non-prefix) term matches.

    Each term contributes ``tf / (tf + k1)``, the result is averaged over the
    query terms so it stays in ``[0, 1)``.
    """
    if not terms or not tokens:
        return 0.0

    counts = Counter(tokens)
    score = 0.0
    for term in terms:
        tf = counts.get(term, 0)
        if tf:
            score += tf / (tf + k1)
    return score / len(terms)
