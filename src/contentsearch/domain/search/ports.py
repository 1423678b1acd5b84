"""Ports for search index dependencies."""

from __future__ import annotations

from typing import Protocol


class KeywordNormalizer(Protocol):
    """Keyword extraction interface.

    Resolves a raw keyword source (free text or a reference understood by the
    keyword service) into a canonical comma-joined keyword string.
    """

    def normalize(self, raw: str) -> str:
        """Return the canonical keyword string for raw."""
