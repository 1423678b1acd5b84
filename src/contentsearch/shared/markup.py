"""Markup stripping for indexed text."""

from __future__ import annotations

from html.parser import HTMLParser

# Elements whose text content is never part of the visible body.
_SKIPPED_TAGS = {"script", "style"}

# Elements that end a run of text; their neighbours must not fuse into one word.
_BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
    "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table",
    "td", "th", "tr", "ul",
}


class _TextExtractor(HTMLParser):
    """Collect character data outside of tags, dropping script/style bodies."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.chunks: list[str] = []
        self._skip_depth = 0

    def _separate(self) -> None:
        if self._skip_depth:
            return
        if self.chunks and not self.chunks[-1][-1:].isspace():
            self.chunks.append(" ")

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _SKIPPED_TAGS:
            self._skip_depth += 1
        elif tag in _BLOCK_TAGS:
            self._separate()

    def handle_endtag(self, tag: str) -> None:
        if tag in _SKIPPED_TAGS and self._skip_depth:
            self._skip_depth -= 1
        elif tag in _BLOCK_TAGS:
            self._separate()

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self.chunks.append(data)


def strip_tags(value: str | None) -> str:
    """Return the plain text of an HTML fragment.

    Tags and comments are removed and entities decoded. Block-level elements
    are separated by a single space so adjacent paragraphs stay separate
    words. Other whitespace is kept as-is, only the ends are trimmed.
    """
    if not value:
        return ""

    parser = _TextExtractor()
    parser.feed(value)
    parser.close()
    return "".join(parser.chunks).strip()
