"""Unit tests for keyword canonicalization."""

from contentsearch.domain.search.keywords import CommaKeywordNormalizer, join_keyword_list


class TestJoinKeywordList:
    """Tests for list keywords."""

    def test_preserves_caller_order(self):
        assert join_keyword_list(["zeta", "alpha", "mid"]) == "zeta,alpha,mid"

    def test_strips_and_drops_empty(self):
        assert join_keyword_list([" cms ", "", "  ", "blog"]) == "cms,blog"

    def test_drops_exact_duplicates(self):
        assert join_keyword_list(["b", "a", "b"]) == "b,a"

    def test_duplicates_are_case_sensitive(self):
        assert join_keyword_list(["News", "news"]) == "News,news"

    def test_embedded_separator_is_split(self):
        assert join_keyword_list(["a,b", "c"]) == "a,b,c"

    def test_empty_list(self):
        assert join_keyword_list([]) == ""


class TestCommaKeywordNormalizer:
    """Tests for the default keyword normalizer."""

    def test_canonical_form(self):
        normalizer = CommaKeywordNormalizer()
        assert normalizer.normalize(" Hi , Hello,hi ") == "hi,hello"

    def test_collapses_inner_whitespace(self):
        normalizer = CommaKeywordNormalizer()
        assert normalizer.normalize("open   source, web\tdev") == "open source,web dev"

    def test_already_canonical_is_unchanged(self):
        normalizer = CommaKeywordNormalizer()
        assert normalizer.normalize("hi,hello") == "hi,hello"

    def test_empty_parts(self):
        normalizer = CommaKeywordNormalizer()
        assert normalizer.normalize(",, ,") == ""
