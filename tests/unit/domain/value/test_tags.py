"""Unit tests for tag tokenization."""

import pytest

from quill.domain.error import ValidationError
from quill.domain.value import join_tags, tokenize_tags


class TestTokenizeTags:
    """Tests for tokenize_tags()."""

    def test_splits_on_commas_and_trims(self):
        assert tokenize_tags("foo,  bar ,baz") == ["foo", "bar", "baz"]

    def test_quoted_commas_stay_in_one_tag(self):
        assert tokenize_tags('foo, "bar, baz", qux') == ["foo", "bar, baz", "qux"]

    def test_single_quoted_tag(self):
        assert tokenize_tags("'new york', boston") == ["new york", "boston"]

    def test_apostrophe_inside_word_is_not_a_quote(self):
        assert tokenize_tags("don't, stop") == ["don't", "stop"]

    def test_escaped_quotes_are_literal(self):
        assert tokenize_tags('say \\"hi\\", there') == ['say "hi"', "there"]

    def test_escaped_quote_inside_quoted_tag(self):
        assert tokenize_tags('"a \\" b", c') == ['a " b', "c"]

    def test_quoted_tag_keeps_edge_whitespace(self):
        assert tokenize_tags('" spaced ", x') == [" spaced ", "x"]

    def test_partially_wrapped_tag_keeps_its_quote(self):
        """An unmatched quote is plain text."""
        assert tokenize_tags('"foo, bar') == ['"foo', "bar"]

    def test_quotes_around_separate_spans_are_kept(self):
        assert tokenize_tags('"foo" bar "baz"') == ['"foo" bar "baz"']
        assert tokenize_tags('"foo" bar "baz", qux') == ['"foo" bar "baz"', "qux"]

    @pytest.mark.parametrize("raw", ["", "   ", " , ,,", ",,,"])
    def test_blank_input_gives_empty_list(self, raw):
        assert tokenize_tags(raw) == []

    def test_sequence_input_is_returned_unchanged(self):
        assert tokenize_tags(["a", "b, c"]) == ["a", "b, c"]
        assert tokenize_tags(("x", "y")) == ["x", "y"]

    @pytest.mark.parametrize("raw", [42, None, ["a", 1], {"a": 1}])
    def test_rejects_non_text_input(self, raw):
        with pytest.raises(ValidationError):
            tokenize_tags(raw)

    @pytest.mark.parametrize(
        "raw",
        [
            "foo, bar, baz",
            "  padded , tags ",
            "python,  web development ,databases",
        ],
    )
    def test_never_returns_padded_tags(self, raw):
        for tag in tokenize_tags(raw):
            assert tag == tag.strip()
            assert tag


class TestTokenizeIdempotency:
    """Re-tokenizing joined output gives back the same tags."""

    @pytest.mark.parametrize(
        "raw",
        [
            "foo, bar, baz",
            'foo, "bar, baz", qux',
            "'new york', boston, don't",
            'say \\"hi\\", there',
            '"both \' and \\" quotes", plain',
        ],
    )
    def test_join_then_tokenize_round_trips(self, raw):
        tags = tokenize_tags(raw)
        assert set(tokenize_tags(join_tags(tags))) == set(tags)

    def test_comma_join_round_trips_plain_tags(self):
        tags = tokenize_tags("alpha, beta gamma, delta")
        assert set(tokenize_tags(",".join(tags))) == set(tags)

    def test_join_quotes_only_when_needed(self):
        assert join_tags(["a", "b c", "d, e"]) == 'a, b c, "d, e"'
