"""Tests for filter/chain.py module."""

import pytest

from ffbind.filter.chain import parse_chain


class TestParseChain:
    """Tests for parse_chain()."""

    def test_single_filter_without_args(self) -> None:
        assert parse_chain("hflip") == [("hflip", None)]

    def test_multiple_filters(self) -> None:
        assert parse_chain("scale=320:240,format=gray,vflip") == [
            ("scale", "320:240"),
            ("format", "gray"),
            ("vflip", None),
        ]

    def test_args_keep_equals_signs(self) -> None:
        assert parse_chain("eq=brightness=0.1:contrast=1.2") == [
            ("eq", "brightness=0.1:contrast=1.2")
        ]

    def test_whitespace_around_segments(self) -> None:
        assert parse_chain(" hflip , vflip ") == [("hflip", None), ("vflip", None)]

    def test_empty_args(self) -> None:
        assert parse_chain("null=") == [("null", "")]

    def test_quoted_comma_is_not_a_separator(self) -> None:
        assert parse_chain("drawtext=text='a,b',hflip") == [
            ("drawtext", "text='a,b'"),
            ("hflip", None),
        ]

    def test_escaped_comma_is_not_a_separator(self) -> None:
        assert parse_chain(r"select=eq(n\,0),hflip") == [
            ("select", r"eq(n\,0)"),
            ("hflip", None),
        ]


class TestParseChainErrors:
    """Tests for rejected chains."""

    @pytest.mark.parametrize("description", ["", "   "])
    def test_empty_chain(self, description: str) -> None:
        with pytest.raises(ValueError, match="empty"):
            parse_chain(description)

    def test_empty_segment(self) -> None:
        with pytest.raises(ValueError, match="position 1"):
            parse_chain("hflip,,vflip")

    def test_trailing_comma(self) -> None:
        with pytest.raises(ValueError, match="Empty filter"):
            parse_chain("hflip,")

    def test_missing_name(self) -> None:
        with pytest.raises(ValueError, match="Missing filter name"):
            parse_chain("=320:240")

    def test_unterminated_quote(self) -> None:
        with pytest.raises(ValueError, match="Unterminated quote"):
            parse_chain("drawtext=text='abc")

    def test_dangling_escape(self) -> None:
        with pytest.raises(ValueError, match="Dangling escape"):
            parse_chain("hflip\\")
