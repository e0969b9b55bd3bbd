"""
Tests for Text Utilities
========================
Newline normalization and line splitting.
"""

import pytest

from text_compare.text_utils import normalize_newlines, split_lines_no_trailing_empty


class TestNormalizeNewlines:
    """Tests for normalize_newlines."""

    def test_crlf_becomes_lf(self):
        assert normalize_newlines("a\r\nb") == "a\nb"

    def test_lone_cr_is_kept(self):
        assert normalize_newlines("a\rb\r\n") == "a\rb\n"

    def test_empty(self):
        assert normalize_newlines("") == ""

    def test_single_pass(self):
        """Test that a CR before a CRLF pair is left alone."""
        assert normalize_newlines("\r\r\n") == "\r\n"

    @pytest.mark.parametrize("text", ["a\r\n\r\nb", "\n\r", "plain", "x\r\n"])
    def test_idempotent(self, text):
        once = normalize_newlines(text)
        assert normalize_newlines(once) == once


class TestSplitLines:
    """Tests for split_lines_no_trailing_empty."""

    @pytest.mark.parametrize("text, expected", [
        ("a\nb\n", ["a", "b"]),
        ("a\nb", ["a", "b"]),
        ("", []),
        ("a\n\nb", ["a", "", "b"]),
        ("\n", [""]),
        ("a\n\n", ["a", ""]),
        ("a\r\nb\r\n", ["a", "b"]),
    ])
    def test_split(self, text, expected):
        assert split_lines_no_trailing_empty(text) == expected

    def test_only_one_trailing_empty_dropped(self):
        """Test that a blank last line survives when followed by a newline."""
        assert split_lines_no_trailing_empty("x\n\n\n") == ["x", "", ""]
