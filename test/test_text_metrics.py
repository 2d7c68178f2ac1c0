"""Tests for display width helpers."""

import pytest

from text_metrics import char_length, text_length, text_substring


class TestTextLength:
    """Tests for char_length / text_length."""

    def test_ascii_is_single_width(self):
        assert char_length("A") == 1
        assert text_length("Hello") == 5

    def test_non_ascii_is_double_width(self):
        """CJK and Cyrillic both count as two columns."""
        assert char_length("中") == 2
        assert char_length("Ж") == 2
        assert text_length("中文A") == 5

    def test_empty(self):
        assert text_length("") == 0


class TestTextSubstring:
    """Tests for text_substring."""

    def test_prefix_by_columns(self):
        assert text_substring("ABCDEF", 0, 4) == "ABCD"

    def test_remainder_without_end(self):
        assert text_substring("ABCDEF", 4) == "EF"

    def test_straddling_wide_char_goes_to_remainder(self):
        """A double-width glyph crossing the boundary is not split."""
        assert text_substring("中文", 0, 3) == "中"
        assert text_substring("中文", 3) == "文"

    @pytest.mark.parametrize("text", ["ABCDEF", "中文字", "a中b文c"])
    @pytest.mark.parametrize("n", [1, 2, 3, 5])
    def test_head_and_rest_rebuild_text(self, text, n):
        assert text_substring(text, 0, n) + text_substring(text, n) == text
