"""Tests for token-to-document position mapping."""

from cibash.models import MappedRange
from cibash.scanner.mapper import map_token


class TestMapToken:
    def test_first_line(self):
        assert map_token(0, 4, "echo hi", (10,)) == MappedRange(10, 14)

    def test_column_on_first_line(self):
        assert map_token(5, 2, "echo hi", (10,)) == MappedRange(15, 17)

    def test_later_line_uses_its_own_offset(self):
        # "ab\ncd": token "cd" starts at content offset 3, line 1, column 0.
        assert map_token(3, 2, "ab\ncd", (5, 20)) == MappedRange(20, 22)

    def test_column_on_later_line(self):
        assert map_token(5, 1, "ab\ncde", (5, 20)) == MappedRange(22, 23)

    def test_line_without_offset_is_unmappable(self):
        assert map_token(3, 2, "ab\ncd", (5,)) is None

    def test_multiline_token_truncated_to_first_line(self):
        content = "echo 'a\nb'"
        # The string token "'a\nb'" starts at 5 and runs onto line 1.
        assert map_token(5, 5, content, (0, 20)) == MappedRange(5, 7)

    def test_multiline_token_without_next_offset_keeps_length(self):
        assert map_token(5, 5, "echo 'a\nb'", (0,)) == MappedRange(5, 10)

    def test_token_ending_at_line_end(self):
        assert map_token(0, 2, "ab\ncd", (7, 30)) == MappedRange(7, 9)
