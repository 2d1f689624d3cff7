"""
Unit Tests for OutlineLine

Tests for decoding and encoding the stored outline format.
"""

import pytest

from visit_report.core.models import OutlineLine, format_outline, parse_outline


class TestOutlineLineParse:
    """Tests for OutlineLine.parse."""

    def test_parse_when_tab_prefix_then_bullet(self):
        line = OutlineLine.parse("\tminor")

        assert line.is_bullet is True
        assert line.text == "minor"

    def test_parse_when_four_spaces_then_bullet(self):
        line = OutlineLine.parse("    minor")

        assert line.is_bullet is True
        assert line.text == "minor"

    def test_parse_when_two_spaces_then_not_bullet(self):
        line = OutlineLine.parse("  Crack in wall")

        assert line.is_bullet is False
        assert line.text == "Crack in wall"

    def test_parse_when_plain_then_not_bullet(self):
        line = OutlineLine.parse("Crack in wall")

        assert line == OutlineLine("Crack in wall", is_bullet=False)

    def test_parse_when_tab_prefix_then_no_tab_in_text(self):
        line = OutlineLine.parse("\t\tdeep bullet  ")

        assert "\t" not in line.text
        assert line.text == "deep bullet"

    @pytest.mark.parametrize("raw", ["", "   ", "\t", "\t  "])
    def test_is_blank_when_whitespace_only(self, raw):
        assert OutlineLine.parse(raw).is_blank


class TestParseOutline:
    """Tests for parse_outline / format_outline."""

    def test_parse_outline_when_none_then_empty(self):
        assert parse_outline(None) == ()
        assert parse_outline("") == ()

    def test_parse_outline_when_crlf_then_splits_lines(self):
        lines = parse_outline("A\r\n\tb\r\nC")

        assert [line.text for line in lines] == ["A", "b", "C"]
        assert [line.is_bullet for line in lines] == [False, True, False]

    def test_parse_outline_keeps_blank_lines(self):
        lines = parse_outline("A\n\nB")

        assert len(lines) == 3
        assert lines[1].is_blank

    def test_format_outline_when_bullet_then_tab_prefix(self):
        lines = (OutlineLine("A"), OutlineLine("b", is_bullet=True))

        assert format_outline(lines) == "A\n\tb"

    def test_format_outline_when_space_bullet_parsed_then_written_with_tab(self):
        lines = parse_outline("A\n    b")

        assert format_outline(lines) == "A\n\tb"
