"""
Unit tests for label schemes.
"""

import pytest

from visit_report.builder.numbering import LabelScheme, NumberingConfig, format_label


class TestFormatLabel:
    """Tests for format_label."""

    @pytest.mark.parametrize("scheme, ordinal, expected", [
        (LabelScheme.DECIMAL, 1, "1."),
        (LabelScheme.DECIMAL, 12, "12."),
        (LabelScheme.LOWER_ALPHA, 1, "a."),
        (LabelScheme.LOWER_ALPHA, 26, "z."),
        (LabelScheme.UPPER_ALPHA, 3, "C."),
        (LabelScheme.LOWER_ROMAN, 4, "iv."),
        (LabelScheme.LOWER_ROMAN, 14, "xiv."),
        (LabelScheme.UPPER_ROMAN, 9, "IX."),
        (LabelScheme.NONE, 5, ""),
    ])
    def test_format_label(self, scheme, ordinal, expected):
        assert format_label(scheme, ordinal) == expected

    def test_format_label_when_alpha_past_z_then_letter_repeats(self):
        assert format_label(LabelScheme.LOWER_ALPHA, 27) == "aa."
        assert format_label(LabelScheme.LOWER_ALPHA, 28) == "bb."
        assert format_label(LabelScheme.UPPER_ALPHA, 53) == "AAA."

    def test_format_label_when_ordinal_zero_then_raises(self):
        with pytest.raises(ValueError):
            format_label(LabelScheme.DECIMAL, 0)


class TestNumberingConfig:
    """Tests for NumberingConfig."""

    def test_defaults(self):
        config = NumberingConfig()

        assert config.observations is LabelScheme.DECIMAL
        assert config.followups is LabelScheme.LOWER_ALPHA
        assert config.heading_label(2) == "2."

    def test_heading_label_when_none_scheme_then_empty(self):
        assert NumberingConfig(headings=LabelScheme.NONE).heading_label(1) == ""

    def test_from_dict_when_partial_then_keeps_defaults(self):
        config = NumberingConfig.from_dict({"headings": "upper_roman"})

        assert config.headings is LabelScheme.UPPER_ROMAN
        assert config.followups is LabelScheme.LOWER_ALPHA

    def test_from_dict_when_unknown_scheme_then_raises(self):
        with pytest.raises(ValueError):
            NumberingConfig.from_dict({"observations": "klingon"})
