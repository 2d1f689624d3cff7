"""
Module: builder.numbering.schemes

Purpose:
    Label schemes for outline items and section headings, and the
    configuration choosing which scheme each section uses.

Key Classes:
    - LabelScheme: Decimal / alphabetic / roman / none
    - NumberingConfig: Per-section scheme selection

Key Functions:
    - format_label(): Ordinal -> display label ("3.", "c.", "iii.")

Used By:
    - builder.numbering.resolver
    - builder.output.docx_renderer: Maps schemes to native list formats
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

BULLET_GLYPH = "•"

_ROMAN_NUMERALS = (
    (1000, "m"), (900, "cm"), (500, "d"), (400, "cd"),
    (100, "c"), (90, "xc"), (50, "l"), (40, "xl"),
    (10, "x"), (9, "ix"), (5, "v"), (4, "iv"), (1, "i"),
)


class LabelScheme(str, Enum):
    """Numbering style for a run of non-bullet lines."""

    DECIMAL = "decimal"
    LOWER_ALPHA = "lower_alpha"
    UPPER_ALPHA = "upper_alpha"
    LOWER_ROMAN = "lower_roman"
    UPPER_ROMAN = "upper_roman"
    NONE = "none"


def format_label(scheme: LabelScheme, ordinal: int) -> str:
    """
    Format the label for the Nth non-bullet line.

    Args:
        scheme: Label scheme
        ordinal: 1-based position among non-bullet lines

    Returns:
        Label including its trailing period ("" for LabelScheme.NONE)

    Raises:
        ValueError: If ordinal < 1

    Example:
        >>> format_label(LabelScheme.LOWER_ALPHA, 28)
        'bb.'
    """
    if ordinal < 1:
        raise ValueError(f"ordinal must be >= 1: {ordinal}")

    if scheme is LabelScheme.NONE:
        return ""
    if scheme is LabelScheme.DECIMAL:
        body = str(ordinal)
    elif scheme in (LabelScheme.LOWER_ALPHA, LabelScheme.UPPER_ALPHA):
        body = _to_alpha(ordinal)
        if scheme is LabelScheme.UPPER_ALPHA:
            body = body.upper()
    else:
        body = _to_roman(ordinal)
        if scheme is LabelScheme.UPPER_ROMAN:
            body = body.upper()
    return f"{body}."


def _to_alpha(ordinal: int) -> str:
    """1 -> a, 26 -> z, 27 -> aa, 28 -> bb (the letter repeats, as in word processors)."""
    repeat, index = divmod(ordinal - 1, 26)
    return chr(ord("a") + index) * (repeat + 1)


def _to_roman(ordinal: int) -> str:
    """1 -> i, 4 -> iv, 14 -> xiv."""
    parts = []
    n = ordinal
    for value, numeral in _ROMAN_NUMERALS:
        count, n = divmod(n, value)
        parts.append(numeral * count)
    return "".join(parts)


@dataclass(frozen=True)
class NumberingConfig:
    """
    Label schemes per section (immutable).

    Attributes:
        observations: Scheme for observation lines
        followups: Scheme for follow-up lines
        headings: Scheme for the numbered section headings
            ("1. Background & Purpose"); NONE drops the prefix

    Example:
        >>> NumberingConfig(headings=LabelScheme.UPPER_ROMAN).heading_label(2)
        'II.'
    """

    observations: LabelScheme = LabelScheme.DECIMAL
    followups: LabelScheme = LabelScheme.LOWER_ALPHA
    headings: LabelScheme = LabelScheme.DECIMAL

    def heading_label(self, index: int) -> str:
        """Label for the section heading at 1-based position ``index``."""
        return format_label(self.headings, index)

    @classmethod
    def from_dict(cls, data: dict) -> NumberingConfig:
        """Build from a dict of scheme names (missing keys keep defaults)."""
        defaults = cls()
        return cls(
            observations=LabelScheme(data.get("observations", defaults.observations.value)),
            followups=LabelScheme(data.get("followups", defaults.followups.value)),
            headings=LabelScheme(data.get("headings", defaults.headings.value)),
        )
