"""
Module: builder.numbering

Purpose:
    Backend-agnostic label resolution for the observations and
    follow-ups outlines, plus section heading labels.

Key Functions:
    - resolve_outline(): Lines -> ResolvedLines with labels
    - format_label(): Ordinal -> label for a scheme

Key Classes:
    - LabelScheme: Decimal / alpha / roman / none
    - NumberingConfig: Scheme per section
    - ResolvedLine: Line text + label
"""

from .schemes import BULLET_GLYPH, LabelScheme, NumberingConfig, format_label
from .resolver import ResolvedLine, resolve_outline

__all__ = [
    "BULLET_GLYPH",
    "LabelScheme",
    "NumberingConfig",
    "format_label",
    "ResolvedLine",
    "resolve_outline",
]
