"""
Module: builder.numbering.resolver

Purpose:
    Compute display labels for one outline section.

    Both renderers consume the output of resolve_outline(); neither
    computes labels on its own. That is what keeps the PDF and DOCX
    outputs showing the same numbers.

Algorithm:
    Single pass over the lines:
    1. Drop blank / whitespace-only lines
    2. Bullet line -> "•", counter untouched
    3. Other line -> counter += 1, label = format_label(scheme, counter)

Key Functions:
    - resolve_outline(): Main entry point

Used By:
    - builder.output.report_model
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from visit_report.core.models import OutlineLine

from .schemes import BULLET_GLYPH, LabelScheme, format_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedLine:
    """
    Outline line with its display label (immutable).

    Attributes:
        text: Cleaned display text
        label: "1.", "a.", ... or the bullet glyph
        is_bullet: True for bullet lines
        ordinal: 1-based position among non-bullet lines (None for bullets)
    """

    text: str
    label: str
    is_bullet: bool
    ordinal: Optional[int] = None

    @property
    def display_text(self) -> str:
        """Label and text joined the way they read on the page."""
        if not self.label:
            return self.text
        return f"{self.label} {self.text}"


def resolve_outline(
    lines: Iterable[OutlineLine],
    scheme: LabelScheme,
) -> tuple[ResolvedLine, ...]:
    """
    Resolve labels for one outline section.

    Args:
        lines: Outline lines in display order
        scheme: Label scheme for non-bullet lines

    Returns:
        Tuple of ResolvedLines; blank lines are omitted

    Example:
        >>> lines = [OutlineLine("Crack in wall"), OutlineLine("minor", True),
        ...          OutlineLine("Leak detected")]
        >>> [r.display_text for r in resolve_outline(lines, LabelScheme.DECIMAL)]
        ['1. Crack in wall', '• minor', '2. Leak detected']
    """
    resolved: list[ResolvedLine] = []
    counter = 0
    dropped = 0

    for line in lines:
        if line.is_blank:
            dropped += 1
            continue

        if line.is_bullet:
            resolved.append(ResolvedLine(
                text=line.text,
                label=BULLET_GLYPH,
                is_bullet=True,
            ))
        else:
            counter += 1
            resolved.append(ResolvedLine(
                text=line.text,
                label=format_label(scheme, counter),
                is_bullet=False,
                ordinal=counter,
            ))

    if dropped:
        logger.debug(f"Dropped {dropped} blank outline lines")

    return tuple(resolved)
