"""
Module: outline

Purpose:
    Provides the OutlineLine dataclass - the first-class form of one entry
    in the observations / follow-ups sections of a visit. The stored
    free-text field encodes bullet lines with a leading tab (or four
    spaces); this module is the only place that encoding is read or
    written.

Key Functions:
    - OutlineLine.parse(raw): Decode a single stored line
    - parse_outline(raw): Decode a whole stored section
    - format_outline(lines): Encode lines back to the stored form

Dependencies:
    - dataclasses (std)

Used By:
    - core.models.visit.Visit
    - core.utils.serialization
    - builder.numbering.resolver
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

BULLET_TAB_PREFIX = "\t"
BULLET_SPACE_PREFIX = "    "

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True, slots=True)
class OutlineLine:
    """
    One outline entry (immutable).

    Attributes:
        text: Display text with the bullet prefix and any other leading
            whitespace removed
        is_bullet: True if the line renders with a bullet glyph instead
            of a number/letter

    Example:
        >>> OutlineLine.parse("\\tminor")
        OutlineLine(text='minor', is_bullet=True)
    """

    text: str
    is_bullet: bool = False

    @classmethod
    def parse(cls, raw: str) -> OutlineLine:
        """
        Decode one stored line.

        Both a leading tab and a leading four-space run mark a bullet.

        Args:
            raw: Line as stored in the visit record

        Returns:
            OutlineLine with the cleaned text and bullet flag
        """
        is_bullet = raw.startswith(BULLET_TAB_PREFIX) or raw.startswith(BULLET_SPACE_PREFIX)
        return cls(text=raw.strip(), is_bullet=is_bullet)

    @property
    def is_blank(self) -> bool:
        """True if the line has no visible text."""
        return not self.text.strip()

    def to_raw(self) -> str:
        """Encode back to the stored form (tab prefix for bullets)."""
        if self.is_bullet:
            return f"{BULLET_TAB_PREFIX}{self.text}"
        return self.text


def parse_outline(raw: str | None) -> tuple[OutlineLine, ...]:
    """
    Decode a stored outline section into lines.

    Blank lines are preserved here; the numbering resolver drops them.

    Args:
        raw: Free-text section value (may be None or empty)

    Returns:
        Tuple of OutlineLines in stored order
    """
    if not raw:
        return ()
    return tuple(OutlineLine.parse(line) for line in _LINE_BREAK.split(raw))


def format_outline(lines: Iterable[OutlineLine]) -> str:
    """Encode outline lines back to a single stored string."""
    return "\n".join(line.to_raw() for line in lines)
