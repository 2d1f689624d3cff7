"""
Module: builder.config

Purpose:
    Configuration dataclass for report export. Immutable configuration
    with validation on construction.

Key Classes:
    - ExportConfig: Text, numbering, and layout settings for an export

Dependencies:
    - dataclasses (std)
    - builder.numbering: NumberingConfig
    - builder.layout: LayoutConfig

Used By:
    - builder.controller: Export coordinator
    - builder.output.report_model: Section titles, captions, dates
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path

from .layout import LayoutConfig
from .numbering import NumberingConfig

_FILENAME_PREFIX = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True)
class ExportConfig:
    """
    Configuration for exporting a visit report (immutable).

    Attributes:
        title: Report title shown in the title bar
        brand_name: Organization name shown in the title bar and footer
            ("" hides it)
        filename_prefix: First segment of the exported file name
        background_title: Heading of the background section
        observations_title: Heading of the observations section
        followups_title: Heading of the follow-ups section
        photos_title: Heading of the photo section
        continued_suffix: Appended to a heading repeated on a new page
        numbering: Label schemes for outlines and headings
        layout: Page geometry and photo grids
        caption_max_chars: Photo descriptions longer than this are cut
            and end with "..."
        max_note_lines: Photo note lines kept under a caption
        date_format: strftime format for the visit date in the document

    Example:
        >>> config = ExportConfig(brand_name="Acme Engineering")
        >>> config.filename_prefix
        'Site_Visit_Report'
    """

    # Text
    title: str = "Site Visit Report"
    brand_name: str = ""
    filename_prefix: str = "Site_Visit_Report"
    background_title: str = "Background & Purpose"
    observations_title: str = "Site Observations"
    followups_title: str = "Recommendations & Follow-up Actions"
    photos_title: str = "Site Photos"
    continued_suffix: str = " (continued)"

    # Numbering and geometry
    numbering: NumberingConfig = field(default_factory=NumberingConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)

    # Photo captions
    caption_max_chars: int = 35
    max_note_lines: int = 2

    # Dates
    date_format: str = "%m/%d/%Y"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not _FILENAME_PREFIX.match(self.filename_prefix):
            raise ValueError(
                f"filename_prefix may only contain letters, digits, '-' and '_': "
                f"{self.filename_prefix!r}"
            )
        if self.caption_max_chars <= 0:
            raise ValueError(f"caption_max_chars must be positive: {self.caption_max_chars}")
        if self.max_note_lines < 0:
            raise ValueError(f"max_note_lines must be non-negative: {self.max_note_lines}")
        if not self.title.strip():
            raise ValueError("title cannot be empty")

    @classmethod
    def from_dict(cls, data: dict) -> ExportConfig:
        """
        Build a config from a plain dict (e.g. a JSON settings file).

        Unknown keys are rejected; ``numbering`` is a dict of scheme names.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        data = dict(data)
        known = {f for f in cls.__dataclass_fields__ if f != "layout"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown export settings: {sorted(unknown)}")
        if "numbering" in data:
            data["numbering"] = NumberingConfig.from_dict(data["numbering"])
        return cls(**data)

    @classmethod
    def load(cls, path: Path) -> ExportConfig:
        """Load a config from a JSON settings file."""
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
