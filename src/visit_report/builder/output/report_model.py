"""
Module: builder.output.report_model

Purpose:
    The backend-agnostic report snapshot both renderers consume.
    Labels (numbering resolver), photo slots (layout planner), captions,
    note text and the display date are all computed here once, so the
    PDF and DOCX outputs cannot disagree on content, order or numbering.

Key Functions:
    - build_report_model(): Visit + density + config -> ReportModel

Key Classes:
    - ReportModel: Everything a renderer draws
    - ReportSection: One titled section (paragraph or outline)
    - PhotoCaption: Caption and note text for one photo

Used By:
    - builder.controller
    - builder.output.pdf_renderer
    - builder.output.docx_renderer
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from visit_report.core.models import Visit

from ..config import ExportConfig
from ..layout import LayoutConfig, PhotoLayout, PhotoSlot, plan_photo_pages
from ..numbering import LabelScheme, ResolvedLine, resolve_outline

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

SECTION_BACKGROUND = "background"
SECTION_OBSERVATIONS = "observations"
SECTION_FOLLOWUPS = "followups"


@dataclass(frozen=True)
class IdentityField:
    """One label/value row of the identity box."""

    label: str
    value: str


@dataclass(frozen=True)
class ReportSection:
    """
    One titled section of the report body.

    Exactly one of ``paragraph_lines`` (background) or ``lines``
    (outline sections) is populated.

    Attributes:
        key: Section key (background / observations / followups)
        title: Title without a number
        heading: Title with its heading label ("2. Site Observations")
        scheme: Label scheme of the outline lines
        paragraph_lines: Hard lines of a plain paragraph
        lines: Resolved outline lines
    """

    key: str
    title: str
    heading: str
    scheme: LabelScheme = LabelScheme.NONE
    paragraph_lines: Tuple[str, ...] = ()
    lines: Tuple[ResolvedLine, ...] = ()

    @property
    def is_outline(self) -> bool:
        return bool(self.lines)


@dataclass(frozen=True)
class PhotoCaption:
    """
    Text shown with one photo.

    Attributes:
        number: 1-based photo number
        caption: "Photo N: description" (truncated) or "Photo N"
        notes: Up to max_note_lines of the photo notes, joined by spaces
    """

    number: int
    caption: str
    notes: str = ""


@dataclass(frozen=True)
class ReportModel:
    """
    Complete, backend-agnostic content of one report.

    Attributes:
        title: Title bar text
        brand_name: Title bar / footer organization name ("" hides it)
        identity: Identity rows (client, site, project, date, prepared by)
        sections: Body sections in display order (empty ones omitted)
        photo_layout: Planned photo pages (empty -> no photo section)
        photos_title: Photo section heading
        continued_suffix: Suffix for repeated headings
        captions: Caption text keyed by photo number
        layout: Page geometry
    """

    title: str
    brand_name: str
    identity: Tuple[IdentityField, ...]
    sections: Tuple[ReportSection, ...]
    photo_layout: PhotoLayout
    photos_title: str
    continued_suffix: str
    captions: Dict[int, PhotoCaption] = field(default_factory=dict)
    layout: LayoutConfig = field(default_factory=LayoutConfig)

    @property
    def has_photos(self) -> bool:
        """True when the photo section is rendered."""
        return not self.photo_layout.is_empty

    def continued(self, heading: str) -> str:
        """Heading text for a continuation page."""
        return f"{heading}{self.continued_suffix}"

    def photo_heading(self, continued: bool) -> str:
        """Photo section heading, continued or not."""
        return self.continued(self.photos_title) if continued else self.photos_title

    def caption_for(self, slot: PhotoSlot) -> PhotoCaption:
        """Caption entry for a slot."""
        return self.captions[slot.number]

    def section(self, key: str) -> Optional[ReportSection]:
        """Section by key, or None if it was omitted."""
        return next((s for s in self.sections if s.key == key), None)


def build_report_model(
    visit: Visit,
    density: int,
    config: Optional[ExportConfig] = None,
) -> ReportModel:
    """
    Build the report snapshot for one export.

    Resolves outline labels and plans photo pages exactly once.

    Args:
        visit: Visit snapshot (not modified)
        density: Photos per page (2 or 6)
        config: Export configuration (defaults to ExportConfig())

    Returns:
        ReportModel

    Raises:
        ValueError: If density is not supported
    """
    config = config or ExportConfig()
    numbering = config.numbering

    candidates = []

    paragraph_lines = _paragraph_lines(visit.background)
    if paragraph_lines:
        candidates.append((SECTION_BACKGROUND, config.background_title, LabelScheme.NONE, paragraph_lines, ()))

    for key, title, scheme, lines in (
        (SECTION_OBSERVATIONS, config.observations_title, numbering.observations, visit.observations),
        (SECTION_FOLLOWUPS, config.followups_title, numbering.followups, visit.followups),
    ):
        resolved = resolve_outline(lines, scheme)
        if resolved:
            candidates.append((key, title, scheme, (), resolved))

    sections = []
    for index, (key, title, scheme, para, resolved) in enumerate(candidates, start=1):
        label = numbering.heading_label(index)
        sections.append(ReportSection(
            key=key,
            title=title,
            heading=f"{label} {title}" if label else title,
            scheme=scheme,
            paragraph_lines=para,
            lines=resolved,
        ))

    photo_layout = plan_photo_pages(visit.photos, density, config.layout)
    captions = {
        slot.number: _caption(slot, config)
        for page in photo_layout.pages
        for slot in page.slots
    }

    logger.debug(
        f"Report model for {visit!r}: {len(sections)} sections, "
        f"{photo_layout.page_count} photo pages"
    )

    return ReportModel(
        title=config.title,
        brand_name=config.brand_name,
        identity=_identity(visit, config),
        sections=tuple(sections),
        photo_layout=photo_layout,
        photos_title=config.photos_title,
        continued_suffix=config.continued_suffix,
        captions=captions,
        layout=config.layout,
    )


def _identity(visit: Visit, config: ExportConfig) -> Tuple[IdentityField, ...]:
    """Identity rows in display order."""
    date_text = visit.visit_date.strftime(config.date_format) if visit.visit_date else ""
    return (
        IdentityField("Client", visit.client_name),
        IdentityField("Site", visit.site_name),
        IdentityField("Project No.", visit.project_no),
        IdentityField("Date", date_text),
        IdentityField("Prepared by", visit.prepared_by),
    )


def _paragraph_lines(text: str) -> Tuple[str, ...]:
    """Split a plain paragraph on hard newlines, trimming blank edges."""
    if not text or not text.strip():
        return ()
    lines = [line.rstrip() for line in _LINE_BREAK.split(text.strip("\r\n"))]
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return tuple(lines)


def _caption(slot: PhotoSlot, config: ExportConfig) -> PhotoCaption:
    """Caption and note text for one slot."""
    photo = slot.photo
    description = photo.description.strip()
    if description:
        if len(description) > config.caption_max_chars:
            description = description[:config.caption_max_chars] + "..."
        caption = f"Photo {slot.number}: {description}"
    else:
        caption = f"Photo {slot.number}"

    note_lines = [line.strip() for line in _LINE_BREAK.split(photo.notes) if line.strip()]
    notes = " ".join(note_lines[:config.max_note_lines])

    return PhotoCaption(number=slot.number, caption=caption, notes=notes)
