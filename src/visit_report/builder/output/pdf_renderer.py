"""
Module: builder.output.pdf_renderer

Purpose:
    Render a ReportModel to PDF using ReportLab.
    Content is painted at explicit coordinates; a cursor walks down the
    page and opens a new page (repeating the current heading) whenever
    the next block would run into the footer area.

Algorithm:
    1. HEADER_BLOCK: title bar and identity box on page 1
    2. OUTLINE_SECTION: background paragraph and outline sections,
       breaking pages line by line
    3. PHOTO_SECTION: one page per planned photo page, slots drawn at
       their grid row/column
    4. FINALIZING_FOOTERS: "Page X of Y" painted on every page once the
       total is known

Key Classes:
    - PdfRenderer: ReportRenderer for PDF

Dependencies:
    - reportlab: PDF generation, text measurement and wrapping
    - builder.images: Photo decoding

Used By:
    - builder.controller: Renderer registry
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Sequence

from reportlab.lib.colors import Color, HexColor, white
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from ..images import DecodedPhoto, PhotoRepository, decode_photo, placeholder_text
from ..layout import LayoutConfig, PhotoGridSpec, PhotoPage, PhotoSlot
from .base import ExportFormat, RenderError, ReportRenderer
from .report_model import PhotoCaption, ReportModel, ReportSection

logger = logging.getLogger(__name__)

# Palette
NAVY = HexColor("#172554")
LIGHT_GRAY = HexColor("#F5F5F5")
BORDER_GRAY = HexColor("#C8C8C8")
TEXT_GRAY = HexColor("#505050")
FOOTER_GRAY = HexColor("#808080")
BLACK = Color(0, 0, 0)

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

# Header block (top-down points)
TITLE_BAR_HEIGHT = 90
TITLE_BASELINE = 50
TITLE_FONT_SIZE = 22
BRAND_FONT_SIZE = 10
INFO_BOX_TOP = 110
INFO_BOX_HEIGHT = 90
INFO_FONT_SIZE = 10
INFO_FIRST_BASELINE = 130
INFO_ROW_SPACING = 20
INFO_PADDING = 10
INFO_LABEL_WIDTH = 80
INFO_SECOND_COLUMN = 300
BODY_START = INFO_BOX_TOP + INFO_BOX_HEIGHT + 32

# Sections
HEADING_FONT_SIZE = 14
HEADING_BASELINE = 14
HEADING_RULE_OFFSET = 19
BODY_FONT_SIZE = 11
LINE_HEIGHT = 14
LINE_BASELINE = 11
TEXT_INDENT = 10
BULLET_INDENT = 30
ITEM_GAP = 5
SECTION_GAP = 15

# Photo cells
CAPTION_FONT_SIZE = 9
CAPTION_PADDING = 5
NOTES_FONT_SIZE = 9
NOTES_LINE_HEIGHT = 11
PLACEHOLDER_FONT_SIZE = 10

# Footer
FOOTER_FONT_SIZE = 9
FOOTER_BASELINE = 8


class RenderPhase(Enum):
    """Where the cursor is in the document."""

    HEADER_BLOCK = auto()
    OUTLINE_SECTION = auto()
    PHOTO_SECTION = auto()
    FINALIZING_FOOTERS = auto()


@dataclass
class _Cursor:
    """Current page and top-down Y of the next block."""

    page_index: int = 0
    y: float = 0.0


class _NumberedCanvas(canvas.Canvas):
    """
    Canvas that defers page output until save() so every footer can show
    the final page count.
    """

    def __init__(self, *args, layout: LayoutConfig, brand_name: str = "", **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._footer_layout = layout
        self._footer_brand = brand_name
        self._saved_page_states: List[dict] = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for number, state in enumerate(self._saved_page_states, start=1):
            self.__dict__.update(state)
            self._draw_footer(number, total)
            canvas.Canvas.showPage(self)
        canvas.Canvas.save(self)

    @property
    def page_total(self) -> int:
        return len(self._saved_page_states)

    def _draw_footer(self, number: int, total: int) -> None:
        """Draw "Page X of Y" centered and the brand right-aligned."""
        layout = self._footer_layout
        y_pt = layout.margin_bottom + FOOTER_BASELINE

        self.saveState()
        self.setFont(FONT, FOOTER_FONT_SIZE)
        self.setFillColor(FOOTER_GRAY)
        self.drawCentredString(layout.page_width / 2, y_pt, f"Page {number} of {total}")
        if self._footer_brand:
            self.drawRightString(layout.page_width - layout.margin_right, y_pt, self._footer_brand)
        self.restoreState()


class PdfRenderer(ReportRenderer):
    """
    ReportRenderer producing PDF bytes.

    Example:
        >>> data = PdfRenderer().render(model, repository)
        >>> data[:5]
        b'%PDF-'
    """

    format = ExportFormat.PDF

    def render(self, model: ReportModel, photos: PhotoRepository) -> bytes:
        """Render model to PDF bytes."""
        return _PdfDocument(model, photos).build()


class _PdfDocument:
    """State for rendering one PDF (never shared between calls)."""

    def __init__(self, model: ReportModel, photos: PhotoRepository) -> None:
        self.model = model
        self.photos = photos
        self.layout = model.layout
        self.cursor = _Cursor()
        self.phase = RenderPhase.HEADER_BLOCK
        self.section: Optional[ReportSection] = None
        self.placeholders = 0

        self._buffer = io.BytesIO()
        self.canvas = _NumberedCanvas(
            self._buffer,
            pagesize=(self.layout.page_width, self.layout.page_height),
            layout=self.layout,
            brand_name=model.brand_name,
        )
        self.canvas.setTitle(model.title)
        if model.brand_name:
            self.canvas.setAuthor(model.brand_name)

    def build(self) -> bytes:
        """Draw every phase and serialize."""
        self._enter(RenderPhase.HEADER_BLOCK)
        self._draw_header_block()

        self._enter(RenderPhase.OUTLINE_SECTION)
        for section in self.model.sections:
            self._draw_section(section)
        self.section = None

        if self.model.has_photos:
            self._enter(RenderPhase.PHOTO_SECTION)
            for page in self.model.photo_layout.pages:
                self._new_page()
                self._draw_photo_page(page)

        self._enter(RenderPhase.FINALIZING_FOOTERS)
        self.canvas.showPage()
        page_total = self.canvas.page_total
        try:
            self.canvas.save()
        except Exception as e:
            logger.error(f"Failed to serialize PDF: {e}")
            raise RenderError(f"Failed to serialize PDF: {e}") from e

        data = self._buffer.getvalue()
        logger.info(
            f"Rendered PDF: {page_total} pages, {len(data)} bytes, "
            f"{self.placeholders} photo placeholders"
        )
        return data

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def _enter(self, phase: RenderPhase) -> None:
        logger.debug(f"PDF phase {self.phase.name} -> {phase.name} (page {self.cursor.page_index + 1})")
        self.phase = phase

    def _pdf_y(self, y_top: float) -> float:
        """Convert a top-down Y to ReportLab's bottom-up Y."""
        return self.layout.page_height - y_top

    def _fits(self, height: float) -> bool:
        return self.cursor.y + height <= self.layout.content_bottom

    def _new_page(self) -> None:
        """
        Close the current page and start the next one.

        Inside an outline section the section heading is repeated with
        the continued suffix.
        """
        self.canvas.showPage()
        self.cursor.page_index += 1
        self.cursor.y = self.layout.margin_top
        if self.phase is RenderPhase.OUTLINE_SECTION and self.section is not None:
            self._draw_heading(self.model.continued(self.section.heading))

    def _ensure_room(self, height: float) -> None:
        if not self._fits(height):
            self._new_page()

    # ------------------------------------------------------------------
    # Header block
    # ------------------------------------------------------------------

    def _draw_header_block(self) -> None:
        c = self.canvas
        layout = self.layout

        c.saveState()
        c.setFillColor(NAVY)
        c.rect(0, self._pdf_y(TITLE_BAR_HEIGHT), layout.page_width, TITLE_BAR_HEIGHT, stroke=0, fill=1)
        c.setFillColor(white)
        c.setFont(FONT_BOLD, TITLE_FONT_SIZE)
        c.drawString(layout.margin_left, self._pdf_y(TITLE_BASELINE), self.model.title)
        if self.model.brand_name:
            c.setFont(FONT, BRAND_FONT_SIZE)
            c.drawRightString(
                layout.page_width - layout.margin_right,
                self._pdf_y(TITLE_BASELINE),
                self.model.brand_name,
            )

        c.setStrokeColor(BORDER_GRAY)
        c.setLineWidth(0.5)
        c.setFillColor(LIGHT_GRAY)
        c.rect(
            layout.margin_left,
            self._pdf_y(INFO_BOX_TOP + INFO_BOX_HEIGHT),
            layout.content_width,
            INFO_BOX_HEIGHT,
            stroke=1,
            fill=1,
        )

        # Client / Site / Project No. on the left, Date / Prepared by on the right
        identity = self.model.identity
        columns = (
            (layout.margin_left + INFO_PADDING, identity[:3]),
            (layout.margin_left + INFO_SECOND_COLUMN, identity[3:]),
        )
        right_edge = layout.margin_left + layout.content_width - INFO_PADDING
        for index, (x_pt, fields) in enumerate(columns):
            column_end = columns[index + 1][0] - INFO_PADDING if index + 1 < len(columns) else right_edge
            value_width = column_end - x_pt - INFO_LABEL_WIDTH
            for row, item in enumerate(fields):
                y_pt = self._pdf_y(INFO_FIRST_BASELINE + row * INFO_ROW_SPACING)
                c.setFillColor(BLACK)
                c.setFont(FONT_BOLD, INFO_FONT_SIZE)
                c.drawString(x_pt, y_pt, f"{item.label}:")
                c.setFont(FONT, INFO_FONT_SIZE)
                c.drawString(
                    x_pt + INFO_LABEL_WIDTH,
                    y_pt,
                    _truncate(item.value, FONT, INFO_FONT_SIZE, value_width),
                )
        c.restoreState()

        self.cursor.y = BODY_START

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _draw_heading(self, text: str) -> None:
        """Draw a heading with its navy rule at the cursor."""
        c = self.canvas
        layout = self.layout
        y = self.cursor.y

        c.saveState()
        c.setFillColor(NAVY)
        c.setFont(FONT_BOLD, HEADING_FONT_SIZE)
        c.drawString(layout.margin_left, self._pdf_y(y + HEADING_BASELINE), text)
        c.setStrokeColor(NAVY)
        c.setLineWidth(0.5)
        rule_y = self._pdf_y(y + HEADING_RULE_OFFSET)
        c.line(layout.margin_left, rule_y, layout.margin_left + layout.content_width, rule_y)
        c.restoreState()

        self.cursor.y += layout.section_heading_height

    def _draw_section(self, section: ReportSection) -> None:
        # Heading stays with the first body line; a page break here continues no section
        self.section = None
        self._ensure_room(self.layout.section_heading_height + LINE_HEIGHT)
        self.section = section
        self._draw_heading(section.heading)

        if section.is_outline:
            for line in section.lines:
                self._draw_outline_item(line.label, line.text, line.is_bullet)
        else:
            self._draw_paragraph(section.paragraph_lines)
            self.cursor.y += ITEM_GAP

        self.cursor.y += SECTION_GAP
        logger.debug(f"Drew section '{section.heading}' (page {self.cursor.page_index + 1})")

    def _draw_paragraph(self, hard_lines: Sequence[str]) -> None:
        """Wrap each hard line to the content width; blank hard lines stay blank."""
        x_pt = self.layout.margin_left + TEXT_INDENT
        width = self.layout.content_width - 2 * TEXT_INDENT
        for hard_line in hard_lines:
            wrapped = simpleSplit(hard_line, FONT, BODY_FONT_SIZE, width) if hard_line.strip() else [""]
            for text in wrapped:
                self._draw_body_line(x_pt, text)

    def _draw_outline_item(self, label: str, text: str, is_bullet: bool) -> None:
        """Draw label then text; wrapped lines hang under the text start."""
        x_pt = self.layout.margin_left + (BULLET_INDENT if is_bullet else TEXT_INDENT)
        label_width = (
            self.canvas.stringWidth(f"{label} ", FONT, BODY_FONT_SIZE) if label else 0
        )
        text_x = x_pt + label_width
        width = self.layout.margin_left + self.layout.content_width - TEXT_INDENT - text_x

        wrapped = simpleSplit(text, FONT, BODY_FONT_SIZE, width) or [""]
        for index, part in enumerate(wrapped):
            self._ensure_room(LINE_HEIGHT)
            if index == 0 and label:
                # "label text" drawn at x puts the text exactly at text_x
                self._draw_text(x_pt, f"{label} {part}")
            else:
                self._draw_text(text_x, part)
            self.cursor.y += LINE_HEIGHT
        self.cursor.y += ITEM_GAP

    def _draw_body_line(self, x_pt: float, text: str) -> None:
        self._ensure_room(LINE_HEIGHT)
        if text:
            self._draw_text(x_pt, text)
        self.cursor.y += LINE_HEIGHT

    def _draw_text(self, x_pt: float, text: str) -> None:
        c = self.canvas
        c.saveState()
        c.setFillColor(BLACK)
        c.setFont(FONT, BODY_FONT_SIZE)
        c.drawString(x_pt, self._pdf_y(self.cursor.y + LINE_BASELINE), text)
        c.restoreState()

    # ------------------------------------------------------------------
    # Photos
    # ------------------------------------------------------------------

    def _draw_photo_page(self, page: PhotoPage) -> None:
        grid = self.layout.grid_for(self.model.photo_layout.density)
        self._draw_heading(self.model.photo_heading(page.continued))

        grid_left = self.layout.margin_left + (self.layout.content_width - grid.grid_width) / 2
        grid_top = self.cursor.y
        for slot in page.slots:
            cell_x = grid_left + slot.column * (grid.box_width + grid.column_gap)
            cell_y = grid_top + slot.row * (grid.cell_height + grid.row_gap)
            self._draw_slot(slot, grid, cell_x, cell_y)

        logger.debug(
            f"Drew photo page {page.index + 1} with {page.slot_count} photos "
            f"(page {self.cursor.page_index + 1})"
        )

    def _draw_slot(self, slot: PhotoSlot, grid: PhotoGridSpec, x_pt: float, y_top: float) -> None:
        decoded = decode_photo(self.photos, slot.photo)
        if decoded is None or not self._draw_image(decoded, slot, x_pt, y_top):
            self._draw_placeholder(slot, grid, x_pt, y_top)

        caption = self.model.caption_for(slot)
        self._draw_caption(caption, grid, x_pt, y_top + grid.box_height)
        self._draw_notes(caption, grid, x_pt, y_top + grid.box_height + grid.caption_height)

    def _draw_image(self, decoded: DecodedPhoto, slot: PhotoSlot, x_pt: float, y_top: float) -> bool:
        """Draw an image centered in the slot box. Returns False on failure."""
        width, height = slot.fit(decoded.pixel_size)
        box_width, box_height = slot.box
        left = x_pt + (box_width - width) / 2
        top = y_top + (box_height - height) / 2
        try:
            self.canvas.drawImage(
                ImageReader(decoded.stream()),
                left,
                self._pdf_y(top + height),
                width=width,
                height=height,
            )
        except (OSError, ValueError) as e:
            logger.warning(f"Photo {slot.number} ({slot.photo.id}) could not be drawn: {e}")
            return False
        return True

    def _draw_placeholder(self, slot: PhotoSlot, grid: PhotoGridSpec, x_pt: float, y_top: float) -> None:
        c = self.canvas
        c.saveState()
        c.setFillColor(LIGHT_GRAY)
        c.setStrokeColor(BORDER_GRAY)
        c.setLineWidth(0.5)
        c.rect(x_pt, self._pdf_y(y_top + grid.box_height), grid.box_width, grid.box_height, stroke=1, fill=1)
        c.setFillColor(TEXT_GRAY)
        c.setFont(FONT, PLACEHOLDER_FONT_SIZE)
        c.drawCentredString(
            x_pt + grid.box_width / 2,
            self._pdf_y(y_top + grid.box_height / 2),
            placeholder_text(slot.number),
        )
        c.restoreState()
        self.placeholders += 1

    def _draw_caption(self, caption: PhotoCaption, grid: PhotoGridSpec, x_pt: float, y_top: float) -> None:
        c = self.canvas
        c.saveState()
        c.setFillColor(NAVY)
        c.rect(x_pt, self._pdf_y(y_top + grid.caption_height), grid.box_width, grid.caption_height, stroke=0, fill=1)
        c.setFillColor(white)
        c.setFont(FONT_BOLD, CAPTION_FONT_SIZE)
        baseline = y_top + (grid.caption_height + CAPTION_FONT_SIZE) / 2 - 1
        c.drawString(
            x_pt + CAPTION_PADDING,
            self._pdf_y(baseline),
            _truncate(caption.caption, FONT_BOLD, CAPTION_FONT_SIZE, grid.box_width - 2 * CAPTION_PADDING),
        )
        c.restoreState()

    def _draw_notes(self, caption: PhotoCaption, grid: PhotoGridSpec, x_pt: float, y_top: float) -> None:
        """Draw note text, clipped to the lines that fit the notes area."""
        if not caption.notes:
            return
        max_lines = int(grid.notes_height // NOTES_LINE_HEIGHT)
        wrapped = simpleSplit(caption.notes, FONT, NOTES_FONT_SIZE, grid.box_width - 2 * CAPTION_PADDING)
        if len(wrapped) > max_lines:
            wrapped = wrapped[:max_lines]
            if wrapped:
                wrapped[-1] = _truncate(
                    wrapped[-1] + "...", FONT, NOTES_FONT_SIZE, grid.box_width - 2 * CAPTION_PADDING
                )

        c = self.canvas
        c.saveState()
        c.setFillColor(TEXT_GRAY)
        c.setFont(FONT, NOTES_FONT_SIZE)
        for index, text in enumerate(wrapped):
            baseline = y_top + NOTES_FONT_SIZE + 1 + index * NOTES_LINE_HEIGHT
            c.drawString(x_pt + CAPTION_PADDING, self._pdf_y(baseline), text)
        c.restoreState()


def _truncate(text: str, font: str, size: float, max_width: float) -> str:
    """Cut text with "..." so it fits max_width."""
    if stringWidth(text, font, size) <= max_width:
        return text
    ellipsis = "..."
    while text and stringWidth(text + ellipsis, font, size) > max_width:
        text = text[:-1]
    return text.rstrip() + ellipsis if text else ""
