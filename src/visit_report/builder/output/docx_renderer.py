"""
Module: builder.output.docx_renderer

Purpose:
    Render a ReportModel to a Word document using python-docx.
    Content is described as a tree (paragraphs, runs, tables, images);
    the word processor does its own pagination. Outline sections use
    native list numbering configured so the displayed labels equal the
    labels resolved for the PDF.

Key Classes:
    - DocxRenderer: ReportRenderer for DOCX

Dependencies:
    - python-docx: Document tree, numbering part, OXML helpers
    - builder.images: Photo decoding

Used By:
    - builder.controller: Renderer registry
"""

from __future__ import annotations

import io
import logging
from typing import Dict, Optional

from docx import Document
from docx.enum.table import WD_ROW_HEIGHT_RULE, WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.image.exceptions import UnrecognizedImageError
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from ..images import PhotoRepository, decode_photo, placeholder_text
from ..layout import PhotoGridSpec, PhotoPage, PhotoSlot
from ..numbering import BULLET_GLYPH, LabelScheme
from .base import ExportFormat, RenderError, ReportRenderer
from .report_model import ReportModel, ReportSection

logger = logging.getLogger(__name__)

# Palette (hex for OXML, RGBColor for runs)
NAVY_HEX = "172554"
LIGHT_GRAY_HEX = "F5F5F5"
BORDER_GRAY_HEX = "C8C8C8"
NAVY = RGBColor(0x17, 0x25, 0x54)
TEXT_GRAY = RGBColor(0x50, 0x50, 0x50)
FOOTER_GRAY = RGBColor(0x80, 0x80, 0x80)
WHITE = RGBColor(0xFF, 0xFF, 0xFF)

FONT_NAME = "Arial"
BODY_SIZE = Pt(11)
TITLE_SIZE = Pt(22)
BRAND_SIZE = Pt(10)
INFO_SIZE = Pt(10)
HEADING_SIZE = Pt(14)
CAPTION_SIZE = Pt(9)
NOTES_SIZE = Pt(9)
FOOTER_SIZE = Pt(8)

# List indents in twentieths of a point
NUMBER_INDENT_TWIPS = 720
BULLET_INDENT_TWIPS = 1080
HANGING_TWIPS = 360
TEXT_INDENT = Pt(10)

NUMBER_FORMATS = {
    LabelScheme.DECIMAL: "decimal",
    LabelScheme.LOWER_ALPHA: "lowerLetter",
    LabelScheme.UPPER_ALPHA: "upperLetter",
    LabelScheme.LOWER_ROMAN: "lowerRoman",
    LabelScheme.UPPER_ROMAN: "upperRoman",
}

# Schema order of w:pPr / w:tcPr / w:tblPr children that follow the
# element being inserted
_PPR_AFTER_SHD = (
    "w:tabs", "w:suppressAutoHyphens", "w:kinsoku", "w:wordWrap",
    "w:overflowPunct", "w:topLinePunct", "w:autoSpaceDE", "w:autoSpaceDN",
    "w:bidi", "w:adjustRightInd", "w:snapToGrid", "w:spacing", "w:ind",
    "w:contextualSpacing", "w:mirrorIndents", "w:suppressOverlap", "w:jc",
    "w:textDirection", "w:textAlignment", "w:textboxTightWrap",
    "w:outlineLvl", "w:divId", "w:cnfStyle", "w:rPr", "w:sectPr",
    "w:pPrChange",
)
_PPR_AFTER_PBDR = ("w:shd",) + _PPR_AFTER_SHD
_TCPR_AFTER_SHD = (
    "w:noWrap", "w:tcMar", "w:textDirection", "w:tcFitText", "w:vAlign",
    "w:hideMark", "w:headers", "w:cellIns", "w:cellDel", "w:cellMerge",
    "w:tcPrChange",
)
_TBLPR_AFTER_BORDERS = (
    "w:shd", "w:tblLayout", "w:tblCellMar", "w:tblLook", "w:tblCaption",
    "w:tblDescription", "w:tblPrChange",
)
_BORDER_EDGES = ("top", "left", "bottom", "right", "insideH", "insideV")


class DocxRenderer(ReportRenderer):
    """
    ReportRenderer producing DOCX bytes.

    Example:
        >>> data = DocxRenderer().render(model, repository)
        >>> data[:2]
        b'PK'
    """

    format = ExportFormat.DOCX

    def render(self, model: ReportModel, photos: PhotoRepository) -> bytes:
        """Render model to DOCX bytes."""
        return _DocxDocument(model, photos).build()


class _DocxDocument:
    """State for rendering one DOCX (never shared between calls)."""

    def __init__(self, model: ReportModel, photos: PhotoRepository) -> None:
        self.model = model
        self.photos = photos
        self.layout = model.layout
        self.doc = Document()
        self.placeholders = 0
        self._abstract_ids: Dict[str, int] = {}

    def build(self) -> bytes:
        self._setup_page()
        self._setup_footer()
        self._add_title()
        self._add_identity_table()

        for section in self.model.sections:
            self._add_section(section)

        if self.model.has_photos:
            for page in self.model.photo_layout.pages:
                self._add_photo_page(page)

        core = self.doc.core_properties
        core.title = self.model.title
        if self.model.brand_name:
            core.author = self.model.brand_name

        buf = io.BytesIO()
        try:
            self.doc.save(buf)
        except Exception as e:
            logger.error(f"Failed to serialize DOCX: {e}")
            raise RenderError(f"Failed to serialize DOCX: {e}") from e

        data = buf.getvalue()
        logger.info(
            f"Rendered DOCX: {len(self.model.sections)} sections, "
            f"{self.model.photo_layout.page_count} photo pages, {len(data)} bytes, "
            f"{self.placeholders} photo placeholders"
        )
        return data

    # ------------------------------------------------------------------
    # Page setup
    # ------------------------------------------------------------------

    def _setup_page(self) -> None:
        """Configure page size, margins, and the default font."""
        section = self.doc.sections[0]
        layout = self.layout
        section.page_width = Pt(layout.page_width)
        section.page_height = Pt(layout.page_height)
        section.top_margin = Pt(layout.margin_top)
        section.bottom_margin = Pt(layout.margin_bottom)
        section.left_margin = Pt(layout.margin_left)
        section.right_margin = Pt(layout.margin_right)
        section.footer_distance = Pt(layout.margin_bottom / 2)

        normal = self.doc.styles["Normal"]
        normal.font.name = FONT_NAME
        normal.font.size = BODY_SIZE

    def _setup_footer(self) -> None:
        """Footer: "Page X of Y" from native fields, brand right-aligned below."""
        footer = self.doc.sections[0].footer
        para = footer.paragraphs[0] if footer.paragraphs else footer.add_paragraph()
        para.alignment = WD_ALIGN_PARAGRAPH.CENTER

        self._add_footer_text(para, "Page ")
        _add_field(para, "PAGE", FOOTER_SIZE, FOOTER_GRAY)
        self._add_footer_text(para, " of ")
        _add_field(para, "NUMPAGES", FOOTER_SIZE, FOOTER_GRAY)

        if self.model.brand_name:
            brand = footer.add_paragraph()
            brand.alignment = WD_ALIGN_PARAGRAPH.RIGHT
            self._add_footer_text(brand, self.model.brand_name)

    @staticmethod
    def _add_footer_text(paragraph, text: str) -> None:
        run = paragraph.add_run(text)
        run.font.size = FOOTER_SIZE
        run.font.color.rgb = FOOTER_GRAY

    # ------------------------------------------------------------------
    # Header block
    # ------------------------------------------------------------------

    def _add_title(self) -> None:
        para = self.doc.add_paragraph()
        run = para.add_run(self.model.title)
        run.bold = True
        run.font.size = TITLE_SIZE
        run.font.color.rgb = WHITE
        _shade_paragraph(para, NAVY_HEX)
        para.paragraph_format.space_after = Pt(0)

        if self.model.brand_name:
            brand = self.doc.add_paragraph()
            brand.alignment = WD_ALIGN_PARAGRAPH.RIGHT
            brand_run = brand.add_run(self.model.brand_name)
            brand_run.font.size = BRAND_SIZE
            brand_run.font.color.rgb = WHITE
            _shade_paragraph(brand, NAVY_HEX)
            para = brand

        para.paragraph_format.space_after = Pt(20)

    def _add_identity_table(self) -> None:
        """Grey 3x2 table: Client/Date, Site/Prepared by, Project No./blank."""
        identity = self.model.identity
        left, right = identity[:3], identity[3:]
        table = self.doc.add_table(rows=len(left), cols=2)
        table.alignment = WD_TABLE_ALIGNMENT.CENTER
        _set_table_borders(table, "single", BORDER_GRAY_HEX)

        for row_index, row in enumerate(table.rows):
            for column, fields in enumerate((left, right)):
                cell = row.cells[column]
                _shade_cell(cell, LIGHT_GRAY_HEX)
                if row_index >= len(fields):
                    continue
                item = fields[row_index]
                para = cell.paragraphs[0]
                label = para.add_run(f"{item.label}: ")
                label.bold = True
                label.font.size = INFO_SIZE
                value = para.add_run(item.value)
                value.font.size = INFO_SIZE

        spacer = self.doc.add_paragraph()
        spacer.paragraph_format.space_after = Pt(12)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _add_heading(self, text: str, page_break: bool = False):
        para = self.doc.add_paragraph()
        run = para.add_run(text)
        run.bold = True
        run.font.size = HEADING_SIZE
        run.font.color.rgb = NAVY
        fmt = para.paragraph_format
        fmt.keep_with_next = True
        fmt.page_break_before = page_break
        fmt.space_after = Pt(12)
        _add_bottom_border(para, NAVY_HEX)
        return para

    def _add_section(self, section: ReportSection) -> None:
        self._add_heading(section.heading)

        if not section.is_outline:
            para = self.doc.add_paragraph()
            para.paragraph_format.left_indent = TEXT_INDENT
            para.paragraph_format.space_after = Pt(18)
            for index, line in enumerate(section.paragraph_lines):
                run = para.add_run(line)
                if index < len(section.paragraph_lines) - 1:
                    run.add_break()
            return

        number_id = self._list_num(section)
        bullet_id = self._bullet_num() if any(line.is_bullet for line in section.lines) else None

        for line in section.lines:
            para = self.doc.add_paragraph()
            para.paragraph_format.space_after = Pt(5)
            para.add_run(line.text)
            if line.is_bullet:
                _set_numbering(para, bullet_id)
            elif number_id is not None:
                _set_numbering(para, number_id)
            else:
                para.paragraph_format.left_indent = TEXT_INDENT

        self.doc.paragraphs[-1].paragraph_format.space_after = Pt(18)
        logger.debug(f"Added section '{section.heading}' with {len(section.lines)} lines")

    # ------------------------------------------------------------------
    # Native numbering
    # ------------------------------------------------------------------

    def _list_num(self, section: ReportSection) -> Optional[int]:
        """
        Create a numbering instance for a section's non-bullet lines.

        The instance restarts at the first resolved ordinal, so Word's
        counter walks the same ordinals the resolver assigned.
        """
        num_format = NUMBER_FORMATS.get(section.scheme)
        ordinals = [line.ordinal for line in section.lines if not line.is_bullet]
        if num_format is None or not ordinals:
            return None

        start = ordinals[0]
        if ordinals != list(range(start, start + len(ordinals))):
            raise RenderError(f"Outline ordinals of '{section.heading}' are not consecutive")

        abstract_id = self._abstract_num(num_format, "%1.", NUMBER_INDENT_TWIPS)
        return self._add_num(abstract_id, start)

    def _bullet_num(self) -> int:
        abstract_id = self._abstract_num("bullet", BULLET_GLYPH, BULLET_INDENT_TWIPS)
        return self._add_num(abstract_id, None)

    def _abstract_num(self, num_format: str, level_text: str, indent_twips: int) -> int:
        """Get or create a single-level abstract numbering definition."""
        key = f"{num_format}:{level_text}"
        if key in self._abstract_ids:
            return self._abstract_ids[key]

        numbering = self.doc.part.numbering_part.element
        existing = [int(v) for v in numbering.xpath("./w:abstractNum/@w:abstractNumId")]
        abstract_id = max(existing, default=-1) + 1

        abstract = OxmlElement("w:abstractNum")
        abstract.set(qn("w:abstractNumId"), str(abstract_id))
        abstract.append(_element("w:multiLevelType", val="singleLevel"))

        level = OxmlElement("w:lvl")
        level.set(qn("w:ilvl"), "0")
        level.append(_element("w:start", val="1"))
        level.append(_element("w:numFmt", val=num_format))
        level.append(_element("w:lvlText", val=level_text))
        level.append(_element("w:lvlJc", val="left"))
        ppr = OxmlElement("w:pPr")
        ppr.append(_element("w:ind", left=str(indent_twips), hanging=str(HANGING_TWIPS)))
        level.append(ppr)
        abstract.append(level)

        # abstractNum definitions precede every w:num
        first_num = numbering.find(qn("w:num"))
        if first_num is not None:
            first_num.addprevious(abstract)
        else:
            numbering.append(abstract)

        self._abstract_ids[key] = abstract_id
        return abstract_id

    def _add_num(self, abstract_id: int, start: Optional[int]) -> int:
        """Add a w:num instance (optionally restarting at ``start``)."""
        numbering = self.doc.part.numbering_part.element
        existing = [int(v) for v in numbering.xpath("./w:num/@w:numId")]
        num_id = max(existing, default=0) + 1

        num = OxmlElement("w:num")
        num.set(qn("w:numId"), str(num_id))
        num.append(_element("w:abstractNumId", val=str(abstract_id)))
        if start is not None:
            override = OxmlElement("w:lvlOverride")
            override.set(qn("w:ilvl"), "0")
            override.append(_element("w:startOverride", val=str(start)))
            num.append(override)

        cleanup = numbering.find(qn("w:numIdMacAtCleanup"))
        if cleanup is not None:
            cleanup.addprevious(num)
        else:
            numbering.append(num)
        return num_id

    # ------------------------------------------------------------------
    # Photos
    # ------------------------------------------------------------------

    def _add_photo_page(self, page: PhotoPage) -> None:
        """One heading (page break before) and one borderless table per photo page."""
        grid = self.layout.grid_for(self.model.photo_layout.density)
        self._add_heading(self.model.photo_heading(page.continued), page_break=True)

        # image / caption / notes / spacer per grid row
        table = self.doc.add_table(rows=page.row_count * 4, cols=grid.columns)
        table.alignment = WD_TABLE_ALIGNMENT.CENTER
        table.autofit = False
        _set_table_borders(table, "nil")

        for row_index in range(page.row_count):
            base = row_index * 4
            _set_row_height(table.rows[base], grid.box_height)
            _set_row_height(table.rows[base + 1], grid.caption_height)
            _set_row_height(table.rows[base + 2], grid.notes_height)
            _set_row_height(table.rows[base + 3], grid.row_gap)

        for column in table.columns:
            for cell in column.cells:
                cell.width = Pt(grid.box_width)

        for slot in page.slots:
            self._add_slot(table, slot, grid)

        logger.debug(f"Added photo page {page.index + 1} with {page.slot_count} photos")

    def _add_slot(self, table, slot: PhotoSlot, grid: PhotoGridSpec) -> None:
        base = slot.row * 4
        image_cell = table.cell(base, slot.column)
        caption_cell = table.cell(base + 1, slot.column)
        notes_cell = table.cell(base + 2, slot.column)

        image_para = image_cell.paragraphs[0]
        image_para.alignment = WD_ALIGN_PARAGRAPH.CENTER
        if not self._add_image(image_para, slot):
            run = image_para.add_run(placeholder_text(slot.number))
            run.font.size = INFO_SIZE
            run.font.color.rgb = TEXT_GRAY
            _shade_cell(image_cell, LIGHT_GRAY_HEX)
            self.placeholders += 1

        caption = self.model.caption_for(slot)
        _shade_cell(caption_cell, NAVY_HEX)
        caption_run = caption_cell.paragraphs[0].add_run(caption.caption)
        caption_run.bold = True
        caption_run.font.size = CAPTION_SIZE
        caption_run.font.color.rgb = WHITE

        if caption.notes:
            notes_run = notes_cell.paragraphs[0].add_run(caption.notes)
            notes_run.font.size = NOTES_SIZE
            notes_run.font.color.rgb = TEXT_GRAY

    def _add_image(self, paragraph, slot: PhotoSlot) -> bool:
        """Add the fitted photo to paragraph. Returns False on failure."""
        decoded = decode_photo(self.photos, slot.photo)
        if decoded is None:
            return False
        width, height = slot.fit(decoded.pixel_size)
        try:
            paragraph.add_run().add_picture(decoded.stream(), width=Pt(width), height=Pt(height))
        except (UnrecognizedImageError, OSError, ValueError) as e:
            logger.warning(f"Photo {slot.number} ({slot.photo.id}) could not be added: {e}")
            return False
        return True


def _element(tag: str, **attrs: str):
    """OxmlElement with w:-namespaced attributes."""
    el = OxmlElement(tag)
    for name, value in attrs.items():
        el.set(qn(f"w:{name}"), value)
    return el


def _add_field(paragraph, instruction: str, size, color) -> None:
    """Add a complex field (PAGE, NUMPAGES) to paragraph."""
    begin = paragraph.add_run()
    begin._r.append(_element("w:fldChar", fldCharType="begin"))

    instr_run = paragraph.add_run()
    instr = OxmlElement("w:instrText")
    instr.set(qn("xml:space"), "preserve")
    instr.text = instruction
    instr_run._r.append(instr)

    separate = paragraph.add_run()
    separate._r.append(_element("w:fldChar", fldCharType="separate"))

    # Shown until the field updates
    value = paragraph.add_run("1")
    value.font.size = size
    value.font.color.rgb = color

    end = paragraph.add_run()
    end._r.append(_element("w:fldChar", fldCharType="end"))


def _set_numbering(paragraph, num_id: int) -> None:
    numPr = paragraph._p.get_or_add_pPr().get_or_add_numPr()
    numPr.get_or_add_ilvl().val = 0
    numPr.get_or_add_numId().val = num_id


def _shade_paragraph(paragraph, fill: str) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    pPr.insert_element_before(
        _element("w:shd", val="clear", color="auto", fill=fill),
        *_PPR_AFTER_SHD,
    )


def _add_bottom_border(paragraph, color: str) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    pBdr = OxmlElement("w:pBdr")
    pBdr.append(_element("w:bottom", val="single", sz="6", space="1", color=color))
    pPr.insert_element_before(pBdr, *_PPR_AFTER_PBDR)


def _shade_cell(cell, fill: str) -> None:
    tcPr = cell._tc.get_or_add_tcPr()
    tcPr.insert_element_before(
        _element("w:shd", val="clear", color="auto", fill=fill),
        *_TCPR_AFTER_SHD,
    )


def _set_table_borders(table, style: str, color: str = "auto") -> None:
    """Set all outer and inner borders ("nil" for borderless)."""
    borders = OxmlElement("w:tblBorders")
    for edge in _BORDER_EDGES:
        if style == "nil":
            borders.append(_element(f"w:{edge}", val="nil"))
        else:
            borders.append(_element(f"w:{edge}", val=style, sz="4", space="0", color=color))
    table._tbl.tblPr.insert_element_before(borders, *_TBLPR_AFTER_BORDERS)


def _set_row_height(row, height_pt: float) -> None:
    row.height = Pt(height_pt)
    row.height_rule = WD_ROW_HEIGHT_RULE.AT_LEAST
