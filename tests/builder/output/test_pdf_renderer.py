"""
Unit tests for the ReportLab PDF renderer.

Produced PDFs are read back with pypdf.
"""

import io
import logging
from unittest.mock import patch

import pytest

from reportlab.pdfbase.pdfmetrics import stringWidth

from visit_report.builder.images import InMemoryPhotoRepository
from visit_report.builder.layout import LayoutConfig
from visit_report.builder.output import PdfRenderer, RenderError, build_report_model
from visit_report.builder.output.pdf_renderer import BODY_FONT_SIZE, BULLET_INDENT, FONT, TEXT_INDENT
from visit_report.builder.config import ExportConfig
from visit_report.core.models import OutlineLine, Photo

try:
    from pypdf import PdfReader
    PYPDF_AVAILABLE = True
except ImportError:
    PYPDF_AVAILABLE = False

pytestmark = pytest.mark.skipif(not PYPDF_AVAILABLE, reason="pypdf not installed")


def _render(visit, photos=None, density=6, config=None) -> bytes:
    model = build_report_model(visit, density, config)
    return PdfRenderer().render(model, photos or InMemoryPhotoRepository())


def _page_texts(data: bytes) -> list[str]:
    reader = PdfReader(io.BytesIO(data))
    return [page.extract_text() for page in reader.pages]


def _text_positions(data: bytes, page_index: int = 0) -> list[tuple[float, str]]:
    """(x, text) for every drawn string on a page."""
    fragments = []

    def visitor(text, cm, tm, font_dict, font_size):
        if text.strip():
            fragments.append((tm[4] * cm[0] + tm[5] * cm[2] + cm[4], text.strip()))

    PdfReader(io.BytesIO(data)).pages[page_index].extract_text(visitor_text=visitor)
    return fragments


class TestPdfStructure:
    """Tests for page size, count and footers."""

    def test_render_returns_pdf_bytes(self, sample_visit):
        data = _render(sample_visit)

        assert data.startswith(b"%PDF-")

    def test_pages_are_us_letter(self, sample_visit):
        reader = PdfReader(io.BytesIO(_render(sample_visit)))

        for page in reader.pages:
            assert float(page.mediabox.width) == pytest.approx(612)
            assert float(page.mediabox.height) == pytest.approx(792)

    def test_no_photos_then_single_page_with_footer(self, sample_visit):
        texts = _page_texts(_render(sample_visit))

        assert len(texts) == 1
        assert "Page 1 of 1" in texts[0]
        assert "Site Photos" not in texts[0]

    def test_every_page_footer_shows_total(self, photo_visit, photo_repository):
        texts = _page_texts(_render(photo_visit, photo_repository, density=2))

        assert len(texts) == 3
        for number, text in enumerate(texts, start=1):
            assert f"Page {number} of 3" in text

    def test_brand_shown_in_footer(self, sample_visit):
        texts = _page_texts(_render(sample_visit, config=ExportConfig(brand_name="Acme Engineering")))

        assert texts[0].count("Acme Engineering") == 2


class TestPdfContent:
    """Tests for header block and outline sections."""

    def test_header_block_contains_identity(self, sample_visit):
        text = _page_texts(_render(sample_visit))[0]

        assert "Site Visit Report" in text
        for value in ("Acme Co", "Site 1", "P-100", "01/15/2024", "J. Smith"):
            assert value in text

    def test_outline_labels_drawn_with_text(self, sample_visit):
        text = _page_texts(_render(sample_visit))[0]

        assert "1. Crack in wall" in text
        assert "2. Leak detected" in text
        assert "a. Seal crack" in text
        assert "b. Check drainage" in text
        assert "minor" in text

    def test_no_raw_tab_in_output(self, visit_factory):
        visit = visit_factory(observations=(OutlineLine("\tstill tabbed?"), OutlineLine("x", True)))

        for text in _page_texts(_render(visit)):
            assert "\t" not in text

    def test_long_outline_breaks_pages_with_continued_heading(self, visit_factory):
        lines = tuple(OutlineLine(f"Observation number {i}") for i in range(1, 121))
        visit = visit_factory(observations=lines, followups=())

        texts = _page_texts(_render(visit))
        joined = "\n".join(texts)

        assert len(texts) > 1
        assert "2. Site Observations (continued)" in texts[1]
        assert "120. Observation number 120" in joined

    def test_long_wrapped_item_keeps_all_words(self, visit_factory):
        words = " ".join(f"word{i}" for i in range(80))
        visit = visit_factory(observations=(OutlineLine(words),))

        text = _page_texts(_render(visit))[0]

        assert "word0" in text
        assert "word79" in text

    def test_wrapped_lines_hang_under_text_start(self, visit_factory):
        numbered = " ".join(f"zeta{i}" for i in range(60))
        bulleted = " ".join(f"omega{i}" for i in range(60))
        observations = tuple(OutlineLine(f"Item {i}") for i in range(1, 10)) + (
            OutlineLine(numbered),
            OutlineLine(bulleted, is_bullet=True),
        )
        visit = visit_factory(observations=observations, followups=())
        margin = LayoutConfig().margin_left

        fragments = _text_positions(_render(visit))

        for marker, label, indent in (("zeta", "10.", TEXT_INDENT), ("omega", "•", BULLET_INDENT)):
            label_x = margin + indent
            text_x = label_x + stringWidth(f"{label} ", FONT, BODY_FONT_SIZE)
            lines = [(x, text) for x, text in fragments if marker in text]
            first = [x for x, text in lines if f"{marker}0 " in text]
            continuation = [x for x, text in lines if f"{marker}0 " not in text]

            assert first == [pytest.approx(label_x, abs=0.5)]
            assert continuation
            for x in continuation:
                assert x == pytest.approx(text_x, abs=0.5)
                assert x != pytest.approx(label_x, abs=0.5)

    def test_section_pushed_to_new_page_gets_no_stale_continued_heading(self, visit_factory):
        pushed = False
        for count in range(20, 60):
            visit = visit_factory(
                observations=tuple(OutlineLine(f"Finding {i}") for i in range(1, count + 1)),
                followups=(OutlineLine("Seal crack"),),
            )

            for text in _page_texts(_render(visit))[1:]:
                if "Site Observations (continued)" in text:
                    assert "Finding" in text
                if "Recommendations" in text and "Finding" not in text:
                    pushed = True
                    assert text.lstrip().startswith("3. Recommendations & Follow-up Actions")

        assert pushed


class TestPdfPhotos:
    """Tests for the photo section."""

    def test_photo_section_starts_on_new_page(self, photo_visit, photo_repository):
        texts = _page_texts(_render(photo_visit, photo_repository))

        assert "Site Photos" not in texts[0]
        assert "Site Photos" in texts[1]
        assert "Photo 1: North wall" in texts[1]

    def test_failed_photo_placeholder_appears_once(self, photo_visit, photo_repository, caplog):
        with caplog.at_level(logging.WARNING):
            texts = _page_texts(_render(photo_visit, photo_repository))

        joined = "\n".join(texts)
        assert joined.count("[Photo 2 failed to load]") == 1
        assert "[Photo 1 failed to load]" not in joined
        assert "[Photo 3 failed to load]" not in joined
        assert "p2" in caplog.text

    def test_all_photos_fail_then_still_renders(self, photo_visit):
        texts = _page_texts(_render(photo_visit, InMemoryPhotoRepository()))

        joined = "\n".join(texts)
        for number in (1, 2, 3):
            assert f"[Photo {number} failed to load]" in joined

    def test_seven_photos_density_two_continued_headings(self, visit_factory, jpeg_bytes):
        photos = tuple(Photo(f"p{i}", description=f"View {i}") for i in range(1, 8))
        repo = InMemoryPhotoRepository({p.id: jpeg_bytes for p in photos})

        texts = _page_texts(_render(visit_factory(photos=photos), repo, density=2))

        assert len(texts) == 5
        assert "Site Photos (continued)" not in texts[1]
        for text in texts[2:]:
            assert "Site Photos (continued)" in text
        assert "Photo 7: View 7" in texts[4]

    def test_images_embedded(self, photo_visit, jpeg_factory):
        repo = InMemoryPhotoRepository({"p1": jpeg_factory(color="red"), "p3": jpeg_factory(color="green")})

        reader = PdfReader(io.BytesIO(_render(photo_visit, repo)))

        assert len(reader.pages[1].images) == 2

    def test_notes_shown_under_caption(self, photo_visit, photo_repository):
        text = _page_texts(_render(photo_visit, photo_repository))[1]

        assert "Hairline crack Near window" in text


class TestPdfErrors:
    """Tests for fatal failures."""

    def test_save_failure_raises_render_error(self, sample_visit):
        with patch("reportlab.pdfgen.canvas.Canvas.save", side_effect=OSError("disk full")):
            with pytest.raises(RenderError, match="disk full"):
                _render(sample_visit)

    def test_render_does_not_modify_visit(self, photo_visit, photo_repository):
        before = photo_visit.to_dict()

        _render(photo_visit, photo_repository)

        assert photo_visit.to_dict() == before
