"""
End-to-end checks that PDF and DOCX exports of one visit agree.

Both documents are produced through export_document() and read back
(pypdf for PDF, python-docx for DOCX).
"""

import io

import pytest
from docx import Document

from visit_report.builder import ExportFormat, build_report_model, export_document
from visit_report.builder.config import ExportConfig
from visit_report.builder.images import DirectoryPhotoRepository
from visit_report.builder.numbering import LabelScheme, NumberingConfig
from visit_report.core.models import OutlineLine, Photo
from visit_report.core.utils import deserialize_visit

try:
    from pypdf import PdfReader
    PYPDF_AVAILABLE = True
except ImportError:
    PYPDF_AVAILABLE = False

pytestmark = pytest.mark.skipif(not PYPDF_AVAILABLE, reason="pypdf not installed")


def _export_both(visit, photos, density=6, config=None):
    pdf = export_document(visit, ExportFormat.PDF, density, photos=photos, config=config)
    docx = export_document(visit, ExportFormat.DOCX, density, photos=photos, config=config)
    pdf_text = "\n".join(
        page.extract_text() for page in PdfReader(io.BytesIO(pdf.data)).pages
    )
    return pdf, docx, pdf_text, Document(io.BytesIO(docx.data))


def _docx_texts(doc):
    texts = [p.text for p in doc.paragraphs]
    texts += [cell.text for table in doc.tables for row in table.rows for cell in row.cells]
    return texts


@pytest.fixture
def long_visit(visit_factory):
    """Visit whose observations run past z and whose photos fill two pages."""
    observations = []
    for i in range(28):
        observations.append(OutlineLine(f"Finding number {i + 1}"))
        if i % 10 == 0:
            observations.append(OutlineLine(f"detail {i + 1}", is_bullet=True))
    photos = tuple(Photo(f"p{i}", description=f"View {i}") for i in range(1, 9))
    return visit_factory(observations=tuple(observations), photos=photos)


def test_same_headings_and_lines(long_visit, photo_repository):
    config = ExportConfig(numbering=NumberingConfig(observations=LabelScheme.LOWER_ALPHA))
    _, _, pdf_text, doc = _export_both(long_visit, photo_repository, config=config)
    docx_texts = _docx_texts(doc)
    model = build_report_model(long_visit, 6, config)

    for section in model.sections:
        assert section.heading in pdf_text
        assert section.heading in docx_texts
        for line in section.lines:
            assert line.text in docx_texts
            if not line.is_bullet:
                assert line.display_text in pdf_text

    # Ordinal 27 repeats the letter, which is how native lowerLetter counts
    assert "aa. Finding number 27" in pdf_text
    assert "bb. Finding number 28" in pdf_text


def test_same_photo_pages(long_visit, photo_repository):
    pdf, docx, pdf_text, doc = _export_both(long_visit, photo_repository)

    assert pdf.photo_page_count == docx.photo_page_count == 2
    assert "Site Photos (continued)" in pdf_text
    assert "Site Photos (continued)" in _docx_texts(doc)
    # Identity table plus one table per photo page
    assert len(doc.tables) == 3


def test_same_placeholders(long_visit, photo_repository):
    _, _, pdf_text, doc = _export_both(long_visit, photo_repository)
    docx_texts = _docx_texts(doc)

    # Only p1 and p3 have bytes in the repository
    for number in (2, 4, 5, 6, 7, 8):
        placeholder = f"[Photo {number} failed to load]"
        assert placeholder in pdf_text
        assert docx_texts.count(placeholder) == 1
    assert "[Photo 1 failed to load]" not in pdf_text
    assert "[Photo 3 failed to load]" not in pdf_text


def test_same_captions(photo_visit, photo_repository):
    _, _, pdf_text, doc = _export_both(photo_visit, photo_repository, density=2)
    docx_texts = _docx_texts(doc)

    for caption in ("Photo 1: North wall", "Photo 2: Roof drain", "Photo 3: Basement"):
        assert caption in pdf_text
        assert caption in docx_texts


def test_stored_visit_round_trip(tmp_path):
    """A visit stored with a tab-prefixed bullet renders the same in both formats."""
    visit = deserialize_visit({
        "id": "v-a",
        "clientName": "Acme",
        "siteName": "Plant 1",
        "projectNo": "P-100",
        "visitDate": "2024-01-15",
        "preparedBy": "J. Smith",
        "observations": "Crack in wall\n\tminor\nLeak detected",
        "photos": [],
    })
    pdf, docx, pdf_text, doc = _export_both(visit, DirectoryPhotoRepository(tmp_path))

    for expected in ("1. Crack in wall", "• minor", "2. Leak detected"):
        assert expected in pdf_text
    assert "Site Photos" not in pdf_text
    assert pdf.photo_page_count == docx.photo_page_count == 0

    texts = [p.text for p in doc.paragraphs]
    assert ["Crack in wall", "minor", "Leak detected"] == [
        t for t in texts if t in ("Crack in wall", "minor", "Leak detected")
    ]
    assert not any("\t" in t for t in texts)
    assert "\tminor" not in pdf_text
    assert len(doc.tables) == 1
