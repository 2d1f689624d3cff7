import io
import sys
from datetime import date
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import visit_report
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from visit_report.builder.images import InMemoryPhotoRepository
from visit_report.core.models import OutlineLine, Photo, Visit


def make_jpeg(width: int = 400, height: int = 300, color: str = "steelblue") -> bytes:
    """Encode a solid-color JPEG."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=color).save(buf, format="JPEG")
    return buf.getvalue()


def make_visit(**overrides) -> Visit:
    """Build a complete visit; keyword arguments replace fields."""
    fields = dict(
        id="visit-1",
        client_name="Acme Co",
        site_name="Site 1",
        project_no="P-100",
        visit_date=date(2024, 1, 15),
        prepared_by="J. Smith",
        background="Quarterly inspection of the north building.",
        observations=(
            OutlineLine("Crack in wall"),
            OutlineLine("minor", is_bullet=True),
            OutlineLine("Leak detected"),
        ),
        followups=(
            OutlineLine("Seal crack"),
            OutlineLine("Check drainage"),
        ),
        photos=(),
    )
    fields.update(overrides)
    return Visit(**fields)


# Common test fixtures
@pytest.fixture
def jpeg_bytes():
    """A 400x300 JPEG."""
    return make_jpeg()


@pytest.fixture
def sample_visit():
    """Visit with background, observations and follow-ups but no photos."""
    return make_visit()


@pytest.fixture
def photo_visit():
    """Visit with three photos, the second of which has no stored bytes."""
    photos = (
        Photo("p1", description="North wall", notes="Hairline crack\nNear window"),
        Photo("p2", description="Roof drain"),
        Photo("p3", description="Basement", notes="Damp"),
    )
    return make_visit(photos=photos)


@pytest.fixture
def photo_repository(jpeg_bytes):
    """Repository with bytes for p1 and p3 only."""
    return InMemoryPhotoRepository({"p1": jpeg_bytes, "p3": jpeg_bytes})


@pytest.fixture
def visit_factory():
    """make_visit, for tests that need variations."""
    return make_visit


@pytest.fixture
def jpeg_factory():
    """make_jpeg, for tests that need other sizes."""
    return make_jpeg
