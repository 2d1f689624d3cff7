"""
Unit tests for photo decoding.
"""

import io
import logging

from PIL import Image

from visit_report.builder.images import (
    InMemoryPhotoRepository,
    decode_photo,
    placeholder_text,
)
from visit_report.core.models import Photo


def _exif_rotated_jpeg(width: int, height: int) -> bytes:
    """JPEG whose EXIF orientation says 'rotate 90' (tag 0x0112 = 6)."""
    img = Image.new("RGB", (width, height), color="red")
    exif = Image.Exif()
    exif[0x0112] = 6
    buf = io.BytesIO()
    img.save(buf, format="JPEG", exif=exif)
    return buf.getvalue()


class TestDecodePhoto:
    """Tests for decode_photo."""

    def test_decode_when_valid_jpeg_then_pixel_size(self, jpeg_bytes):
        repo = InMemoryPhotoRepository({"p1": jpeg_bytes})

        decoded = decode_photo(repo, Photo("p1"))

        assert decoded is not None
        assert decoded.pixel_size == (400, 300)
        assert decoded.data[:2] == b"\xff\xd8"

    def test_decode_when_png_with_alpha_then_rgb_jpeg(self):
        buf = io.BytesIO()
        Image.new("RGBA", (50, 20), color=(0, 0, 255, 128)).save(buf, format="PNG")
        repo = InMemoryPhotoRepository({"p1": buf.getvalue()})

        decoded = decode_photo(repo, Photo("p1"))

        with Image.open(decoded.stream()) as img:
            assert img.mode == "RGB"
            assert img.format == "JPEG"

    def test_decode_when_exif_orientation_then_transposed(self):
        repo = InMemoryPhotoRepository({"p1": _exif_rotated_jpeg(400, 300)})

        decoded = decode_photo(repo, Photo("p1"))

        assert decoded.pixel_size == (300, 400)

    def test_decode_when_missing_then_none_and_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            decoded = decode_photo(InMemoryPhotoRepository(), Photo("p1"))

        assert decoded is None
        assert "p1" in caplog.text

    def test_decode_when_garbage_then_none(self):
        repo = InMemoryPhotoRepository({"p1": b"definitely not an image"})

        assert decode_photo(repo, Photo("p1")) is None

    def test_decode_when_truncated_then_none(self, jpeg_bytes):
        repo = InMemoryPhotoRepository({"p1": jpeg_bytes[: len(jpeg_bytes) // 3]})

        assert decode_photo(repo, Photo("p1")) is None


def test_placeholder_text():
    assert placeholder_text(4) == "[Photo 4 failed to load]"
