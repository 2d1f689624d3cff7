"""
Module: builder.images.decoder

Purpose:
    Decode a photo's raster bytes for embedding. A photo that cannot be
    fetched or decoded yields None so the caller can draw a placeholder;
    one bad photo never stops an export.

Key Functions:
    - decode_photo(): Fetch + decode + re-encode for embedding
    - placeholder_text(): Text shown instead of a failed photo

Dependencies:
    - PIL: Decoding, EXIF orientation, re-encoding

Used By:
    - builder.output.pdf_renderer
    - builder.output.docx_renderer
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from visit_report.core.models import Photo

from .provider import PhotoNotFoundError, PhotoRepository

logger = logging.getLogger(__name__)

EMBED_FORMAT = "JPEG"
EMBED_QUALITY = 90


@dataclass(frozen=True)
class DecodedPhoto:
    """
    Photo ready to embed.

    Attributes:
        data: JPEG bytes (RGB, orientation applied)
        pixel_size: (width, height) in pixels after orientation
    """

    data: bytes
    pixel_size: Tuple[int, int]

    def stream(self) -> io.BytesIO:
        """Fresh file-like view of the bytes."""
        return io.BytesIO(self.data)


def placeholder_text(number: int) -> str:
    """Text drawn in place of photo ``number`` when it fails to load."""
    return f"[Photo {number} failed to load]"


def decode_photo(repository: PhotoRepository, photo: Photo) -> Optional[DecodedPhoto]:
    """
    Fetch and decode one photo.

    Args:
        repository: Source of raster bytes
        photo: Photo to decode

    Returns:
        DecodedPhoto, or None if the bytes are missing or undecodable
    """
    try:
        raw = repository.get_bytes(photo.id)
    except PhotoNotFoundError as e:
        logger.warning(f"Photo {photo.id} unavailable: {e}")
        return None

    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.load()
            oriented = ImageOps.exif_transpose(img)
            rgb = oriented.convert("RGB")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        logger.warning(f"Photo {photo.id} failed to decode: {e}")
        return None

    buf = io.BytesIO()
    rgb.save(buf, format=EMBED_FORMAT, quality=EMBED_QUALITY)
    logger.debug(f"Decoded photo {photo.id} ({rgb.width}x{rgb.height})")
    return DecodedPhoto(data=buf.getvalue(), pixel_size=rgb.size)
