"""
Module: builder.images

Purpose:
    Photo access abstractions for report export.
    Provides the injected photo repository and the decoding step shared
    by both renderers.

Key Classes:
    - PhotoRepository: Abstract interface for photo bytes
    - InMemoryPhotoRepository / DirectoryPhotoRepository
    - DecodedPhoto: Embed-ready image

Key Functions:
    - decode_photo(): Fetch and decode, None on failure
    - placeholder_text(): "[Photo N failed to load]"
"""

from .provider import (
    PhotoRepository,
    InMemoryPhotoRepository,
    DirectoryPhotoRepository,
    PhotoNotFoundError,
)
from .decoder import DecodedPhoto, decode_photo, placeholder_text

__all__ = [
    "PhotoRepository",
    "InMemoryPhotoRepository",
    "DirectoryPhotoRepository",
    "PhotoNotFoundError",
    "DecodedPhoto",
    "decode_photo",
    "placeholder_text",
]
