"""
Module: builder.images.provider

Purpose:
    Abstract interface for accessing photo raster bytes.
    The repository is passed into each export call, so the rendering
    core holds no global photo store and tests can use in-memory data.

Key Classes:
    - PhotoRepository: Abstract base class for photo byte access
    - InMemoryPhotoRepository: Dict-backed provider
    - DirectoryPhotoRepository: One file per photo id in a folder
    - PhotoNotFoundError: Exception for missing photos

Used By:
    - builder.images.decoder
    - builder.controller: Injected by callers
    - visit_report.cli: Directory-backed exports
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

PHOTO_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tif", ".tiff", ".webp")


class PhotoNotFoundError(Exception):
    """Photo bytes not found."""
    pass


class PhotoRepository(ABC):
    """
    Abstract interface for accessing photo bytes.

    Implementations handle the actual storage. Bytes must already be in a
    common raster encoding (JPEG, PNG, ...); no format conversion happens
    here.
    """

    @abstractmethod
    def get_bytes(self, photo_id: str) -> bytes:
        """
        Get the encoded raster bytes for a photo.

        Args:
            photo_id: Photo identifier

        Returns:
            Encoded image bytes

        Raises:
            PhotoNotFoundError: If no bytes are stored for photo_id
        """

    @property
    @abstractmethod
    def available_ids(self) -> list[str]:
        """
        Get list of photo ids with stored bytes.

        Returns:
            List of ids that can be requested
        """


class InMemoryPhotoRepository(PhotoRepository):
    """
    Provider backed by a mapping of photo id to bytes.

    Example:
        >>> repo = InMemoryPhotoRepository({"p1": jpeg_bytes})
        >>> repo.get_bytes("p1") == jpeg_bytes
        True
    """

    def __init__(self, photos: Optional[Mapping[str, bytes]] = None) -> None:
        self._photos: Dict[str, bytes] = dict(photos or {})

    def get_bytes(self, photo_id: str) -> bytes:
        """Get bytes for a photo id."""
        data = self._photos.get(photo_id)
        if data is None:
            raise PhotoNotFoundError(f"No bytes for photo: {photo_id}")
        return data

    @property
    def available_ids(self) -> list[str]:
        """Get all stored ids."""
        return list(self._photos.keys())


class DirectoryPhotoRepository(PhotoRepository):
    """
    Provider that reads ``<root>/<photo_id>.<ext>`` files.

    Attributes:
        root: Folder holding the photo files

    Example:
        >>> repo = DirectoryPhotoRepository(Path("exports/visit-42/photos"))
        >>> data = repo.get_bytes("photo-1")
    """

    def __init__(
        self,
        root: Path,
        extensions: Iterable[str] = PHOTO_EXTENSIONS,
    ) -> None:
        self._root = Path(root)
        self._extensions = tuple(ext.lower() for ext in extensions)

    @property
    def root(self) -> Path:
        return self._root

    def get_bytes(self, photo_id: str) -> bytes:
        """Read bytes for a photo id from disk."""
        path = self._find(photo_id)
        if path is None:
            raise PhotoNotFoundError(f"No file for photo {photo_id} in {self._root}")
        return path.read_bytes()

    @property
    def available_ids(self) -> list[str]:
        """Get ids of all photo files in the folder."""
        if not self._root.is_dir():
            return []
        return sorted(
            p.stem for p in self._root.iterdir()
            if p.is_file() and p.suffix.lower() in self._extensions
        )

    def _find(self, photo_id: str) -> Optional[Path]:
        """Locate the file for photo_id, trying each known extension."""
        # Ids come from visit JSON; never let them escape the folder
        if not photo_id or Path(photo_id).name != photo_id:
            return None
        for ext in self._extensions:
            for candidate in (self._root / f"{photo_id}{ext}", self._root / f"{photo_id}{ext.upper()}"):
                if candidate.is_file():
                    return candidate
        return None
