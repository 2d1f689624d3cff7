"""
Module: photos

Purpose:
    Provides the Photo dataclass. A photo carries its caption text and,
    optionally, its pixel dimensions. The raster bytes themselves are not
    part of the model; they are fetched by id through a PhotoRepository
    at export time.

Dependencies:
    - dataclasses (std)

Used By:
    - core.models.visit.Visit
    - builder.layout.planner
    - builder.images.decoder
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Aspect ratio assumed when a photo's pixel size is unknown
DEFAULT_ASPECT_RATIO = 4 / 3


@dataclass(frozen=True, slots=True)
class Photo:
    """
    Photo reference (immutable).

    Attributes:
        id: Key used to look up raster bytes in a PhotoRepository
        description: Short caption text
        notes: Free-text notes shown under the caption
        width: Known pixel width, if any
        height: Known pixel height, if any

    Example:
        >>> Photo(id="p1").aspect_ratio
        1.3333333333333333
    """

    id: str
    description: str = ""
    notes: str = ""
    width: Optional[int] = None
    height: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate photo on construction."""
        if not self.id:
            raise ValueError("Photo id cannot be empty")
        for name in ("width", "height"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"Photo {name} must be positive: {value}")

    @property
    def has_known_size(self) -> bool:
        """True if both pixel dimensions are known."""
        return self.width is not None and self.height is not None

    @property
    def aspect_ratio(self) -> float:
        """Width / height, falling back to 4:3 when the size is unknown."""
        if self.has_known_size:
            return self.width / self.height
        return DEFAULT_ASPECT_RATIO

    def to_dict(self) -> dict:
        """Serialize to the external JSON shape."""
        d = {
            "id": self.id,
            "description": self.description,
            "notes": self.notes,
        }
        if self.width is not None:
            d["width"] = self.width
        if self.height is not None:
            d["height"] = self.height
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Photo:
        """Deserialize from the external JSON shape."""
        return cls(
            id=str(data["id"]),
            description=data.get("description") or "",
            notes=data.get("notes") or "",
            width=data.get("width"),
            height=data.get("height"),
        )
