"""
Module: builder.layout.models

Purpose:
    Data models for the photo layout.
    Immutable dataclasses representing slots, pages, and the full plan.

Key Classes:
    - PhotoSlot: One photo assigned to a grid cell
    - PhotoPage: All slots on one output page
    - PhotoLayout: Final layout output

Key Functions:
    - fit_within(): Aspect-preserving fit into a bounding box

Dependencies:
    - dataclasses (std)
    - visit_report.core.models: Photo

Used By:
    - builder.layout.planner: Creates PhotoPages
    - builder.output: Both renderers
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from visit_report.core.models import Photo
from visit_report.core.models.photos import DEFAULT_ASPECT_RATIO


def fit_within(
    width: Optional[float],
    height: Optional[float],
    box: Tuple[float, float],
) -> Tuple[float, float]:
    """
    Scale (width, height) to the largest size that fits in box.

    The aspect ratio is preserved and the result never exceeds the box.
    Unknown or non-positive dimensions fall back to 4:3.

    Args:
        width: Source width (any unit)
        height: Source height (same unit as width)
        box: (max_width, max_height)

    Returns:
        (width, height) in box units

    Example:
        >>> fit_within(4000, 3000, (260, 170))
        (226.66666666666666, 170.0)
    """
    box_width, box_height = box
    if not width or not height or width <= 0 or height <= 0:
        width, height = DEFAULT_ASPECT_RATIO, 1.0

    scale = min(box_width / width, box_height / height)
    return (width * scale, height * scale)


@dataclass(frozen=True)
class PhotoSlot:
    """
    A photo assigned to a cell of the photo grid.

    Attributes:
        photo: The photo to place
        number: 1-based photo number across the whole report
        position: 0-based index on its page
        row: 0-based grid row
        column: 0-based grid column
        box: (width, height) maximum image box in points

    Example:
        >>> slot = PhotoSlot(photo, number=3, position=2, row=1, column=0, box=(260, 170))
        >>> slot.planned_size
        (226.66666666666666, 170.0)
    """

    photo: Photo
    number: int
    position: int
    row: int
    column: int
    box: Tuple[float, float]

    @property
    def planned_size(self) -> Tuple[float, float]:
        """Image size from the photo's known dimensions (4:3 if unknown)."""
        return fit_within(self.photo.width, self.photo.height, self.box)

    def fit(self, pixel_size: Optional[Tuple[int, int]] = None) -> Tuple[float, float]:
        """
        Image size for the actual decoded pixel size.

        Args:
            pixel_size: (width, height) of the decoded image, or None to
                use the planned size

        Returns:
            (width, height) in points, within box
        """
        if pixel_size is None:
            return self.planned_size
        return fit_within(pixel_size[0], pixel_size[1], self.box)


@dataclass(frozen=True)
class PhotoPage:
    """
    Photo slots for a single output page.

    Attributes:
        index: Page number within the photo section (0-indexed)
        slots: Tuple of PhotoSlots in display order
        continued: True for every page after the first (heading reads
            "... (continued)")
    """

    index: int
    slots: tuple[PhotoSlot, ...]
    continued: bool = False

    @property
    def slot_count(self) -> int:
        """Number of photos on this page."""
        return len(self.slots)

    @property
    def row_count(self) -> int:
        """Number of grid rows actually used on this page."""
        if not self.slots:
            return 0
        return max(slot.row for slot in self.slots) + 1


@dataclass(frozen=True)
class PhotoLayout:
    """
    Final photo layout.

    Attributes:
        density: Photos per page (2 or 6)
        columns: Grid columns
        rows: Grid rows
        pages: Tuple of PhotoPages
        warnings: Non-fatal planning messages

    Example:
        >>> layout = plan_photo_pages(photos, density=2)
        >>> layout.page_count
        4
    """

    density: int
    columns: int
    rows: int
    pages: tuple[PhotoPage, ...] = ()
    warnings: list[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        """Number of photo pages."""
        return len(self.pages)

    @property
    def slot_count(self) -> int:
        """Total number of photo slots across all pages."""
        return sum(p.slot_count for p in self.pages)

    @property
    def is_empty(self) -> bool:
        """True when there are no photos to place."""
        return not self.pages
