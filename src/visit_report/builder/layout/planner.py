"""
Module: builder.layout.planner

Purpose:
    Partition the visit's photos into pages and grid slots for a density.

Algorithm:
    1. Look up the grid for the density (2 -> 1x2, 6 -> 2x3)
    2. Chunk photos in order into groups of grid.capacity
    3. Within a page, position p -> row p // columns, column p % columns
    4. Every page after the first is marked continued

    Page count is always ceil(photo_count / density); zero photos give
    an empty layout.

Key Functions:
    - plan_photo_pages(): Main planning function

Dependencies:
    - builder.layout.models: PhotoSlot, PhotoPage, PhotoLayout
    - builder.layout.config: LayoutConfig

Used By:
    - builder.output.report_model
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from visit_report.core.models import Photo

from .config import LayoutConfig
from .models import PhotoLayout, PhotoPage, PhotoSlot

logger = logging.getLogger(__name__)


def plan_photo_pages(
    photos: Sequence[Photo],
    density: int,
    config: Optional[LayoutConfig] = None,
) -> PhotoLayout:
    """
    Assign photos to pages and grid cells.

    Args:
        photos: Photos in display order
        density: Photos per page (2 or 6)
        config: Layout configuration (defaults to LayoutConfig())

    Returns:
        PhotoLayout with one PhotoPage per output page

    Raises:
        ValueError: If density is not supported
    """
    config = config or LayoutConfig()
    grid = config.grid_for(density)

    if not photos:
        logger.debug("No photos to lay out")
        return PhotoLayout(density=density, columns=grid.columns, rows=grid.rows)

    pages: List[PhotoPage] = []
    warnings: List[str] = []

    for page_index, start in enumerate(range(0, len(photos), grid.capacity)):
        chunk = photos[start:start + grid.capacity]
        slots = tuple(
            PhotoSlot(
                photo=photo,
                number=start + position + 1,
                position=position,
                row=position // grid.columns,
                column=position % grid.columns,
                box=grid.box,
            )
            for position, photo in enumerate(chunk)
        )
        pages.append(PhotoPage(
            index=page_index,
            slots=slots,
            continued=page_index > 0,
        ))

    unknown = sum(1 for p in photos if not p.has_known_size)
    if unknown:
        warnings.append(f"{unknown} photos have no known size; planned at 4:3")

    logger.info(
        f"Planned {len(photos)} photos onto {len(pages)} pages "
        f"(density {density}, {grid.columns}x{grid.rows})"
    )

    return PhotoLayout(
        density=density,
        columns=grid.columns,
        rows=grid.rows,
        pages=tuple(pages),
        warnings=warnings,
    )
