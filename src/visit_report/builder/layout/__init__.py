"""
Module: builder.layout

Purpose:
    Page geometry and photo layout for report export.
    Converts the visit's photo list into per-page grid slots shared by
    both renderers.

Key Functions:
    - plan_photo_pages(): Arrange photos onto pages
    - fit_within(): Aspect-preserving fit into a box

Key Classes:
    - LayoutConfig: Page geometry and photo grids
    - PhotoGridSpec: Grid for one density
    - PhotoSlot / PhotoPage / PhotoLayout: Layout output

Used By:
    - builder.output.report_model
    - builder.output renderers
"""

from .config import LayoutConfig, PhotoGridSpec, SUPPORTED_DENSITIES
from .models import PhotoSlot, PhotoPage, PhotoLayout, fit_within
from .planner import plan_photo_pages

__all__ = [
    # Config
    "LayoutConfig",
    "PhotoGridSpec",
    "SUPPORTED_DENSITIES",
    # Models
    "PhotoSlot",
    "PhotoPage",
    "PhotoLayout",
    "fit_within",
    # Functions
    "plan_photo_pages",
]
