"""
Module: builder.layout.config

Purpose:
    Configuration for page geometry and photo grids.
    All dimensions are PDF points (1/72 inch); the DOCX backend converts
    with docx.shared.Pt, so both backends share one geometry.

Key Classes:
    - PhotoGridSpec: Grid shape and cell geometry for one density
    - LayoutConfig: Page size, margins, footer reservation, grids

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.planner: Slot assignment
    - builder.output.pdf_renderer: Cursor limits and grid coordinates
    - builder.output.docx_renderer: Section margins and image sizes
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

# US Letter, 8.5in x 11in
DEFAULT_PAGE_WIDTH_PT = 612
DEFAULT_PAGE_HEIGHT_PT = 792
DEFAULT_MARGIN_PT = 36

SUPPORTED_DENSITIES = (2, 6)


@dataclass(frozen=True)
class PhotoGridSpec:
    """
    Grid geometry for one photo density (immutable).

    A cell is the image box stacked on a caption bar and a notes area.

    Attributes:
        columns: Photos per row
        rows: Rows per page
        box_width: Maximum image width (pt)
        box_height: Maximum image height (pt)
        caption_height: Caption bar height (pt)
        notes_height: Notes area height (pt)
        column_gap: Horizontal gap between cells (pt)
        row_gap: Vertical gap between cells (pt)

    Example:
        >>> grid = PhotoGridSpec(columns=2, rows=3, box_width=260, box_height=170)
        >>> grid.capacity
        6
    """

    columns: int
    rows: int
    box_width: float
    box_height: float
    caption_height: float = 20
    notes_height: float = 24
    column_gap: float = 20
    row_gap: float = 10

    def __post_init__(self) -> None:
        """Validate grid on construction."""
        if self.columns <= 0 or self.rows <= 0:
            raise ValueError(f"Grid must have positive rows/columns: {self.rows}x{self.columns}")
        if self.box_width <= 0 or self.box_height <= 0:
            raise ValueError(f"Image box must be positive: {self.box_width}x{self.box_height}")

    @property
    def capacity(self) -> int:
        """Photos per page."""
        return self.columns * self.rows

    @property
    def box(self) -> Tuple[float, float]:
        """(width, height) of the image box."""
        return (self.box_width, self.box_height)

    @property
    def cell_height(self) -> float:
        """Image box + caption + notes."""
        return self.box_height + self.caption_height + self.notes_height

    @property
    def grid_width(self) -> float:
        """Total width of one row of cells including gaps."""
        return self.columns * self.box_width + (self.columns - 1) * self.column_gap

    @property
    def grid_height(self) -> float:
        """Total height of all rows including gaps."""
        return self.rows * self.cell_height + (self.rows - 1) * self.row_gap


def _default_grids() -> Dict[int, PhotoGridSpec]:
    return {
        # 2 x 3, fixed cell box
        6: PhotoGridSpec(columns=2, rows=3, box_width=260, box_height=170),
        # 1 x 2, bounded to 6.5in x 3.5in
        2: PhotoGridSpec(
            columns=1,
            rows=2,
            box_width=468,
            box_height=252,
            notes_height=30,
            row_gap=20,
        ),
    }


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page layout (immutable).

    Attributes:
        page_width: Page width (pt)
        page_height: Page height (pt)
        margin_top: Top margin (pt)
        margin_bottom: Bottom margin (pt)
        margin_left: Left margin (pt)
        margin_right: Right margin (pt)
        footer_reserve: Space kept free above the bottom margin for
            the "Page X of Y" footer (pt)
        section_heading_height: Height of a section heading with its rule (pt)
        grids: Photo grid per supported density

    Example:
        >>> config = LayoutConfig()
        >>> config.content_width
        540
    """

    page_width: float = DEFAULT_PAGE_WIDTH_PT
    page_height: float = DEFAULT_PAGE_HEIGHT_PT
    margin_top: float = DEFAULT_MARGIN_PT
    margin_bottom: float = DEFAULT_MARGIN_PT
    margin_left: float = DEFAULT_MARGIN_PT
    margin_right: float = DEFAULT_MARGIN_PT
    footer_reserve: float = 24
    section_heading_height: float = 30
    grids: Dict[int, PhotoGridSpec] = field(default_factory=_default_grids)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        if self.content_width <= 0:
            raise ValueError("Margins exceed page width")
        if self.content_height <= 0:
            raise ValueError("Margins exceed page height")

        for density, grid in self.grids.items():
            if density not in SUPPORTED_DENSITIES:
                raise ValueError(f"Unsupported density: {density}")
            if grid.capacity != density:
                raise ValueError(
                    f"Grid for density {density} holds {grid.capacity} photos"
                )
            if grid.grid_width > self.content_width:
                raise ValueError(
                    f"Photo grid for density {density} is wider than the page content "
                    f"({grid.grid_width}pt > {self.content_width}pt)"
                )
            if grid.grid_height > self.photo_area_height:
                raise ValueError(
                    f"Photo grid for density {density} does not fit below the heading "
                    f"({grid.grid_height}pt > {self.photo_area_height}pt)"
                )

    @property
    def content_width(self) -> float:
        """Width available for content (excluding margins)."""
        return self.page_width - self.margin_left - self.margin_right

    @property
    def content_height(self) -> float:
        """Height available for content (excluding margins and footer)."""
        return self.page_height - self.margin_top - self.margin_bottom - self.footer_reserve

    @property
    def content_bottom(self) -> float:
        """Lowest Y (top-down) a block may reach."""
        return self.page_height - self.margin_bottom - self.footer_reserve

    @property
    def photo_area_height(self) -> float:
        """Height left for the photo grid under a section heading."""
        return self.content_height - self.section_heading_height

    def grid_for(self, density: int) -> PhotoGridSpec:
        """
        Get the grid for a density.

        Raises:
            ValueError: If density is not configured
        """
        grid = self.grids.get(density)
        if grid is None:
            raise ValueError(
                f"Unsupported photo density: {density} "
                f"(expected one of {sorted(self.grids)})"
            )
        return grid
