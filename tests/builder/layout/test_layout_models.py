"""
Unit tests for layout models and configuration.
"""

import pytest

from visit_report.builder.layout import (
    LayoutConfig,
    PhotoGridSpec,
    PhotoSlot,
    fit_within,
)
from visit_report.core.models import Photo


class TestFitWithin:
    """Tests for fit_within."""

    def test_landscape_into_box_limited_by_height(self):
        width, height = fit_within(4000, 3000, (260, 170))

        assert height == pytest.approx(170)
        assert width == pytest.approx(226.667, rel=1e-3)

    def test_portrait_into_wide_box_limited_by_height(self):
        width, height = fit_within(600, 1200, (468, 252))

        assert (width, height) == pytest.approx((126, 252))

    def test_wide_panorama_limited_by_width(self):
        width, height = fit_within(3000, 500, (260, 170))

        assert width == pytest.approx(260)
        assert height == pytest.approx(260 / 6)

    @pytest.mark.parametrize("size", [(None, None), (0, 100), (100, None)])
    def test_unknown_size_then_four_by_three(self, size):
        width, height = fit_within(size[0], size[1], (260, 170))

        assert width / height == pytest.approx(4 / 3)
        assert width <= 260 and height <= 170

    @pytest.mark.parametrize("size", [(10, 10), (5000, 10), (10, 5000), (1234, 987)])
    def test_result_never_exceeds_box(self, size):
        width, height = fit_within(size[0], size[1], (260, 170))

        assert width <= 260 + 1e-9
        assert height <= 170 + 1e-9


class TestPhotoSlot:
    """Tests for PhotoSlot sizing."""

    def test_planned_size_uses_known_dimensions(self):
        slot = PhotoSlot(Photo("p1", width=300, height=300), 1, 0, 0, 0, (260, 170))

        assert slot.planned_size == pytest.approx((170, 170))

    def test_fit_prefers_decoded_pixel_size(self):
        slot = PhotoSlot(Photo("p1", width=300, height=300), 1, 0, 0, 0, (260, 170))

        assert slot.fit((520, 170)) == pytest.approx((260, 85))

    def test_fit_without_pixel_size_returns_planned(self):
        slot = PhotoSlot(Photo("p1"), 1, 0, 0, 0, (260, 170))

        assert slot.fit() == slot.planned_size


class TestLayoutConfig:
    """Tests for LayoutConfig validation."""

    def test_defaults_are_us_letter(self):
        config = LayoutConfig()

        assert (config.page_width, config.page_height) == (612, 792)
        assert config.content_width == 540

    def test_default_grids_fit_page(self):
        config = LayoutConfig()

        for density in (2, 6):
            grid = config.grid_for(density)
            assert grid.capacity == density
            assert grid.grid_width <= config.content_width
            assert grid.grid_height <= config.photo_area_height

    def test_content_bottom_reserves_footer(self):
        config = LayoutConfig(footer_reserve=26)

        assert config.content_bottom == 792 - 36 - 26

    def test_grid_too_tall_then_raises(self):
        grids = {6: PhotoGridSpec(columns=2, rows=3, box_width=260, box_height=400)}

        with pytest.raises(ValueError, match="does not fit"):
            LayoutConfig(grids=grids)

    def test_grid_capacity_mismatch_then_raises(self):
        grids = {6: PhotoGridSpec(columns=2, rows=2, box_width=200, box_height=100)}

        with pytest.raises(ValueError, match="holds 4"):
            LayoutConfig(grids=grids)

    def test_margins_exceed_page_then_raises(self):
        with pytest.raises(ValueError, match="Margins"):
            LayoutConfig(margin_left=400, margin_right=400)

    def test_grid_spec_rejects_zero_columns(self):
        with pytest.raises(ValueError):
            PhotoGridSpec(columns=0, rows=1, box_width=10, box_height=10)
