"""
Unit Tests for cell and page rasterisation.
"""

import pytest
from PIL import Image

from photo_sheets.crops.models import Crop
from photo_sheets.crops.transform import compose
from photo_sheets.layout.models import Photo
from photo_sheets.options import SheetOptions
from photo_sheets.output.raster import BAR_COLORS, inverse_affine, render_cell, render_page
from photo_sheets.session import SheetSession


def _is_red(pixel):
    r, g, b = pixel
    return r > 200 and g < 60 and b < 60


def _is_blue(pixel):
    r, g, b = pixel
    return b > 200 and r < 60 and g < 60


class TestInverseAffine:

    def test_identity(self):
        coeffs = inverse_affine(compose(Crop()), 100, 100)
        assert coeffs == pytest.approx((1, 0, 0, 0, 1, 0))

    def test_translation_is_undone(self):
        # translate +20% of a 100px box
        coeffs = inverse_affine(compose(Crop(x=10)), 100, 100)
        assert coeffs == pytest.approx((1, 0, -20, 0, 1, 0))


class TestRenderCell:

    def test_missing_image_leaves_bar_fill(self):
        cell = render_cell(None, compose(Crop()), (20, 10), bar_fill="black")
        assert cell.size == (20, 10)
        assert cell.getpixel((5, 5)) == BAR_COLORS["black"]

    def test_cover_shows_centre_of_photo(self, sample_image):
        cell = render_cell(sample_image, compose(Crop()), (100, 100))
        assert _is_red(cell.getpixel((10, 50)))
        assert _is_blue(cell.getpixel((90, 50)))

    def test_rotation_half_turn_swaps_sides(self, sample_image):
        cell = render_cell(sample_image, compose(Crop(rotation=180)), (100, 100))
        assert _is_blue(cell.getpixel((10, 50)))
        assert _is_red(cell.getpixel((90, 50)))

    def test_contain_draws_bars(self, sample_image):
        cell = render_cell(sample_image, compose(Crop(), "contain"), (100, 100), bar_fill="black")
        assert cell.getpixel((50, 5)) == BAR_COLORS["black"]
        assert _is_red(cell.getpixel((20, 50)))

    def test_contain_with_blur_fills_bars_from_photo(self, sample_image):
        cell = render_cell(sample_image, compose(Crop(), "contain"), (100, 100), bar_fill="blur")
        assert cell.getpixel((50, 5)) not in (BAR_COLORS["blur"], (255, 255, 255))

    def test_filters_apply(self, sample_image):
        session_filters = SheetOptions(grayscale=100).filters
        r, g, b = render_cell(sample_image, compose(Crop()), (100, 100), filters=session_filters).getpixel((10, 50))
        assert abs(r - g) <= 2 and abs(g - b) <= 2


class TestRenderPage:

    @pytest.fixture
    def state(self, persistence, scheduler, sample_image):
        session = SheetSession(SheetOptions(), persistence=persistence, scheduler=scheduler)
        session.load_photos([Photo(id="a", name="a", source=sample_image), Photo(id="b", name="b")])
        return session.render()

    def test_page_size_follows_dpi(self, state, sample_image):
        page = render_page(state.pages[0], state, {"a": sample_image, "b": None}, dpi=96)
        assert page.size == (794, 1123)
        page = render_page(state.pages[0], state, {"a": sample_image, "b": None}, dpi=48)
        assert page.size == (397, 562)

    def test_cells_and_separators(self, state, sample_image):
        page = render_page(state.pages[0], state, {"a": sample_image, "b": None}, dpi=96)
        # First cell starts at the 30px margin with a separator line
        assert page.getpixel((30, 200)) == (0, 0, 0)
        assert _is_red(page.getpixel((60, 200)))
        # Unused slots stay blank
        assert page.getpixel((600, 1000)) == (255, 255, 255)
