"""
Unit Tests for the filter record, presets and Pillow pipeline.
"""

import pytest
from PIL import Image

from photo_sheets.filters import PRESETS, FilterValues, apply_filters, preset_values


class TestFilterValues:

    def test_defaults_are_neutral(self):
        assert FilterValues().is_neutral

    def test_clamped(self):
        values = FilterValues(brightness=500, hue=-400, blur="x", saturation=None).clamped()
        assert values.brightness == 170
        assert values.hue == -180
        assert values.blur == 0
        assert values.saturation == 100

    def test_with_value(self):
        assert FilterValues().with_value("sepia", 150).sepia == 100

    def test_with_value_unknown_name(self):
        with pytest.raises(KeyError):
            FilterValues().with_value("vignette", 10)

    def test_css(self):
        assert FilterValues().css() == (
            "brightness(100%) contrast(100%) saturate(100%) sepia(0%) "
            "grayscale(0%) hue-rotate(0deg) blur(0px)"
        )
        assert "blur(0.2px)" in PRESETS["vintage"].css()


class TestPresets:

    def test_every_preset_is_in_range(self):
        for values in PRESETS.values():
            assert values.clamped() == values

    def test_unknown_preset_is_neutral(self):
        assert preset_values("sparkle") == FilterValues()

    def test_bw_is_fully_grey(self):
        assert preset_values("bw").grayscale == 100


class TestApplyFilters:

    def test_neutral_returns_rgb_copy(self):
        img = Image.new("RGBA", (4, 4), (10, 20, 30, 255))
        result = apply_filters(img, FilterValues())
        assert result.mode == "RGB"
        assert result.getpixel((0, 0)) == (10, 20, 30)
        assert result is not img

    def test_brightness_scales_channels(self):
        img = Image.new("RGB", (2, 2), (200, 100, 50))
        r, g, b = apply_filters(img, FilterValues(brightness=50)).getpixel((0, 0))
        assert abs(r - 100) <= 1 and abs(g - 50) <= 1 and abs(b - 25) <= 1

    def test_grayscale_equalises_channels(self):
        img = Image.new("RGB", (2, 2), (200, 40, 90))
        r, g, b = apply_filters(img, FilterValues(grayscale=100)).getpixel((0, 0))
        assert abs(r - g) <= 1 and abs(g - b) <= 1

    def test_saturation_zero_equalises_channels(self):
        img = Image.new("RGB", (2, 2), (10, 220, 90))
        r, g, b = apply_filters(img, FilterValues(saturation=0)).getpixel((0, 0))
        assert abs(r - g) <= 1 and abs(g - b) <= 1

    def test_sepia_warms_grey(self):
        img = Image.new("RGB", (2, 2), (128, 128, 128))
        r, g, b = apply_filters(img, FilterValues(sepia=100)).getpixel((0, 0))
        assert r > g > b

    def test_blur_keeps_size(self, sample_image):
        result = apply_filters(sample_image, FilterValues(blur=4), blur_scale=2.0)
        assert result.size == sample_image.size
        # The red/blue edge is softened
        assert result.getpixel((150, 100)) not in ((255, 0, 0), (0, 0, 255))
