"""
Module: photo_sheets.filters

Purpose:
    Photo colour filters as a typed record of seven parameters, the named
    presets, and the functions that turn a record into something a render
    target understands (CSS filter string, Pillow image).

Key Classes:
    - FilterValues: brightness/contrast/saturation/sepia/grayscale/hue/blur

Key Functions:
    - preset_values(): Values for a named preset
    - apply_filters(): Filter a PIL image the way the CSS chain would

Dependencies:
    - PIL: Blur and image conversion
    - numpy: Colour matrices

Used By:
    - photo_sheets.options: Preset handling
    - photo_sheets.output.raster: Print rasterisation
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Dict, Tuple

import numpy as np
from PIL import Image, ImageFilter

from photo_sheets.crops.models import clamp, coerce_number

FILTER_RANGES: Dict[str, Tuple[float, float]] = {
    "brightness": (50, 170),
    "contrast": (50, 170),
    "saturation": (0, 220),
    "sepia": (0, 100),
    "grayscale": (0, 100),
    "hue": (-180, 180),
    "blur": (0, 4),
}

FILTER_NAMES = tuple(FILTER_RANGES)


@dataclass(frozen=True)
class FilterValues:
    """
    Filter parameters (immutable).

    Percentages except hue (degrees) and blur (pixels at preview scale).
    """

    brightness: float = 100
    contrast: float = 100
    saturation: float = 100
    sepia: float = 0
    grayscale: float = 0
    hue: float = 0
    blur: float = 0

    def clamped(self) -> "FilterValues":
        """Copy with every field coerced to a number inside its range."""
        defaults = FilterValues()
        values = {}
        for f in fields(self):
            low, high = FILTER_RANGES[f.name]
            number = coerce_number(getattr(self, f.name), getattr(defaults, f.name))
            values[f.name] = clamp(number, low, high)
        return FilterValues(**values)

    def with_value(self, name: str, value: float) -> "FilterValues":
        if name not in FILTER_RANGES:
            raise KeyError(f"Unknown filter parameter: {name}")
        return replace(self, **{name: value}).clamped()

    @property
    def is_neutral(self) -> bool:
        return self.clamped() == FilterValues()

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def css(self) -> str:
        """CSS filter chain equivalent."""
        return " ".join([
            f"brightness({_fmt(self.brightness)}%)",
            f"contrast({_fmt(self.contrast)}%)",
            f"saturate({_fmt(self.saturation)}%)",
            f"sepia({_fmt(self.sepia)}%)",
            f"grayscale({_fmt(self.grayscale)}%)",
            f"hue-rotate({_fmt(self.hue)}deg)",
            f"blur({_fmt(self.blur)}px)",
        ])


def _fmt(value: float) -> str:
    return f"{value:g}"


PRESETS: Dict[str, FilterValues] = {
    "none": FilterValues(),
    "auto": FilterValues(brightness=104, contrast=108, saturation=112),
    "portrait": FilterValues(brightness=103, contrast=104, saturation=106, sepia=16, hue=-8),
    "landscape": FilterValues(brightness=102, contrast=114, saturation=125, hue=-3),
    "bw": FilterValues(brightness=102, contrast=118, saturation=40, grayscale=100),
    "vintage": FilterValues(brightness=96, contrast=92, saturation=86, sepia=35, grayscale=10, hue=-6, blur=0.2),
}

PRESET_LABELS: Dict[str, str] = {
    "none": "None",
    "auto": "Auto enhance",
    "portrait": "Portrait (warmer)",
    "landscape": "Landscape (vivid)",
    "bw": "Black and white",
    "vintage": "Vintage",
    "custom": "Custom (manual)",
}


def preset_values(preset: str) -> FilterValues:
    """Values for a preset; unknown names give the neutral record."""
    return PRESETS.get(preset, PRESETS["none"])


# Colour matrices as defined for the W3C filter functions

def _sepia_matrix(amount: float) -> np.ndarray:
    a = 1.0 - amount
    return np.array([
        [0.393 + 0.607 * a, 0.769 - 0.769 * a, 0.189 - 0.189 * a],
        [0.349 - 0.349 * a, 0.686 + 0.314 * a, 0.168 - 0.168 * a],
        [0.272 - 0.272 * a, 0.534 - 0.534 * a, 0.131 + 0.869 * a],
    ])


def _grayscale_matrix(amount: float) -> np.ndarray:
    a = 1.0 - amount
    return np.array([
        [0.2126 + 0.7874 * a, 0.7152 - 0.7152 * a, 0.0722 - 0.0722 * a],
        [0.2126 - 0.2126 * a, 0.7152 + 0.2848 * a, 0.0722 - 0.0722 * a],
        [0.2126 - 0.2126 * a, 0.7152 - 0.7152 * a, 0.0722 + 0.9278 * a],
    ])


def _saturate_matrix(s: float) -> np.ndarray:
    return np.array([
        [0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s],
    ])


def _hue_matrix(degrees: float) -> np.ndarray:
    theta = math.radians(degrees)
    c, s = math.cos(theta), math.sin(theta)
    return np.array([
        [0.213 + c * 0.787 - s * 0.213, 0.715 - c * 0.715 - s * 0.715, 0.072 - c * 0.072 + s * 0.928],
        [0.213 - c * 0.213 + s * 0.143, 0.715 + c * 0.285 + s * 0.140, 0.072 - c * 0.072 - s * 0.283],
        [0.213 - c * 0.213 - s * 0.787, 0.715 - c * 0.715 + s * 0.715, 0.072 + c * 0.928 + s * 0.072],
    ])


def apply_filters(image: Image.Image, values: FilterValues, blur_scale: float = 1.0) -> Image.Image:
    """
    Apply the filter chain to an image.

    Same order as the CSS chain: brightness, contrast, saturate, sepia,
    grayscale, hue-rotate, blur.

    Args:
        image: Source image (any mode, converted to RGB)
        values: Filter parameters
        blur_scale: Multiplier for the blur radius when rendering above
            preview resolution

    Returns:
        New RGB image
    """
    values = values.clamped()
    rgb = image.convert("RGB")
    if values.is_neutral:
        return rgb.copy()

    pixels = np.asarray(rgb, dtype=np.float32) / 255.0
    pixels = pixels * (values.brightness / 100.0)
    pixels = (pixels - 0.5) * (values.contrast / 100.0) + 0.5
    pixels = np.clip(pixels, 0.0, 1.0)

    matrix = np.identity(3)
    for step in (
        _saturate_matrix(values.saturation / 100.0),
        _sepia_matrix(values.sepia / 100.0),
        _grayscale_matrix(values.grayscale / 100.0),
        _hue_matrix(values.hue),
    ):
        matrix = step @ matrix
    pixels = np.clip(pixels @ matrix.T.astype(np.float32), 0.0, 1.0)

    result = Image.fromarray((pixels * 255.0 + 0.5).astype(np.uint8), "RGB")
    if values.blur > 0:
        result = result.filter(ImageFilter.GaussianBlur(radius=values.blur * blur_scale))
    return result
