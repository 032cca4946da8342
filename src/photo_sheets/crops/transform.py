"""
Module: photo_sheets.crops.transform

Purpose:
    Turn a Crop and a fit mode into the values used to paint a photo
    inside its cell.

Composition:
    1. object_position anchors the native cover/contain fit at (x%, y%)
    2. translate by ((50 - x) / 2 %, (50 - y) / 2 %) of the unscaled box
    3. scale by zoom / 100
    4. rotate by rotation degrees
    Steps 2-4 pivot on the element centre and must stay in this order:
    translation is measured on the unscaled box, scaling first would
    amplify the pan distance.

Key Functions:
    - compose(): Build a CellTransform
    - needs_backdrop(): Whether contain-mode bars get a blurred copy

Key Classes:
    - CellTransform: Composed transform (immutable)

Used By:
    - photo_sheets.session: Render state
    - photo_sheets.output.raster: Print rasterisation
    - photo_sheets.gui.sheet_view: Preview painting
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from .models import Crop

FIT_MODES = ("cover", "contain")
BAR_FILLS = ("white", "black", "blur")

# Background copy behind contained photos when bars are blurred
BACKDROP_SCALE = 1.15
BACKDROP_BLUR_PX = 12
BACKDROP_OPACITY = 0.8


@dataclass(frozen=True)
class CellTransform:
    """
    Positioning values for one photo (immutable).

    Attributes:
        object_position: Fit anchor (x%, y%)
        translate: Offset (x%, y%) of the unscaled element box
        scale: Uniform scale factor
        rotate: Clockwise degrees
        fit_mode: "cover" or "contain"
    """

    object_position: Tuple[float, float]
    translate: Tuple[float, float]
    scale: float
    rotate: float
    fit_mode: str = "cover"

    @property
    def is_identity(self) -> bool:
        """No offset, scale or rotation on top of the fit."""
        return self.translate == (0.0, 0.0) and self.scale == 1.0 and self.rotate == 0.0

    def css(self) -> str:
        """CSS transform with centre origin."""
        tx, ty = self.translate
        return f"translate({_fmt(tx)}%, {_fmt(ty)}%) scale({_fmt(self.scale)}) rotate({_fmt(self.rotate)}deg)"

    def css_object_position(self) -> str:
        ox, oy = self.object_position
        return f"{_fmt(ox)}% {_fmt(oy)}%"

    def matrix(self, box_width: float, box_height: float) -> Tuple[float, float, float, float, float, float]:
        """
        Affine matrix (a, b, c, d, e, f) mapping element-local points,
        measured from the box centre, to box-centred output points.

        x' = a*x + c*y + e, y' = b*x + d*y + f. Applies rotate, then
        scale, then translate to each point, which is the same as
        composing translate -> scale -> rotate on the element.
        """
        theta = math.radians(self.rotate)
        cos_t = math.cos(theta) * self.scale
        sin_t = math.sin(theta) * self.scale
        tx = self.translate[0] / 100.0 * box_width
        ty = self.translate[1] / 100.0 * box_height
        return (cos_t, sin_t, -sin_t, cos_t, tx, ty)


def _fmt(value: float) -> str:
    return f"{value:.4f}".rstrip("0").rstrip(".") or "0"


def compose(crop: Crop, fit_mode: str = "cover") -> CellTransform:
    """
    Compose the transform for a crop.

    Example:
        >>> compose(Crop(x=70, y=50, zoom=150)).translate
        (-10.0, 0.0)
    """
    if fit_mode not in FIT_MODES:
        fit_mode = "cover"
    return CellTransform(
        object_position=(float(crop.x), float(crop.y)),
        translate=((50.0 - crop.x) / 2.0, (50.0 - crop.y) / 2.0),
        scale=crop.zoom / 100.0,
        rotate=float(crop.rotation),
        fit_mode=fit_mode,
    )


def needs_backdrop(fit_mode: str, bar_fill: str) -> bool:
    """Contained photos with blurred bars get a full-bleed cover copy underneath."""
    return fit_mode == "contain" and bar_fill == "blur"


def fitted_rect(
    image_width: float,
    image_height: float,
    box_width: float,
    box_height: float,
    fit_mode: str,
    position: Tuple[float, float] = (50.0, 50.0),
) -> Tuple[float, float, float, float]:
    """
    Place an image in a box the way CSS object-fit/object-position do.

    Returns:
        (left, top, width, height) of the fitted image in box coordinates

    Example:
        >>> fitted_rect(300, 200, 100, 100, "cover")
        (-25.0, 0.0, 150.0, 100.0)
    """
    if image_width <= 0 or image_height <= 0:
        return (0.0, 0.0, float(box_width), float(box_height))
    ratio_w = box_width / image_width
    ratio_h = box_height / image_height
    ratio = max(ratio_w, ratio_h) if fit_mode == "cover" else min(ratio_w, ratio_h)
    width = image_width * ratio
    height = image_height * ratio
    left = (box_width - width) * position[0] / 100.0
    top = (box_height - height) * position[1] / 100.0
    return (float(left), float(top), float(width), float(height))
