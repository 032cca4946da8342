"""
Module: photo_sheets.crops.models

Purpose:
    Per-photo crop state and the clamping rules that keep it valid.

Key Classes:
    - Crop: Focal point, zoom and rotation (immutable)

Key Functions:
    - clamp(): Bound a value to a closed range
    - normalize_rotation(): Reduce degrees into [0, 360)
    - coerce_number(): Read a numeric field, falling back on garbage
    - default_crop(): The untouched crop

Used By:
    - photo_sheets.crops.store: Clamped merge
    - photo_sheets.crops.transform: Transform composition
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping

X_RANGE = (0.0, 100.0)
Y_RANGE = (0.0, 100.0)
ZOOM_RANGE = (50.0, 250.0)

CROP_FIELDS = ("x", "y", "zoom", "rotation")


def clamp(value: float, low: float, high: float) -> float:
    """Bound value to [low, high]."""
    return max(low, min(high, value))


def normalize_rotation(degrees: float) -> float:
    """
    Reduce an angle into [0, 360), wrapping negatives.

    Example:
        >>> normalize_rotation(-90)
        270.0
    """
    result = ((float(degrees) % 360) + 360) % 360
    # -1e-20 % 360 rounds to 360.0 in floating point
    return 0.0 if result >= 360 else result


def coerce_number(value: Any, fallback: float) -> float:
    """
    Convert field input to a finite float.

    None, NaN, infinities, booleans and unparseable strings all mean
    "no change" and return fallback.
    """
    if value is None or isinstance(value, bool):
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return number


@dataclass(frozen=True)
class Crop:
    """
    Crop state for one photo (immutable).

    Attributes:
        x: Horizontal focal point, percent of the source width [0, 100]
        y: Vertical focal point, percent of the source height [0, 100]
        zoom: Zoom percent [50, 250]
        rotation: Clockwise degrees [0, 360)

    Example:
        >>> Crop().merged({"rotation": -90}).rotation
        270.0
    """

    x: float = 50.0
    y: float = 50.0
    zoom: float = 100.0
    rotation: float = 0.0

    def merged(self, patch: Mapping[str, Any]) -> "Crop":
        """Apply a partial patch over this crop, clamping every field."""
        return Crop(
            x=clamp(coerce_number(patch.get("x"), self.x), *X_RANGE),
            y=clamp(coerce_number(patch.get("y"), self.y), *Y_RANGE),
            zoom=clamp(coerce_number(patch.get("zoom"), self.zoom), *ZOOM_RANGE),
            rotation=normalize_rotation(coerce_number(patch.get("rotation"), self.rotation)),
        )

    @property
    def is_default(self) -> bool:
        return self == DEFAULT_CROP

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Any) -> "Crop":
        """
        Build a crop from stored data.

        Anything that is not a mapping gives the default crop; missing or
        malformed fields take their default value.
        """
        if not isinstance(raw, Mapping):
            return cls()
        return cls().merged(raw)


DEFAULT_CROP = Crop()


def default_crop() -> Crop:
    """Crop for a photo nobody has touched."""
    return DEFAULT_CROP
