"""
Module: photo_sheets.crops

Purpose:
    Per-photo crop/zoom/rotation state, its persistence, and the transform
    used to paint a cropped photo in a cell.

Key Classes:
    - Crop: Clamped crop state
    - CropStore: Single-writer store with write-behind persistence
    - CellTransform: Composed paint transform
    - JsonCropFile: File persistence collaborator
"""

from .models import Crop, DEFAULT_CROP, default_crop, normalize_rotation, clamp, coerce_number
from .persistence import CropPersistence, JsonCropFile, MemoryCropPersistence
from .scheduling import Scheduler, ThreadTimerScheduler
from .store import CropStore
from .transform import CellTransform, compose, needs_backdrop, fitted_rect, FIT_MODES, BAR_FILLS

__all__ = [
    "Crop",
    "DEFAULT_CROP",
    "default_crop",
    "normalize_rotation",
    "clamp",
    "coerce_number",
    "CropPersistence",
    "JsonCropFile",
    "MemoryCropPersistence",
    "Scheduler",
    "ThreadTimerScheduler",
    "CropStore",
    "CellTransform",
    "compose",
    "needs_backdrop",
    "fitted_rect",
    "FIT_MODES",
    "BAR_FILLS",
]
