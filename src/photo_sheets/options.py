"""
Module: photo_sheets.options

Purpose:
    The configuration surface for a sheet session. Held as process-lifetime
    UI state; only crops are persisted.

    Raw values may come straight from form fields (strings, blanks, out of
    range). resolved() turns them into a clean copy: numbers are coerced and
    clamped, unknown choices fall back to their default.

Key Classes:
    - SheetOptions: Mutable option bag

Used By:
    - photo_sheets.session: Layout and render state
    - photo_sheets.gui.main_window: Form bindings
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Tuple

from photo_sheets.crops.models import clamp, coerce_number
from photo_sheets.crops.transform import BAR_FILLS, FIT_MODES
from photo_sheets.filters import FILTER_NAMES, FILTER_RANGES, PRESETS, FilterValues, preset_values
from photo_sheets.layout.geometry import ORIENTATIONS, PageGeometry
from photo_sheets.layout.planner import MAX_PER_PAGE, MIN_PER_PAGE, TEMPLATES, forced_per_page

logger = logging.getLogger(__name__)

FILTER_PRESETS = tuple(PRESETS) + ("custom",)

NUMERIC_RANGES: Dict[str, Tuple[float, float]] = {
    "photos_per_page": (MIN_PER_PAGE, MAX_PER_PAGE),
    "margin_mm": (0, 40),
    "gap_mm": (0, 20),
    "nudge_step": (0.5, 20),
    **FILTER_RANGES,
}

CHOICES: Dict[str, Tuple[str, ...]] = {
    "orientation": ORIENTATIONS,
    "layout_template": TEMPLATES,
    "fit_mode": FIT_MODES,
    "bar_fill": BAR_FILLS,
    "filter_preset": FILTER_PRESETS,
}

TRUE_WORDS = ("yes", "true", "on", "1")
FALSE_WORDS = ("no", "false", "off", "0", "")


def coerce_flag(raw: Any, default: bool) -> bool:
    """Read a yes/no switch; strings are matched by word, not truthiness."""
    if isinstance(raw, str):
        word = raw.strip().lower()
        if word in TRUE_WORDS:
            return True
        if word in FALSE_WORDS:
            return False
        logger.debug(f"Ignoring invalid flag value {raw!r}")
        return default
    if raw is None:
        return default
    return bool(raw)


@dataclass
class SheetOptions:
    """
    Layout, fit and filter options.

    Attributes:
        photos_per_page: Photos per page for the automatic template (1-64)
        orientation: "portrait" or "landscape"
        margin_mm: Page margin (0-40)
        gap_mm: Spacing between cells (0-20)
        layout_template: "auto", "grid4", "grid6" or "hero5"
        fit_mode: "cover" crops to fill, "contain" letterboxes
        bar_fill: Letterbox fill, "white", "black" or "blur"
        show_labels: Number cells in the preview
        show_separators: Draw a 1px line around each cell
        filter_preset: Active preset name or "custom"
        brightness..blur: Filter parameters, see photo_sheets.filters
        nudge_step: Percent moved per nudge (0.5-20)

    Example:
        >>> opts = SheetOptions(layout_template="grid4", photos_per_page=12)
        >>> opts.effective_per_page
        4
    """

    photos_per_page: Any = 6
    orientation: str = "portrait"
    margin_mm: Any = 8
    gap_mm: Any = 3
    layout_template: str = "auto"
    fit_mode: str = "cover"
    bar_fill: str = "white"
    show_labels: bool = False
    show_separators: bool = True
    filter_preset: str = "none"
    brightness: Any = 100
    contrast: Any = 100
    saturation: Any = 100
    sepia: Any = 0
    grayscale: Any = 0
    hue: Any = 0
    blur: Any = 0
    nudge_step: Any = 2

    def resolved(self) -> "SheetOptions":
        """Copy with every field coerced into its valid range."""
        defaults = SheetOptions()
        values: Dict[str, Any] = {}
        for f in fields(self):
            raw = getattr(self, f.name)
            default = getattr(defaults, f.name)
            if f.name in NUMERIC_RANGES:
                low, high = NUMERIC_RANGES[f.name]
                values[f.name] = clamp(coerce_number(raw, default), low, high)
            elif f.name in CHOICES:
                if raw in CHOICES[f.name]:
                    values[f.name] = raw
                else:
                    logger.debug(f"Ignoring invalid {f.name}={raw!r}")
                    values[f.name] = default
            else:
                values[f.name] = coerce_flag(raw, default)
        values["photos_per_page"] = int(values["photos_per_page"])
        return SheetOptions(**values)

    @property
    def effective_per_page(self) -> int:
        """Photos per page after a curated template has had its say."""
        forced = forced_per_page(self.layout_template)
        if forced is not None:
            return forced
        return int(self.resolved().photos_per_page)

    @property
    def filters(self) -> FilterValues:
        opts = self.resolved()
        return FilterValues(**{name: getattr(opts, name) for name in FILTER_NAMES})

    @property
    def geometry(self) -> PageGeometry:
        opts = self.resolved()
        return PageGeometry(opts.orientation, opts.margin_mm, opts.gap_mm)

    def apply_preset(self, preset: str) -> None:
        """Select a preset, overwriting all seven filter parameters."""
        if preset not in PRESETS:
            # "custom" or unknown: nothing to copy, just record the choice
            self.filter_preset = "custom"
            return
        values = preset_values(preset)
        self.filter_preset = preset
        for name in FILTER_NAMES:
            setattr(self, name, getattr(values, name))

    def set_filter(self, name: str, value: Any) -> None:
        """Edit one filter parameter by hand; the preset becomes "custom"."""
        if name not in FILTER_RANGES:
            raise KeyError(f"Unknown filter parameter: {name}")
        setattr(self, name, value)
        self.filter_preset = "custom"

    def reset_filters(self) -> None:
        self.apply_preset("none")

    def updated(self, **changes: Any) -> "SheetOptions":
        return replace(self, **changes)
