"""
Module: photo_sheets.layout.geometry

Purpose:
    Unit conversion and A4 page geometry.
    Pure functions, no dependencies on the rest of the package.

Key Functions:
    - mm_to_px(): Millimetres to CSS-equivalent pixels (96 DPI)
    - page_size_mm(): A4 dimensions for an orientation
    - content_size_mm(): Area left for the grid once margins are removed
    - margin_too_large(): Whether a margin leaves no printable area

Key Classes:
    - PageGeometry: Resolved page, margin and gap sizes

Used By:
    - photo_sheets.layout.planner: Aspect comparisons
    - photo_sheets.session: Render state construction
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# 96 DPI / 25.4 mm per inch
MM_TO_PX = 3.7795275591

A4_WIDTH_MM = 210
A4_HEIGHT_MM = 297

# Content area never collapses below this, even with absurd margins
MIN_CONTENT_MM = 10

ORIENTATIONS = ("portrait", "landscape")


def mm_to_px(mm: float) -> int:
    """Convert millimetres to whole pixels at 96 DPI."""
    return int(round(mm * MM_TO_PX))


def page_size_mm(orientation: str) -> Tuple[float, float]:
    """
    Resolve A4 page size for an orientation.

    Args:
        orientation: "portrait" or "landscape" (anything else is portrait)

    Returns:
        (width_mm, height_mm)

    Example:
        >>> page_size_mm("landscape")
        (297, 210)
    """
    if orientation == "landscape":
        return (A4_HEIGHT_MM, A4_WIDTH_MM)
    return (A4_WIDTH_MM, A4_HEIGHT_MM)


def content_size_mm(orientation: str, margin_mm: float) -> Tuple[float, float]:
    """Width and height left for the grid after removing margins on both sides."""
    width, height = page_size_mm(orientation)
    return (
        max(MIN_CONTENT_MM, width - margin_mm * 2),
        max(MIN_CONTENT_MM, height - margin_mm * 2),
    )


def margin_too_large(orientation: str, margin_mm: float) -> bool:
    """True when the margins consume the short side of the page entirely."""
    width, height = page_size_mm(orientation)
    return margin_mm * 2 >= min(width, height)


@dataclass(frozen=True)
class PageGeometry:
    """
    Resolved page geometry in millimetres (immutable).

    Attributes:
        orientation: "portrait" or "landscape"
        margin_mm: Margin applied on every side
        gap_mm: Spacing between grid cells

    Example:
        >>> geo = PageGeometry("portrait", margin_mm=8)
        >>> geo.content_mm
        (194, 281)
    """

    orientation: str = "portrait"
    margin_mm: float = 8
    gap_mm: float = 3

    def __post_init__(self) -> None:
        if self.orientation not in ORIENTATIONS:
            raise ValueError(f"orientation must be one of {ORIENTATIONS}: {self.orientation!r}")

    @property
    def page_mm(self) -> Tuple[float, float]:
        return page_size_mm(self.orientation)

    @property
    def content_mm(self) -> Tuple[float, float]:
        return content_size_mm(self.orientation, self.margin_mm)

    @property
    def page_px(self) -> Tuple[int, int]:
        width, height = self.page_mm
        return (mm_to_px(width), mm_to_px(height))

    @property
    def margin_px(self) -> int:
        return mm_to_px(self.margin_mm)

    @property
    def gap_px(self) -> int:
        return mm_to_px(self.gap_mm)

    @property
    def is_printable(self) -> bool:
        """False when the margin leaves nothing to print on."""
        return not margin_too_large(self.orientation, self.margin_mm)


def cell_rect(
    cell,
    cols: int,
    rows: int,
    page_size: Tuple[float, float],
    margin: float,
    gap: float,
) -> Tuple[float, float, float, float]:
    """
    Rectangle of a cell on the page, in the units of page_size.

    Tracks share the content area equally after gaps are removed, the
    same way an equal-fraction CSS grid does.

    Returns:
        (left, top, width, height)

    Example:
        >>> cell_rect(Cell(2, 1), 2, 2, (220, 320), margin=10, gap=0)
        (110.0, 10.0, 100.0, 150.0)
    """
    page_w, page_h = page_size
    track_w = max(0.0, (page_w - 2 * margin - gap * (cols - 1)) / cols)
    track_h = max(0.0, (page_h - 2 * margin - gap * (rows - 1)) / rows)
    left = margin + (cell.col - 1) * (track_w + gap)
    top = margin + (cell.row - 1) * (track_h + gap)
    width = cell.col_span * track_w + (cell.col_span - 1) * gap
    height = cell.row_span * track_h + (cell.row_span - 1) * gap
    return (float(left), float(top), float(width), float(height))
