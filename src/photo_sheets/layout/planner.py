"""
Module: photo_sheets.layout.planner

Purpose:
    Choose the grid for a page. Curated templates return a hand-authored
    cell list; the automatic template searches column counts for the cell
    shape closest to a 3:2 landscape photo.

Key Functions:
    - plan(): Resolve a template key to a LayoutTemplate
    - choose_grid(): Automatic column/row search
    - grid_score(): Score a single candidate grid

Algorithm:
    For count photos and every cols in [1, count]:
    1. rows = ceil(count / cols)
    2. cell_aspect = (width / cols) / (height / rows)
    3. score = |ln(cell_aspect / 1.5)| + 0.08 * (cols * rows - count)
    Lowest score wins; ties keep the smallest cols.

Dependencies:
    - photo_sheets.layout.models: Cell, LayoutTemplate

Used By:
    - photo_sheets.session: Render state construction
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from .models import Cell, LayoutTemplate

logger = logging.getLogger(__name__)

TARGET_ASPECT = 3 / 2
EMPTY_CELL_PENALTY = 0.08
MIN_PER_PAGE = 1
MAX_PER_PAGE = 64

TEMPLATES = ("auto", "grid4", "grid6", "hero5")

# Photos per page imposed by curated templates
FORCED_PER_PAGE = {
    "grid4": 4,
    "grid6": 6,
    "hero5": 5,
}


def grid_score(count: int, cols: int, content_width: float, content_height: float) -> float:
    """
    Score a candidate grid; lower is better.

    Args:
        count: Photos to place
        cols: Candidate column count
        content_width: Width available for the grid
        content_height: Height available for the grid

    Returns:
        Aspect mismatch against 3:2 plus a penalty per wasted cell
    """
    rows = math.ceil(count / cols)
    cell_aspect = (content_width / cols) / (content_height / rows)
    return abs(math.log(cell_aspect / TARGET_ASPECT)) + EMPTY_CELL_PENALTY * (cols * rows - count)


def choose_grid(count: int, content_width: float, content_height: float) -> Tuple[int, int]:
    """
    Pick (cols, rows) for count photos in the given content area.

    Example:
        >>> choose_grid(1, 194, 281)
        (1, 1)
    """
    count = max(MIN_PER_PAGE, min(MAX_PER_PAGE, int(count)))
    best_cols = 1
    best_score = math.inf
    for cols in range(1, count + 1):
        score = grid_score(count, cols, content_width, content_height)
        # Strict comparison keeps the first (smallest cols) on ties
        if score < best_score:
            best_cols, best_score = cols, score
    return best_cols, math.ceil(count / best_cols)


def unit_grid(cols: int, rows: int) -> Tuple[Cell, ...]:
    """Row-major unit cells for a cols x rows grid."""
    cells: List[Cell] = []
    for row in range(1, rows + 1):
        for col in range(1, cols + 1):
            cells.append(Cell(col=col, row=row))
    return tuple(cells)


def forced_per_page(template: str) -> Optional[int]:
    """Photos per page a curated template imposes, or None for auto."""
    return FORCED_PER_PAGE.get(template)


def plan(
    template: str,
    requested_per_page: int,
    content_width: float,
    content_height: float,
) -> LayoutTemplate:
    """
    Resolve a template key into a page grid.

    Curated templates ignore requested_per_page. Unknown keys are
    treated as "auto".

    Args:
        template: One of TEMPLATES
        requested_per_page: Photos per page for the automatic template
        content_width: Content area width (any unit, only the ratio matters)
        content_height: Content area height

    Returns:
        LayoutTemplate with cells in reading order

    Example:
        >>> plan("grid6", 12, 194, 281).cells[-1]
        Cell(col=3, row=2, col_span=1, row_span=1)
    """
    if template == "grid4":
        return LayoutTemplate("grid4", "2 x 2 (4)", 4, 2, 2, unit_grid(2, 2))
    if template == "grid6":
        return LayoutTemplate("grid6", "3 x 2 (6)", 6, 3, 2, unit_grid(3, 2))
    if template == "hero5":
        cells = (Cell(col=1, row=1, col_span=2, row_span=4),) + tuple(
            Cell(col=3, row=row) for row in range(1, 5)
        )
        return LayoutTemplate("hero5", "1 large + 4 small (5)", 5, 3, 4, cells)

    if template != "auto":
        logger.warning(f"Unknown layout template {template!r}, using auto")

    count = max(MIN_PER_PAGE, min(MAX_PER_PAGE, int(requested_per_page)))
    cols, rows = choose_grid(count, content_width, content_height)
    logger.debug(f"Auto grid for {count} photos: {cols} x {rows}")
    return LayoutTemplate("auto", f"Auto ({cols} x {rows})", count, cols, rows, unit_grid(cols, rows))
