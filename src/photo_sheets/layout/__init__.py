"""
Module: photo_sheets.layout

Purpose:
    Page geometry, grid planning and pagination for photo sheets.

Key Functions:
    - plan(): Resolve a template to a grid
    - paginate(): Split photos into pages
    - scale_for(): Preview shrink factor

Key Classes:
    - PageGeometry: A4 page, margin and gap sizes
    - LayoutTemplate: Grid with ordered cells
    - Page: Photos paired with cells

Used By:
    - photo_sheets.session: Render state construction
"""

from .geometry import PageGeometry, mm_to_px, page_size_mm, content_size_mm, margin_too_large, cell_rect
from .models import Photo, Cell, LayoutTemplate, Page, LayoutResult
from .planner import plan, choose_grid, grid_score, forced_per_page, TEMPLATES
from .paginator import paginate, paginate_layout
from .preview import scale_for

__all__ = [
    # Geometry
    "PageGeometry",
    "mm_to_px",
    "page_size_mm",
    "content_size_mm",
    "margin_too_large",
    "cell_rect",
    # Models
    "Photo",
    "Cell",
    "LayoutTemplate",
    "Page",
    "LayoutResult",
    # Planning
    "plan",
    "choose_grid",
    "grid_score",
    "forced_per_page",
    "TEMPLATES",
    "paginate",
    "paginate_layout",
    "scale_for",
]
