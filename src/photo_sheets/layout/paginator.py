"""
Module: photo_sheets.layout.paginator

Purpose:
    Split the ordered photo list into pages of a fixed size.
    Only rule: fill each page completely before starting the next.

Key Functions:
    - paginate(): Main pagination function
    - paginate_layout(): Pagination paired with a template's cells

Dependencies:
    - photo_sheets.layout.models: Photo, Page, LayoutResult

Used By:
    - photo_sheets.session: Render state construction
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from .models import LayoutResult, LayoutTemplate, Page, Photo

logger = logging.getLogger(__name__)


def paginate(
    photos: Sequence[Photo],
    photos_per_page: int,
    cells: Sequence = (),
) -> List[Page]:
    """
    Chunk photos into consecutive pages.

    Every page holds exactly photos_per_page photos except possibly the
    last, which holds the remainder. Order is preserved.

    Args:
        photos: Photos in display order
        photos_per_page: Page capacity (must be >= 1)
        cells: Cells to attach to each page

    Returns:
        List of Pages (empty when there are no photos)

    Raises:
        ValueError: If photos_per_page is less than 1

    Example:
        >>> [p.photo_count for p in paginate(photos_14, 6)]
        [6, 6, 2]
    """
    if photos_per_page < 1:
        raise ValueError(f"photos_per_page must be positive: {photos_per_page}")

    cell_tuple = tuple(cells)
    pages: List[Page] = []
    for index, start in enumerate(range(0, len(photos), photos_per_page)):
        chunk = tuple(photos[start:start + photos_per_page])
        pages.append(Page(index=index, photos=chunk, cells=cell_tuple))
    return pages


def paginate_layout(photos: Sequence[Photo], template: LayoutTemplate) -> LayoutResult:
    """Paginate photos using a resolved template's capacity and cells."""
    pages = paginate(photos, template.photos_per_page, template.cells)
    logger.info(f"Paginated {len(photos)} photos onto {len(pages)} pages ({template.label})")
    return LayoutResult(pages=tuple(pages), template=template)
