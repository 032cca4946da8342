"""
Module: photo_sheets.layout.models

Purpose:
    Data models for sheet layout.
    Immutable dataclasses representing photos, grid cells, templates and pages.

Key Classes:
    - Photo: One image delivered by the folder listing
    - Cell: A grid slot with 1-based position and span
    - LayoutTemplate: Grid shape plus ordered cell list
    - Page: Photos paired with cells for one sheet
    - LayoutResult: Final pagination output

Dependencies:
    - dataclasses (std)

Used By:
    - photo_sheets.layout.planner: Creates LayoutTemplates
    - photo_sheets.layout.paginator: Creates Pages
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Tuple


@dataclass(frozen=True)
class Photo:
    """
    A photo from the selected folder (immutable).

    Attributes:
        id: Stable identity, unique for the session (folder-relative path)
        name: File name shown to the user
        source: Opaque handle used to decode the image (usually a Path)
    """

    id: str
    name: str
    source: Any = None


@dataclass(frozen=True)
class Cell:
    """
    One grid slot on a page. Indices are 1-based.

    Example:
        >>> Cell(col=1, row=1, col_span=2, row_span=4).col_end
        3
    """

    col: int
    row: int
    col_span: int = 1
    row_span: int = 1

    @property
    def col_end(self) -> int:
        """Exclusive end column."""
        return self.col + self.col_span

    @property
    def row_end(self) -> int:
        """Exclusive end row."""
        return self.row + self.row_span


@dataclass(frozen=True)
class LayoutTemplate:
    """
    Resolved grid for a page (immutable).

    Attributes:
        key: Template key ("auto", "grid4", "grid6", "hero5")
        label: Human readable description
        photos_per_page: How many photos fill one page
        cols: Grid column count
        rows: Grid row count
        cells: Cells in reading order, one per photo slot
    """

    key: str
    label: str
    photos_per_page: int
    cols: int
    rows: int
    cells: Tuple[Cell, ...]


@dataclass(frozen=True)
class Page:
    """
    Photos for a single sheet, paired with cells by position.

    The last page of a layout may hold fewer photos than cells.
    """

    index: int
    photos: Tuple[Photo, ...]
    cells: Tuple[Cell, ...]

    def __iter__(self) -> Iterator[Tuple[Cell, Photo]]:
        return iter(zip(self.cells, self.photos))

    @property
    def photo_count(self) -> int:
        return len(self.photos)

    @property
    def is_full(self) -> bool:
        return len(self.photos) == len(self.cells)


@dataclass(frozen=True)
class LayoutResult:
    """
    Pagination output.

    Example:
        >>> result = LayoutResult(pages=(page1, page2), template=template)
        >>> result.page_count
        2
    """

    pages: Tuple[Page, ...]
    template: LayoutTemplate

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def photo_count(self) -> int:
        return sum(p.photo_count for p in self.pages)

    @property
    def page_sizes(self) -> list[int]:
        return [p.photo_count for p in self.pages]
