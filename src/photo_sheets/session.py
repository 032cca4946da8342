"""
Module: photo_sheets.session

Purpose:
    One editing session: the current folder's photos, the options, the crop
    store and the interaction controller, plus the synchronous render
    snapshot handed to preview and print.

Key Classes:
    - SheetSession: Orchestrates the components
    - RenderState: Snapshot of everything needed to draw the pages
    - RenderedPage / RenderedCell: Per-page and per-cell render data

Dependencies:
    - photo_sheets.layout: Planning and pagination
    - photo_sheets.crops: Crop store and transforms
    - photo_sheets.interaction: Editing state machine

Used By:
    - photo_sheets.cli: Export command
    - photo_sheets.gui.main_window: Preview and print
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from photo_sheets.crops.models import Crop
from photo_sheets.crops.persistence import CropPersistence, MemoryCropPersistence
from photo_sheets.crops.scheduling import Scheduler
from photo_sheets.crops.store import CropStore
from photo_sheets.crops.transform import CellTransform, compose, needs_backdrop
from photo_sheets.filters import PRESET_LABELS, FilterValues
from photo_sheets.interaction.controller import InteractionController
from photo_sheets.layout.models import Cell, LayoutTemplate, Photo
from photo_sheets.layout.paginator import paginate_layout
from photo_sheets.layout.planner import plan
from photo_sheets.layout.preview import scale_for
from photo_sheets.options import SheetOptions

logger = logging.getLogger(__name__)

MARGIN_ADVISORY = "The margin is too large for an A4 page. Reduce it to render pages."
EMPTY_ADVISORY = "No photos loaded. Choose a folder to start."


@dataclass(frozen=True)
class RenderedCell:
    """
    One photo in its cell.

    Attributes:
        cell: Grid position and span
        photo: The photo
        crop: Crop at snapshot time
        transform: Composed transform for the crop
        number: 1-based photo number across all pages (cell label)
        selected: Whether this photo is selected
    """

    cell: Cell
    photo: Photo
    crop: Crop
    transform: CellTransform
    number: int
    selected: bool = False


@dataclass(frozen=True)
class RenderedPage:
    index: int
    cells: Tuple[RenderedCell, ...]


@dataclass(frozen=True)
class RenderState:
    """
    Everything needed to draw or print the pages, frozen at one moment.

    pages is empty when there are no photos or when an advisory blocks
    rendering (margin too large).
    """

    pages: Tuple[RenderedPage, ...]
    layout: LayoutTemplate
    page_size_px: Tuple[int, int]
    margin_px: int
    gap_px: int
    orientation: str
    fit_mode: str
    bar_fill: str
    filters: FilterValues
    show_labels: bool
    show_separators: bool
    photo_count: int
    advisory: Optional[str] = None

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def backdrop(self) -> bool:
        """Contained photos get a blurred cover copy underneath."""
        return needs_backdrop(self.fit_mode, self.bar_fill)

    @property
    def can_print(self) -> bool:
        return bool(self.pages) and self.advisory is None

    @property
    def filter_css(self) -> str:
        return self.filters.css()


@dataclass
class SessionSummary:
    photos: int
    pages: int
    layout: str
    orientation: str
    filter_label: str
    lines: List[str] = field(default_factory=list)


class SheetSession:
    """
    Photos + options + crops for one editing surface.

    Example:
        >>> session = SheetSession()
        >>> session.load_photos(list_photos(Path("holiday")))
        >>> session.render().page_count
        3
    """

    def __init__(
        self,
        options: Optional[SheetOptions] = None,
        persistence: Optional[CropPersistence] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.options = options or SheetOptions()
        self.crops = CropStore(persistence or MemoryCropPersistence(), scheduler=scheduler)
        self.controller = InteractionController(self.crops, nudge_step=self.options.nudge_step)
        self._photos: Tuple[Photo, ...] = ()

    @property
    def photos(self) -> Tuple[Photo, ...]:
        return self._photos

    def load_photos(self, photos: Sequence[Photo]) -> None:
        """Replace the folder listing; stale selection and drags are dropped."""
        self._photos = tuple(photos)
        self.controller.folder_changed(p.id for p in self._photos)
        logger.info(f"Session holds {len(self._photos)} photos")

    def photo_by_id(self, photo_id: Optional[str]) -> Optional[Photo]:
        for photo in self._photos:
            if photo.id == photo_id:
                return photo
        return None

    def reset_all_crops(self) -> None:
        self.crops.reset_all(p.id for p in self._photos)

    def layout(self) -> LayoutTemplate:
        opts = self.options.resolved()
        width, height = opts.geometry.content_mm
        return plan(opts.layout_template, opts.photos_per_page, width, height)

    def advisory(self) -> Optional[str]:
        """Single user-visible message blocking page rendering, if any."""
        if not self.options.geometry.is_printable:
            return MARGIN_ADVISORY
        return None

    def nudge(self, dx: float, dy: float) -> Optional[Crop]:
        """Nudge the selected photo by the configured step."""
        self.controller.nudge_step = self.options.resolved().nudge_step
        return self.controller.nudge(dx, dy)

    def render(self) -> RenderState:
        """Synchronous snapshot of the current pages, transforms and filters."""
        opts = self.options.resolved()
        geometry = opts.geometry
        template = self.layout()
        advisory = self.advisory()

        pages: List[RenderedPage] = []
        if advisory is None:
            result = paginate_layout(self._photos, template)
            selected = self.controller.selected_id
            for page in result.pages:
                cells = []
                for slot, (cell, photo) in enumerate(page):
                    crop = self.crops.get(photo.id)
                    cells.append(RenderedCell(
                        cell=cell,
                        photo=photo,
                        crop=crop,
                        transform=compose(crop, opts.fit_mode),
                        number=page.index * template.photos_per_page + slot + 1,
                        selected=photo.id == selected,
                    ))
                pages.append(RenderedPage(index=page.index, cells=tuple(cells)))
        else:
            logger.debug(f"Rendering blocked: {advisory}")

        return RenderState(
            pages=tuple(pages),
            layout=template,
            page_size_px=geometry.page_px,
            margin_px=geometry.margin_px,
            gap_px=geometry.gap_px,
            orientation=opts.orientation,
            fit_mode=opts.fit_mode,
            bar_fill=opts.bar_fill,
            filters=opts.filters,
            show_labels=opts.show_labels,
            show_separators=opts.show_separators,
            photo_count=len(self._photos),
            advisory=advisory,
        )

    def preview_scale(self, container_width_px: float) -> float:
        return scale_for(container_width_px, self.options.geometry.page_px[0])

    def summary(self) -> SessionSummary:
        """Figures for the summary panel."""
        state = self.render()
        opts = self.options.resolved()
        summary = SessionSummary(
            photos=len(self._photos),
            pages=state.page_count,
            layout=state.layout.label,
            orientation=opts.orientation,
            filter_label=PRESET_LABELS.get(opts.filter_preset, PRESET_LABELS["custom"]),
        )
        if not self._photos:
            summary.lines.append(EMPTY_ADVISORY)
        else:
            summary.lines.extend([
                f"Photos: {summary.photos}",
                f"A4 sheets: {summary.pages}",
                f"Layout: {summary.layout}",
                f"Orientation: {summary.orientation}",
                f"Filter: {summary.filter_label}",
            ])
        return summary

    def selection_text(self) -> str:
        photo = self.photo_by_id(self.controller.selected_id)
        return self.controller.selection_text(photo.name if photo else "")

    def close(self) -> None:
        """Flush pending crop writes."""
        self.crops.close()
