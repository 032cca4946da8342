"""
Module: photo_sheets.interaction.controller

Purpose:
    Finite-state machine turning abstract input events into CropStore
    mutations. Host UIs translate their native pointer/keyboard/field
    events into this vocabulary.

States:
    - Idle: nothing selected
    - Selected(id): one photo selected
    - Dragging(id, session): selected and being panned

Events:
    click, pointer_down, pointer_move, pointer_up, pointer_cancel,
    double_click, nudge, set_zoom, set_rotation, rotate_by,
    folder_changed, clear

Invariants:
    - At most one drag session; it always belongs to the selected photo
    - Events naming a photo other than the active drag's are ignored
    - Crop writes already made are never rolled back

Dependencies:
    - photo_sheets.crops.store: CropStore

Used By:
    - photo_sheets.session: Editing API
    - photo_sheets.gui.sheet_view: Qt event translation
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from photo_sheets.crops.models import Crop, clamp, coerce_number
from photo_sheets.crops.store import CropStore

logger = logging.getLogger(__name__)

PRIMARY_BUTTON = 0
NUDGE_RANGE = (0.5, 20.0)
DEFAULT_NUDGE_STEP = 2.0


class InteractionState(enum.Enum):
    IDLE = "idle"
    SELECTED = "selected"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class DragSession:
    """
    Pointer drag in progress (immutable).

    Attributes:
        photo_id: Photo being panned
        origin_x: Pointer x at pointer-down (client pixels)
        origin_y: Pointer y at pointer-down
        start_x: Crop x at pointer-down (percent)
        start_y: Crop y at pointer-down
    """

    photo_id: str
    origin_x: float
    origin_y: float
    start_x: float
    start_y: float

    def position_for(self, x: float, y: float, cell_width: float, cell_height: float) -> tuple[float, float]:
        """Unclamped crop position for a pointer at (x, y) over a cell of the given size."""
        new_x = self.start_x + ((x - self.origin_x) / cell_width) * 100 if cell_width > 0 else self.start_x
        new_y = self.start_y + ((y - self.origin_y) / cell_height) * 100 if cell_height > 0 else self.start_y
        return new_x, new_y


class InteractionController:
    """
    Selection and drag state for one editing surface.

    Example:
        >>> ctrl = InteractionController(store)
        >>> ctrl.pointer_down("a.jpg", 100, 0)
        True
        >>> ctrl.pointer_move("a.jpg", 150, 0, cell_width=200, cell_height=100).x
        75.0
    """

    def __init__(self, store: CropStore, nudge_step: float = DEFAULT_NUDGE_STEP) -> None:
        self._store = store
        self._selected: Optional[str] = None
        self._drag: Optional[DragSession] = None
        self.nudge_step = nudge_step

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> InteractionState:
        if self._drag is not None:
            return InteractionState.DRAGGING
        if self._selected is not None:
            return InteractionState.SELECTED
        return InteractionState.IDLE

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected

    @property
    def drag(self) -> Optional[DragSession]:
        return self._drag

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    @property
    def nudge_step(self) -> float:
        return self._nudge_step

    @nudge_step.setter
    def nudge_step(self, value: Any) -> None:
        self._nudge_step = clamp(coerce_number(value, DEFAULT_NUDGE_STEP), *NUDGE_RANGE)

    def selected_crop(self) -> Optional[Crop]:
        if self._selected is None:
            return None
        return self._store.get(self._selected)

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def click(self, photo_id: Optional[str]) -> None:
        """Select a photo. Clicking a different photo discards any drag."""
        if photo_id is None:
            return
        if self._drag is not None and self._drag.photo_id != photo_id:
            logger.debug(f"Click on {photo_id} cancels drag of {self._drag.photo_id}")
            self._drag = None
        self._selected = photo_id

    def pointer_down(self, photo_id: Optional[str], x: float, y: float, button: int = PRIMARY_BUTTON) -> bool:
        """
        Start a drag session on a photo.

        Ignored for empty cells, non-primary buttons, and while another
        photo is being dragged.

        Returns:
            True if a drag session started
        """
        if photo_id is None or button != PRIMARY_BUTTON:
            return False
        if self._drag is not None and self._drag.photo_id != photo_id:
            return False
        crop = self._store.get(photo_id)
        self._selected = photo_id
        self._drag = DragSession(photo_id, float(x), float(y), crop.x, crop.y)
        return True

    def pointer_move(
        self,
        photo_id: Optional[str],
        x: float,
        y: float,
        cell_width: float,
        cell_height: float,
    ) -> Optional[Crop]:
        """
        Pan the dragged photo.

        Returns:
            The stored crop, or None if the event was ignored
        """
        drag = self._drag
        if drag is None or photo_id != drag.photo_id:
            return None
        new_x, new_y = drag.position_for(x, y, cell_width, cell_height)
        return self._store.set(photo_id, {"x": new_x, "y": new_y})

    def pointer_up(self, photo_id: Optional[str]) -> None:
        """End the drag if it belongs to photo_id; selection stays."""
        if self._drag is not None and self._drag.photo_id == photo_id:
            self._drag = None

    def pointer_cancel(self, photo_id: Optional[str]) -> None:
        """Pointer capture lost; same as pointer_up."""
        self.pointer_up(photo_id)

    def double_click(self, photo_id: Optional[str]) -> Optional[Crop]:
        """Reset a photo's crop. Selection is left alone."""
        if photo_id is None:
            return None
        return self._store.reset(photo_id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def nudge(self, dx: float, dy: float) -> Optional[Crop]:
        """Move the selected photo's focal point by (dx, dy) steps."""
        if self._selected is None or self._drag is not None:
            return None
        crop = self._store.get(self._selected)
        return self._store.set(self._selected, {
            "x": crop.x + dx * self._nudge_step,
            "y": crop.y + dy * self._nudge_step,
        })

    def set_zoom(self, value: Any) -> Optional[Crop]:
        """Numeric zoom entry; the store clamps or ignores bad input."""
        if self._selected is None:
            return None
        return self._store.set(self._selected, {"zoom": value})

    def set_rotation(self, value: Any) -> Optional[Crop]:
        if self._selected is None:
            return None
        return self._store.set(self._selected, {"rotation": value})

    def rotate_by(self, delta: float) -> Optional[Crop]:
        """Rotate the selected photo relative to its current angle."""
        if self._selected is None:
            return None
        crop = self._store.get(self._selected)
        return self._store.set(self._selected, {"rotation": crop.rotation + coerce_number(delta, 0.0)})

    def folder_changed(self, photo_ids: Iterable[str]) -> None:
        """Drop selection and drag if the selected photo is gone."""
        present = set(photo_ids)
        if self._selected is not None and self._selected not in present:
            logger.debug(f"Selected photo {self._selected} no longer present")
            self.clear()
        elif self._drag is not None and self._drag.photo_id not in present:
            self._drag = None

    def clear(self) -> None:
        """Back to Idle."""
        self._selected = None
        self._drag = None

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def selection_text(self, name: str = "") -> str:
        """Status line describing the selected crop."""
        crop = self.selected_crop()
        if crop is None:
            return "Click a photo in the preview to select it."
        label = name or self._selected
        return (
            f"{label} | X: {crop.x:.1f}% | Y: {crop.y:.1f}% | "
            f"Zoom: {round(crop.zoom)}% | Rot: {crop.rotation:g}deg"
        )
