"""
Unit Tests for the interaction state machine.
"""

import pytest

from photo_sheets.crops.models import Crop, default_crop
from photo_sheets.crops.store import CropStore
from photo_sheets.interaction.controller import InteractionController, InteractionState


@pytest.fixture
def store(persistence, scheduler):
    return CropStore(persistence, scheduler)


@pytest.fixture
def ctrl(store):
    return InteractionController(store)


class TestSelection:

    def test_starts_idle(self, ctrl):
        assert ctrl.state is InteractionState.IDLE
        assert ctrl.selected_id is None
        assert ctrl.selected_crop() is None

    def test_click_selects(self, ctrl):
        ctrl.click("a.jpg")
        assert ctrl.state is InteractionState.SELECTED
        assert ctrl.selected_id == "a.jpg"

    def test_click_on_empty_space_keeps_selection(self, ctrl):
        ctrl.click("a.jpg")
        ctrl.click(None)
        assert ctrl.selected_id == "a.jpg"

    def test_click_on_other_photo_discards_drag(self, ctrl):
        ctrl.pointer_down("a.jpg", 0, 0)
        ctrl.click("b.jpg")
        assert ctrl.selected_id == "b.jpg"
        assert not ctrl.is_dragging

    def test_folder_change_without_selected_photo_goes_idle(self, ctrl):
        ctrl.pointer_down("a.jpg", 0, 0)
        ctrl.folder_changed(["b.jpg", "c.jpg"])
        assert ctrl.state is InteractionState.IDLE

    def test_folder_change_keeping_selected_photo_keeps_selection(self, ctrl):
        ctrl.click("a.jpg")
        ctrl.folder_changed(["a.jpg"])
        assert ctrl.selected_id == "a.jpg"


class TestDrag:

    def test_drag_scenario_moves_focal_point(self, ctrl, store):
        assert ctrl.pointer_down("a.jpg", 100, 40)
        assert ctrl.state is InteractionState.DRAGGING
        assert ctrl.drag.start_x == 50 and ctrl.drag.origin_x == 100

        crop = ctrl.pointer_move("a.jpg", 150, 40, cell_width=200, cell_height=100)

        assert crop.x == 75
        assert crop.y == 50
        assert store.get("a.jpg").x == 75

    def test_drag_is_relative_to_start_not_last_move(self, ctrl):
        ctrl.pointer_down("a.jpg", 0, 0)
        ctrl.pointer_move("a.jpg", 50, 0, 100, 100)
        crop = ctrl.pointer_move("a.jpg", 20, 0, 100, 100)
        assert crop.x == 70

    def test_drag_clamps(self, ctrl):
        ctrl.pointer_down("a.jpg", 0, 0)
        crop = ctrl.pointer_move("a.jpg", -1000, 1000, 100, 100)
        assert (crop.x, crop.y) == (0, 100)

    def test_pointer_up_ends_drag_and_keeps_selection(self, ctrl):
        ctrl.pointer_down("a.jpg", 0, 0)
        ctrl.pointer_up("a.jpg")
        assert ctrl.state is InteractionState.SELECTED
        assert ctrl.pointer_move("a.jpg", 10, 10, 100, 100) is None

    def test_pointer_cancel_commits_what_was_written(self, ctrl, store):
        ctrl.pointer_down("a.jpg", 0, 0)
        ctrl.pointer_move("a.jpg", 10, 0, 100, 100)
        ctrl.pointer_cancel("a.jpg")
        assert not ctrl.is_dragging
        assert store.get("a.jpg").x == 60

    def test_move_for_other_photo_is_ignored(self, ctrl, store):
        ctrl.pointer_down("a.jpg", 0, 0)
        assert ctrl.pointer_move("b.jpg", 50, 50, 100, 100) is None
        assert store.snapshot() == {}

    def test_second_pointer_down_on_other_photo_is_ignored(self, ctrl):
        ctrl.pointer_down("a.jpg", 0, 0)
        assert not ctrl.pointer_down("b.jpg", 5, 5)
        assert ctrl.drag.photo_id == "a.jpg"
        assert ctrl.selected_id == "a.jpg"

    def test_non_primary_button_is_ignored(self, ctrl):
        assert not ctrl.pointer_down("a.jpg", 0, 0, button=2)
        assert ctrl.state is InteractionState.IDLE

    def test_pointer_up_for_other_photo_is_ignored(self, ctrl):
        ctrl.pointer_down("a.jpg", 0, 0)
        ctrl.pointer_up("b.jpg")
        assert ctrl.is_dragging


class TestCommands:

    def test_double_click_resets_without_touching_selection(self, ctrl, store):
        store.set("b.jpg", {"x": 10, "zoom": 200, "rotation": 90})
        ctrl.click("a.jpg")

        crop = ctrl.double_click("b.jpg")

        assert crop == default_crop()
        assert store.get("b.jpg") == Crop(50, 50, 100, 0)
        assert ctrl.selected_id == "a.jpg"

    def test_double_click_while_dragging_still_resets(self, ctrl, store):
        ctrl.pointer_down("a.jpg", 0, 0)
        ctrl.pointer_move("a.jpg", 10, 0, 100, 100)
        assert ctrl.state is InteractionState.DRAGGING

        crop = ctrl.double_click("a.jpg")

        assert crop == default_crop()
        assert store.get("a.jpg") == default_crop()
        assert ctrl.selected_id == "a.jpg"

    def test_nudge_moves_by_step(self, ctrl):
        ctrl.click("a.jpg")
        ctrl.nudge_step = 5
        crop = ctrl.nudge(1, -1)
        assert (crop.x, crop.y) == (55, 45)

    def test_nudge_needs_selection(self, ctrl, store):
        assert ctrl.nudge(1, 0) is None
        assert store.snapshot() == {}

    def test_nudge_ignored_while_dragging(self, ctrl):
        ctrl.pointer_down("a.jpg", 0, 0)
        assert ctrl.nudge(1, 0) is None

    def test_nudge_step_is_clamped(self, ctrl):
        ctrl.nudge_step = 100
        assert ctrl.nudge_step == 20
        ctrl.nudge_step = 0
        assert ctrl.nudge_step == 0.5
        ctrl.nudge_step = "junk"
        assert ctrl.nudge_step == 2

    def test_set_zoom_and_rotation(self, ctrl):
        ctrl.click("a.jpg")
        assert ctrl.set_zoom(400).zoom == 250
        assert ctrl.set_rotation(-45).rotation == 315
        assert ctrl.set_zoom(None).zoom == 250

    def test_numeric_edits_need_selection(self, ctrl):
        assert ctrl.set_zoom(120) is None
        assert ctrl.set_rotation(10) is None
        assert ctrl.rotate_by(90) is None

    def test_rotate_by_wraps(self, ctrl):
        ctrl.click("a.jpg")
        assert ctrl.rotate_by(-90).rotation == 270
        assert ctrl.rotate_by(90).rotation == 0

    def test_clear(self, ctrl):
        ctrl.pointer_down("a.jpg", 0, 0)
        ctrl.clear()
        assert ctrl.state is InteractionState.IDLE


class TestSelectionText:

    def test_no_selection(self, ctrl):
        assert ctrl.selection_text() == "Click a photo in the preview to select it."

    def test_describes_selected_crop(self, ctrl):
        ctrl.click("holiday/a.jpg")
        ctrl.set_rotation(90)
        assert ctrl.selection_text("a.jpg") == "a.jpg | X: 50.0% | Y: 50.0% | Zoom: 100% | Rot: 90deg"
