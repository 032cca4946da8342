"""
Unit Tests for the layout planner.

Automatic grid search, curated templates and fallback behaviour.
"""

import math

import pytest

from photo_sheets.layout import planner
from photo_sheets.layout.models import Cell
from photo_sheets.layout.planner import choose_grid, forced_per_page, grid_score, plan


class TestAutoGrid:
    """Tests for the automatic template."""

    @pytest.mark.parametrize("width,height", [(194, 281), (281, 194), (10, 10), (500, 20), (20, 500)])
    def test_plan_when_any_count_then_grid_holds_every_photo(self, width, height):
        """cols x rows always has room for the requested photos."""
        for count in range(1, 65):
            layout = plan("auto", count, width, height)
            assert layout.cols >= 1 and layout.rows >= 1
            assert layout.cols * layout.rows >= count
            assert len(layout.cells) == layout.cols * layout.rows

    def test_plan_when_five_on_portrait_a4_then_picks_lower_scoring_candidate(self):
        """Five photos on a portrait page choose between 2x3 and 3x2 by score."""
        two_by_three = grid_score(5, 2, 194, 281)
        three_by_two = grid_score(5, 3, 194, 281)
        expected = (2, 3) if two_by_three < three_by_two else (3, 2)

        layout = plan("auto", 5, 194, 281)

        assert (layout.cols, layout.rows) == expected
        assert expected == (2, 3)

    def test_grid_score_matches_formula(self):
        rows = 3
        aspect = (194 / 2) / (281 / rows)
        expected = abs(math.log(aspect / 1.5)) + 0.08 * (2 * rows - 5)
        assert grid_score(5, 2, 194, 281) == pytest.approx(expected)

    def test_choose_grid_when_scores_tie_then_keeps_smallest_cols(self, monkeypatch):
        monkeypatch.setattr(planner, "grid_score", lambda *args: 1.0)
        assert choose_grid(7, 194, 281) == (1, 7)

    def test_plan_when_count_out_of_range_then_clamped(self):
        assert plan("auto", 0, 194, 281).photos_per_page == 1
        assert plan("auto", 500, 194, 281).photos_per_page == 64

    def test_plan_cells_are_row_major_unit_cells(self):
        layout = plan("auto", 6, 194, 281)
        assert (layout.cols, layout.rows) == (2, 3)
        assert layout.cells[:3] == (Cell(1, 1), Cell(2, 1), Cell(1, 2))
        assert all(c.col_span == 1 and c.row_span == 1 for c in layout.cells)

    def test_plan_label_names_the_grid(self):
        assert plan("auto", 6, 194, 281).label == "Auto (2 x 3)"


class TestCuratedTemplates:
    """Tests for hand-authored templates."""

    def test_grid4_ignores_requested_count(self):
        layout = plan("grid4", 12, 194, 281)
        assert (layout.cols, layout.rows, layout.photos_per_page) == (2, 2, 4)
        assert layout.label == "2 x 2 (4)"

    def test_grid6_is_three_by_two(self):
        layout = plan("grid6", 1, 194, 281)
        assert (layout.cols, layout.rows, layout.photos_per_page) == (3, 2, 6)
        assert layout.cells[-1] == Cell(col=3, row=2)

    def test_hero5_has_large_cell_then_column_of_four(self):
        layout = plan("hero5", 6, 194, 281)

        assert (layout.cols, layout.rows, layout.photos_per_page) == (3, 4, 5)
        assert layout.cells[0] == Cell(col=1, row=1, col_span=2, row_span=4)
        assert layout.cells[1:] == tuple(Cell(col=3, row=r) for r in range(1, 5))

    def test_forced_per_page(self):
        assert forced_per_page("grid4") == 4
        assert forced_per_page("hero5") == 5
        assert forced_per_page("auto") is None

    def test_unknown_template_falls_back_to_auto(self, caplog):
        with caplog.at_level("WARNING"):
            layout = plan("mosaic", 4, 194, 281)
        assert layout.key == "auto"
        assert "mosaic" in caplog.text
