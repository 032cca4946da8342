"""
Unit Tests for SheetSession and its render snapshot.
"""

import pytest

from photo_sheets.crops.models import Crop
from photo_sheets.options import NUMERIC_RANGES, SheetOptions
from photo_sheets.session import EMPTY_ADVISORY, MARGIN_ADVISORY, SheetSession


@pytest.fixture
def session(persistence, scheduler, photos):
    s = SheetSession(SheetOptions(), persistence=persistence, scheduler=scheduler)
    s.load_photos(photos)
    return s


class TestRender:

    def test_empty_session(self, persistence, scheduler):
        state = SheetSession(persistence=persistence, scheduler=scheduler).render()
        assert state.pages == ()
        assert state.photo_count == 0
        assert state.advisory is None
        assert not state.can_print

    def test_pages_follow_layout(self, session):
        state = session.render()
        assert (state.layout.cols, state.layout.rows) == (2, 3)
        assert [len(p.cells) for p in state.pages] == [6, 6, 2]
        assert state.can_print

    def test_cell_numbers_run_across_pages(self, session):
        state = session.render()
        assert [c.number for c in state.pages[1].cells] == [7, 8, 9, 10, 11, 12]
        assert state.pages[2].cells[-1].number == 14

    def test_curated_template_changes_page_split(self, session):
        session.options.layout_template = "hero5"
        state = session.render()
        assert [len(p.cells) for p in state.pages] == [5, 5, 4]
        assert state.pages[0].cells[0].cell.row_span == 4

    def test_margin_is_clamped_to_range(self, session):
        session.options.margin_mm = 105
        state = session.render()
        assert state.margin_px == 151
        assert state.advisory is None

    def test_large_margin_blocks_rendering(self, session, monkeypatch):
        monkeypatch.setitem(NUMERIC_RANGES, "margin_mm", (0, 200))
        session.options.margin_mm = 105
        state = session.render()
        assert state.pages == ()
        assert state.advisory == MARGIN_ADVISORY
        assert not state.can_print
        assert session.advisory() == MARGIN_ADVISORY

    def test_render_carries_crops_and_selection(self, session, photos):
        session.crops.set(photos[1].id, {"x": 70, "zoom": 150})
        session.controller.click(photos[1].id)

        cell = session.render().pages[0].cells[1]

        assert cell.crop == Crop(x=70, zoom=150)
        assert cell.transform.translate == (-10.0, 0.0)
        assert cell.selected

    def test_render_resolves_options(self, session):
        session.options.fit_mode = "contain"
        session.options.bar_fill = "blur"
        session.options.apply_preset("bw")
        state = session.render()
        assert state.backdrop
        assert state.filters.grayscale == 100
        assert "grayscale(100%)" in state.filter_css

    def test_page_size_follows_orientation(self, session):
        session.options.orientation = "landscape"
        assert session.render().page_size_px == (1123, 794)


class TestEditing:

    def test_nudge_uses_configured_step(self, session, photos):
        session.options.nudge_step = 10
        session.controller.click(photos[0].id)
        crop = session.nudge(-1, 0)
        assert crop.x == 40

    def test_load_photos_drops_stale_selection(self, session, photos):
        session.controller.click(photos[0].id)
        session.load_photos(photos[1:])
        assert session.controller.selected_id is None

    def test_reset_all_crops(self, session, photos):
        session.crops.set(photos[0].id, {"x": 10})
        session.reset_all_crops()
        assert session.crops.get(photos[0].id) == Crop()

    def test_selection_text_uses_photo_name(self, session, photos):
        session.controller.click(photos[2].id)
        assert session.selection_text().startswith("img3.jpg | X: 50.0%")

    def test_close_flushes_crops(self, session, persistence, photos):
        session.crops.set(photos[0].id, {"x": 10})
        session.close()
        assert persistence.saved[photos[0].id].x == 10


class TestSummary:

    def test_empty_summary(self, persistence, scheduler):
        summary = SheetSession(persistence=persistence, scheduler=scheduler).summary()
        assert summary.lines == [EMPTY_ADVISORY]

    def test_summary_lines(self, session):
        session.options.apply_preset("vintage")
        summary = session.summary()
        assert summary.photos == 14
        assert summary.pages == 3
        assert "Layout: Auto (2 x 3)" in summary.lines
        assert "Filter: Vintage" in summary.lines

    def test_preview_scale(self, session):
        assert session.preview_scale(405) == 0.5
        assert session.preview_scale(0) == 1.0
