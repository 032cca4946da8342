"""
Tests for the photo-sheets command line.
"""

import json

from photo_sheets.cli import main


class TestPlanCommand:

    def test_plan_prints_grid_and_pages(self, capsys):
        assert main(["plan", "14", "--per-page", "6"]) == 0
        out = capsys.readouterr().out
        assert "Layout: Auto (2 x 3)" in out
        assert "Pages: 3 [6, 6, 2]" in out

    def test_plan_with_curated_template(self, capsys):
        assert main(["plan", "12", "--template", "hero5"]) == 0
        assert "Pages: 3 [5, 5, 2]" in capsys.readouterr().out

    def test_plan_zero_photos(self, capsys):
        assert main(["plan", "0"]) == 0
        assert "Pages: 0 []" in capsys.readouterr().out


class TestExportCommand:

    def test_export_writes_pdf(self, photo_folder, tmp_path, capsys):
        out = tmp_path / "sheets.pdf"

        code = main(["export", str(photo_folder), "-o", str(out), "--per-page", "2", "--dpi", "20"])

        assert code == 0
        assert out.read_bytes().startswith(b"%PDF")
        assert "Wrote 2 page(s)" in capsys.readouterr().out

    def test_export_uses_saved_crops(self, photo_folder, tmp_path):
        crops = tmp_path / "crops.json"
        crops.write_text(json.dumps({"version": 1, "crops": {"holiday/img1.jpg": {"x": 0, "zoom": 200}}}))
        out = tmp_path / "sheets.pdf"

        code = main([
            "export", str(photo_folder), "-o", str(out), "--crops", str(crops),
            "--fit", "contain", "--bars", "blur", "--preset", "vintage", "--dpi", "20",
        ])

        assert code == 0
        assert out.exists()
        assert json.loads(crops.read_text())["crops"]["holiday/img1.jpg"]["zoom"] == 200

    def test_export_empty_folder_fails(self, tmp_path, caplog):
        empty = tmp_path / "empty"
        empty.mkdir()

        code = main(["export", str(empty), "-o", str(tmp_path / "x.pdf")])

        assert code == 1
        assert "No photos found" in caplog.text
