"""
Unit tests for JSON crop persistence.
"""
import json

from photo_sheets.crops.models import Crop, default_crop
from photo_sheets.crops.persistence import JsonCropFile
from photo_sheets.crops.store import CropStore


class TestJsonCropFile:

    def test_missing_file_loads_empty(self, tmp_path):
        assert JsonCropFile(tmp_path / "none.json").load() == {}

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "crops.json"
        crops = {"holiday/a.jpg": Crop(x=10, y=20, zoom=150, rotation=90)}

        JsonCropFile(path).save(crops)

        assert JsonCropFile(path).load() == crops
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["version"] == 1
        assert data["crops"]["holiday/a.jpg"] == {"x": 10, "y": 20, "zoom": 150, "rotation": 90}
        assert not path.with_suffix(".tmp").exists()

    def test_corrupt_file_loads_empty(self, tmp_path, caplog):
        path = tmp_path / "crops.json"
        path.write_text("{not json", encoding="utf-8")

        with caplog.at_level("WARNING"):
            assert JsonCropFile(path).load() == {}
        assert "corrupted" in caplog.text

    def test_wrong_shape_loads_empty(self, tmp_path):
        path = tmp_path / "crops.json"
        path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
        assert JsonCropFile(path).load() == {}

        path.write_text(json.dumps({"crops": "nope"}), encoding="utf-8")
        assert JsonCropFile(path).load() == {}

    def test_malformed_entries_default(self, tmp_path):
        path = tmp_path / "crops.json"
        path.write_text(json.dumps({"crops": {"a.jpg": 7, "b.jpg": {"zoom": 999}}}), encoding="utf-8")

        loaded = JsonCropFile(path).load()

        assert loaded["a.jpg"] == default_crop()
        assert loaded["b.jpg"] == Crop(zoom=250)

    def test_save_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "crops.json"
        JsonCropFile(path).save({"a.jpg": Crop()})
        assert path.exists()

    def test_store_round_trip_through_file(self, tmp_path, scheduler):
        path = tmp_path / "crops.json"
        store = CropStore(JsonCropFile(path), scheduler)
        store.set("a.jpg", {"x": 70, "zoom": 130})
        store.close()

        reopened = CropStore(JsonCropFile(path), scheduler)

        assert reopened.snapshot() == store.snapshot()
