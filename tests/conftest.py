import os
import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import photo_sheets
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

# Widget tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from photo_sheets.crops.persistence import MemoryCropPersistence
from photo_sheets.layout.models import Photo


class FakeTimer:
    def __init__(self, delay_s, callback):
        self.delay_s = delay_s
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Collects timers instead of running them; tests fire them by hand."""

    def __init__(self):
        self.timers = []

    def call_later(self, delay_s, callback):
        timer = FakeTimer(delay_s, callback)
        self.timers.append(timer)
        return timer

    @property
    def live(self):
        return [t for t in self.timers if not t.cancelled]

    def fire(self):
        """Run every timer that has not been cancelled."""
        for timer in self.live:
            timer.cancelled = True
            timer.callback()


# Common test fixtures
@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def persistence():
    return MemoryCropPersistence()


@pytest.fixture
def photos():
    """Fourteen photos without image data."""
    return [Photo(id=f"holiday/img{i}.jpg", name=f"img{i}.jpg") for i in range(1, 15)]


@pytest.fixture
def photo_folder(tmp_path: Path):
    """Folder with a few small images of different shapes."""
    folder = tmp_path / "holiday"
    folder.mkdir()
    Image.new("RGB", (300, 200), color="red").save(folder / "img1.jpg")
    Image.new("RGB", (200, 300), color="green").save(folder / "img2.png")
    Image.new("RGB", (120, 120), color="blue").save(folder / "img10.jpg")
    (folder / "notes.txt").write_text("not a photo")
    return folder


@pytest.fixture
def sample_image():
    """A 300x200 image: left half red, right half blue."""
    img = Image.new("RGB", (300, 200), color=(255, 0, 0))
    img.paste((0, 0, 255), (150, 0, 300, 200))
    return img
