"""
JSON-backed persistence for crop positions.

Any malformed data results in graceful fallback to an empty mapping or to
default crops for individual entries, never an exception.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol

from .models import Crop

logger = logging.getLogger(__name__)


class CropPersistence(Protocol):
    def load(self) -> Dict[str, Crop]: ...

    def save(self, crops: Mapping[str, Crop]) -> None: ...


class JsonCropFile:
    """Lightweight JSON file holding crops keyed by photo id."""

    CURRENT_VERSION = 1

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Dict[str, Crop]:
        """Read all stored crops. Returns {} if the file is missing or corrupt."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(f"Crop file is corrupted, starting fresh: {e}")
            return {}
        except OSError as e:
            logger.warning(f"Failed to read crop file: {e}")
            return {}

        raw = data.get("crops") if isinstance(data, dict) else None
        if not isinstance(raw, dict):
            return {}
        return {str(photo_id): Crop.from_dict(entry) for photo_id, entry in raw.items()}

    def save(self, crops: Mapping[str, Crop]) -> None:
        """Write crops with atomic replacement. Failures are logged, not raised."""
        payload = {
            "version": self.CURRENT_VERSION,
            "crops": {photo_id: crop.to_dict() for photo_id, crop in crops.items()},
        }
        temp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            temp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save crops: {e}")
            try:
                if temp_path.exists():
                    temp_path.unlink()
            except OSError:
                pass


class MemoryCropPersistence:
    """In-process persistence; load returns whatever the last save wrote."""

    def __init__(self, initial: Optional[Mapping[str, Crop]] = None) -> None:
        self.saved: Dict[str, Crop] = dict(initial or {})
        self.save_count = 0

    def load(self) -> Dict[str, Crop]:
        return dict(self.saved)

    def save(self, crops: Mapping[str, Crop]) -> None:
        self.saved = dict(crops)
        self.save_count += 1
