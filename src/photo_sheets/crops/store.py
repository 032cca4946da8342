"""
Module: photo_sheets.crops.store

Purpose:
    Single-writer store mapping photo id to Crop. Every mutation goes
    through one merge-and-clamp operation, so each patch reads the result
    of the previous one and no update is lost.

Key Classes:
    - CropStore: get/set/reset with debounced write-behind persistence

Persistence:
    Each set/reset marks the store dirty and (re)starts a short timer.
    A mutation arriving before the timer fires cancels it and schedules a
    new one, so a drag burst produces one save of the latest snapshot.
    close() flushes whatever is still pending. Saves are serialised, so a
    slow timer save can never land after a newer one.

Dependencies:
    - photo_sheets.crops.models: Crop
    - photo_sheets.crops.persistence: load/save collaborator
    - photo_sheets.crops.scheduling: Timer abstraction

Used By:
    - photo_sheets.interaction.controller: Editing events
    - photo_sheets.session: Render state
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterable, Mapping, Optional

from .models import Crop, default_crop
from .persistence import CropPersistence
from .scheduling import Scheduler, ThreadTimerScheduler, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_SAVE_DELAY_S = 0.12


class CropStore:
    """
    Owned mapping of photo id to Crop.

    Example:
        >>> store = CropStore(MemoryCropPersistence())
        >>> store.set("a.jpg", {"x": 140}).x
        100.0
        >>> store.get("b.jpg") == default_crop()
        True
    """

    def __init__(
        self,
        persistence: CropPersistence,
        scheduler: Optional[Scheduler] = None,
        save_delay_s: float = DEFAULT_SAVE_DELAY_S,
    ) -> None:
        self._persistence = persistence
        self._scheduler = scheduler or ThreadTimerScheduler()
        self._save_delay_s = save_delay_s
        self._lock = threading.RLock()
        self._save_lock = threading.Lock()
        self._pending: Optional[TimerHandle] = None
        self._dirty = False
        self._crops: Dict[str, Crop] = self._load()

    def _load(self) -> Dict[str, Crop]:
        try:
            loaded = self._persistence.load()
        except Exception as e:
            logger.warning(f"Failed to load crops, using defaults: {e}")
            return {}
        crops: Dict[str, Crop] = {}
        for photo_id, crop in (loaded or {}).items():
            crops[str(photo_id)] = crop if isinstance(crop, Crop) else Crop.from_dict(crop)
        logger.debug(f"Loaded {len(crops)} stored crops")
        return crops

    def get(self, photo_id: str) -> Crop:
        """Stored crop, or the default. Never creates an entry."""
        with self._lock:
            return self._crops.get(photo_id, default_crop())

    def set(self, photo_id: str, patch: Mapping[str, Any]) -> Crop:
        """
        Merge a partial patch over the latest stored crop.

        Fields missing from the patch, or holding None/NaN/garbage, keep
        their current value. The result is clamped and stored.

        Returns:
            The stored Crop
        """
        with self._lock:
            current = self._crops.get(photo_id, default_crop())
            updated = current.merged(patch)
            self._crops[photo_id] = updated
            self._mark_dirty()
        return updated

    def reset(self, photo_id: str) -> Crop:
        """Put a photo back to the default crop."""
        with self._lock:
            self._crops[photo_id] = default_crop()
            self._mark_dirty()
        return default_crop()

    def reset_all(self, photo_ids: Iterable[str]) -> None:
        with self._lock:
            for photo_id in photo_ids:
                self._crops[photo_id] = default_crop()
            self._mark_dirty()

    def snapshot(self) -> Dict[str, Crop]:
        """Copy of the full mapping."""
        with self._lock:
            return dict(self._crops)

    @property
    def has_pending_save(self) -> bool:
        with self._lock:
            return self._dirty

    def flush(self) -> None:
        """Write the latest snapshot now if anything changed since the last save."""
        # One save at a time; the snapshot is taken once the previous save is done
        with self._save_lock:
            with self._lock:
                if self._pending is not None:
                    self._pending.cancel()
                    self._pending = None
                if not self._dirty:
                    return
                snapshot = dict(self._crops)
                self._dirty = False
            try:
                self._persistence.save(snapshot)
                logger.debug(f"Saved {len(snapshot)} crops")
            except Exception as e:
                logger.warning(f"Failed to save crops: {e}")

    def close(self) -> None:
        """Final flush before the store is torn down."""
        self.flush()

    def _mark_dirty(self) -> None:
        self._dirty = True
        if self._pending is not None:
            self._pending.cancel()
        self._pending = self._scheduler.call_later(self._save_delay_s, self._on_timer)

    def _on_timer(self) -> None:
        with self._lock:
            self._pending = None
        self.flush()
