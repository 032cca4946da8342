"""
Timer abstraction for the crop write-behind.

The store only needs "run this later" and "never mind"; the GUI supplies a
Qt timer so flushes run on the event loop, headless callers get a
threading timer.
"""
from __future__ import annotations

import threading
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle: ...


class ThreadTimerScheduler:
    """Scheduler backed by daemon threading.Timer objects."""

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay_s, callback)
        timer.daemon = True
        timer.start()
        return timer
