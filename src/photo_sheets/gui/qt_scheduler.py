"""Qt event-loop scheduler for the crop write-behind."""
from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, QTimer


class QtTimerHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None


class QtTimerScheduler(QObject):
    """
    Runs callbacks from single-shot QTimers so crop saves happen on the
    GUI thread, between input events.
    """

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.timeout.connect(callback)
        timer.start(max(0, int(delay_s * 1000)))
        return QtTimerHandle(timer)
