"""
Logging utilities for redirecting logs to a queue for GUI display.
"""
from __future__ import annotations

import logging
from queue import Empty, Queue
from typing import Iterator, Optional, Tuple


class QueueLogHandler(logging.Handler):
    """
    A logging handler that sends log records to a queue.

    Used to capture logs from the layout and export code and show them in
    the window's console.
    """

    def __init__(self, log_queue: Queue, level: int = logging.INFO):
        super().__init__(level)
        self.log_queue = log_queue
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            level = record.levelname
            # Map DEBUG to INFO for GUI display
            if level == "DEBUG":
                level = "INFO"
            self.log_queue.put((message, level))
        except Exception:
            self.handleError(record)


def attach_queue_handler(log_queue: Queue, logger_name: Optional[str] = None) -> QueueLogHandler:
    """
    Attach a QueueLogHandler to the specified logger (or root logger if None).

    Returns:
        The attached handler (for later removal).
    """
    logger = logging.getLogger(logger_name)
    handler = QueueLogHandler(log_queue)
    logger.addHandler(handler)
    return handler


def detach_queue_handler(handler: QueueLogHandler, logger_name: Optional[str] = None) -> None:
    logger = logging.getLogger(logger_name)
    logger.removeHandler(handler)


def drain_queue(log_queue: Queue, limit: int = 500) -> Iterator[Tuple[str, str]]:
    """Yield queued (message, level) pairs without blocking, at most limit per call."""
    for _ in range(limit):
        try:
            yield log_queue.get_nowait()
        except Empty:
            return
