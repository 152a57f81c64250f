"""Periodic callback runner used for live duration updates."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class IntervalTicker:
    """Run ``callback`` every ``interval_ms`` on a daemon thread.

    ``start`` and ``cancel`` are idempotent. ``cancel`` never joins the
    worker: the callback may be blocked on a lock held by whoever cancels, and
    the callback itself may cancel its own ticker.
    """

    def __init__(self, interval_ms: int, callback: Callable[[], None], name: str = "lapwatch-tick") -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.interval_ms = interval_ms
        self._callback = callback
        self._name = name
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._stop_event is not None and not self._stop_event.is_set()

    def start(self) -> None:
        if self.running:
            return
        stop_event = threading.Event()
        self._stop_event = stop_event
        self._thread = threading.Thread(target=self._run, args=(stop_event,), name=self._name, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()
        self._stop_event = None
        self._thread = None

    def _run(self, stop_event: threading.Event) -> None:
        interval = self.interval_ms / 1000.0
        while not stop_event.wait(interval):
            try:
                self._callback()
            except Exception:
                logger.exception("tick callback failed; cancelling %s", self._name)
                stop_event.set()


__all__ = ["IntervalTicker"]
