"""Fixed-interval refresh timers for client views."""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Seconds between refreshes, per screen.
CONVERSATIONS_INTERVAL = 5.0
THREAD_INTERVAL = 3.0
GROUP_CHAT_INTERVAL = 3.0
RADAR_INTERVAL = 10.0
GALLERY_INTERVAL = 10.0
ADMIN_INTERVAL = 15.0


class Poller:
    """Call ``callback`` every ``interval`` seconds on a timer thread.

    Each tick schedules the next one after the callback returns. ``stop()``
    cancels the pending timer only; a callback already running finishes and
    its result is kept.
    """

    def __init__(self, callback: Callable[[], object], interval: float, *, name: Optional[str] = None) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.callback = callback
        self.interval = interval
        self.name = name or getattr(callback, "__qualname__", "poller")
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._running = False
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._running

    def start(self, *, immediate: bool = True) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            generation = self._generation
        if immediate:
            self._tick(generation)
        else:
            self._schedule(generation)

    def stop(self) -> None:
        with self._lock:
            self._running = False
            self._generation += 1
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def _schedule(self, generation: int) -> None:
        # a chain left over from before the last stop() must not reschedule
        with self._lock:
            if not self._running or generation != self._generation:
                return
            timer = threading.Timer(self.interval, self._tick, args=(generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def _tick(self, generation: int) -> None:
        try:
            self.callback()
        except Exception:
            logger.exception("Refresh for %s failed", self.name)
        self._schedule(generation)

    def __enter__(self) -> "Poller":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


__all__ = [
    "Poller",
    "CONVERSATIONS_INTERVAL",
    "THREAD_INTERVAL",
    "GROUP_CHAT_INTERVAL",
    "RADAR_INTERVAL",
    "GALLERY_INTERVAL",
    "ADMIN_INTERVAL",
]
