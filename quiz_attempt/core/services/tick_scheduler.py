"""Recurring timers that drive the attempt countdown."""

from __future__ import annotations

import logging
from threading import Event, Thread
import time
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        """Stop the timer; no further callback is started after this returns."""


class TickScheduler(Protocol):
    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        """Invoke ``callback`` every ``interval_seconds`` until the handle is cancelled."""


class _RepeatingTimer(Thread):
    """Daemon thread firing a callback on fixed monotonic deadlines.

    A callback that raises is logged and the timer keeps running.
    """

    def __init__(self, interval_seconds: float, callback: Callable[[], None]) -> None:
        super().__init__(name="AttemptTicker", daemon=True)
        self._interval = interval_seconds
        self._callback = callback
        self._stopped = Event()

    def run(self) -> None:
        next_deadline = time.monotonic() + self._interval
        while not self._stopped.wait(max(0.0, next_deadline - time.monotonic())):
            try:
                self._callback()
            except Exception:
                logger.exception("Tick callback %r failed", self._callback)
            next_deadline += self._interval

    def cancel(self) -> None:
        self._stopped.set()


class ThreadTickScheduler:
    """Scheduler backed by one background thread per armed timer."""

    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        if interval_seconds <= 0:
            raise ValueError("Tick interval must be positive.")
        timer = _RepeatingTimer(interval_seconds, callback)
        timer.start()
        return timer
