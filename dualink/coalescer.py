"""Coalescing of high-frequency pointer motion."""

from __future__ import annotations

import time
from datetime import timedelta

from dualink.events import Event, PointerMotion


class EventCoalescer:
    """Accumulates pointer motion within a time window.

    Non-motion events pass through immediately, flushing any accumulated
    motion first so that ordering is preserved.
    """

    def __init__(self, window: float | timedelta) -> None:
        seconds = window.total_seconds() if isinstance(window, timedelta) else float(window)
        if seconds < 0:
            raise ValueError("coalescing window must not be negative")
        self._window = seconds
        self._acc_dx = 0.0
        self._acc_dy = 0.0
        self._deadline: float | None = None

    def is_disabled(self) -> bool:
        """True when the window is zero."""
        return self._window == 0

    def feed(self, event: Event) -> tuple[Event | None, Event | None]:
        """Feed an event; return ``(flushed_motion, passthrough)``."""
        if self.is_disabled():
            return None, event
        if isinstance(event, PointerMotion):
            self._acc_dx += event.dx
            self._acc_dy += event.dy
            if self._deadline is None:
                self._deadline = time.monotonic() + self._window
            return None, None
        return self._take_accumulated(), event

    def flush(self) -> PointerMotion | None:
        """Return accumulated motion, if any, and clear it."""
        return self._take_accumulated()

    def next_deadline(self) -> float | None:
        """Monotonic time at which buffered motion should be flushed."""
        return self._deadline

    def has_pending(self) -> bool:
        """True when motion is buffered."""
        return self._deadline is not None

    def _take_accumulated(self) -> PointerMotion | None:
        self._deadline = None
        if self._acc_dx == 0.0 and self._acc_dy == 0.0:
            return None
        event = PointerMotion(time=0, dx=self._acc_dx, dy=self._acc_dy)
        self._acc_dx = 0.0
        self._acc_dy = 0.0
        return event