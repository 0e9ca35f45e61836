"""Rest timer: a single countdown-or-stopwatch clock shared by every page."""

from __future__ import annotations

import logging
from typing import Optional

from ..models.timer import TimerMode, TimerState
from .scheduling import IntervalHandle, IntervalScheduler

logger = logging.getLogger(__name__)


def format_time(seconds: int) -> str:
    """Render ``m:ss``; negative (overtime) values get a leading ``+``."""

    abs_seconds = abs(seconds)
    minutes, secs = divmod(abs_seconds, 60)
    sign = "+" if seconds < 0 else ""
    return f"{sign}{minutes}:{secs:02d}"


class RestTimer:
    """Countdown or stopwatch ticking once per second on a single interval.

    The timer owns exactly one interval handle. Every transition of the
    running/paused flags tears the interval down and re-establishes it only
    when the timer should be ticking.
    """

    def __init__(self, scheduler: IntervalScheduler, *, interval_seconds: float = 1.0) -> None:
        self._scheduler = scheduler
        self._interval_seconds = interval_seconds
        self._handle: Optional[IntervalHandle] = None
        self.time: int = 0
        self.mode: TimerMode = "stopwatch"
        self.is_running: bool = False
        self.is_paused: bool = False

    @property
    def ticking(self) -> bool:
        return self._handle is not None

    def start_timer(self, initial_seconds: Optional[int] = None) -> None:
        if initial_seconds is not None:
            self.mode = "countdown"
            self.time = int(initial_seconds)
        else:
            self.mode = "stopwatch"
            self.time = 0
        self.is_running = True
        self.is_paused = False
        logger.debug("Timer started in %s mode at %s", self.mode, self.time)
        self._sync_interval()

    def stop_timer(self) -> None:
        self.is_running = False
        self.is_paused = False
        self.time = 0
        self._sync_interval()

    def pause(self) -> None:
        if not self.is_running:
            return
        self.is_paused = True
        self._sync_interval()

    def resume(self) -> None:
        if not self.is_running:
            return
        self.is_paused = False
        self._sync_interval()

    def add_time(self, delta: int) -> None:
        self.time += int(delta)

    def tick(self) -> None:
        if not self.is_running or self.is_paused:
            return
        # Countdown keeps going below zero to track overtime.
        self.time += -1 if self.mode == "countdown" else 1

    def close(self) -> None:
        """Release the interval; used when the owning scope is torn down."""

        self._cancel_interval()

    def state(self) -> TimerState:
        return TimerState(
            time=self.time,
            mode=self.mode,
            is_running=self.is_running,
            is_paused=self.is_paused,
            display=format_time(self.time),
            overtime=self.mode == "countdown" and self.time < 0,
        )

    def _sync_interval(self) -> None:
        self._cancel_interval()
        if self.is_running and not self.is_paused:
            self._handle = self._scheduler.call_every(self._interval_seconds, self.tick)

    def _cancel_interval(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


__all__ = ["RestTimer", "format_time"]
