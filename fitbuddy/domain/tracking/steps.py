"""Accelerometer step heuristic.

Counts a raw event whenever the magnitude of acceleration-including-gravity
jumps by more than a fixed threshold between consecutive samples, and reports
half of the raw events as steps. This approximates a pedometer; it has not
been validated against one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

STEP_THRESHOLD = 15.0


@dataclass
class StepCounter:
    threshold: float = STEP_THRESHOLD
    raw_events: int = 0
    _last_magnitude: float = 0.0

    @property
    def steps(self) -> int:
        return self.raw_events // 2

    def add(self, x: Optional[float], y: Optional[float], z: Optional[float]) -> bool:
        """Feed one motion sample; return True when it counted a raw event."""

        if x is None or y is None or z is None:
            return False
        magnitude = abs(x + y + z)
        counted = abs(magnitude - self._last_magnitude) > self.threshold
        if counted:
            self.raw_events += 1
        self._last_magnitude = magnitude
        return counted

    def reset(self) -> None:
        self.raw_events = 0
        self._last_magnitude = 0.0
