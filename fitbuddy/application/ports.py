"""Ports the page use cases depend on."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class TimerPort(Protocol):
    """Public operations of the shared rest timer."""

    def start_timer(self, initial_seconds: Optional[int] = None) -> object:
        """Start a countdown from ``initial_seconds`` or a stopwatch."""

    def stop_timer(self) -> object:
        """Stop and reset the timer."""


__all__ = ["TimerPort"]
