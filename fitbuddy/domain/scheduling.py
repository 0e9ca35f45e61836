"""Ports for repeating intervals driven by the host event loop."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class IntervalHandle(Protocol):
    """Handle to a live repeating interval."""

    def cancel(self) -> None:
        """Stop the interval; further ticks are never delivered."""


@runtime_checkable
class IntervalScheduler(Protocol):
    """Factory for repeating intervals."""

    def call_every(self, seconds: float, callback: Callable[[], None]) -> IntervalHandle:
        """Invoke ``callback`` once per ``seconds`` until the handle is cancelled."""


__all__ = ["IntervalHandle", "IntervalScheduler"]
