"""Push-based sensor feeds with cancellable subscriptions."""

from __future__ import annotations

import logging
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

SampleCallback = Callable[[T], None]
ErrorCallback = Callable[[Exception], None]


class Subscription:
    """Disposer for a single listener; ``dispose`` is idempotent."""

    def __init__(self, dispose: Callable[[], None]) -> None:
        self._dispose: Optional[Callable[[], None]] = dispose

    @property
    def active(self) -> bool:
        return self._dispose is not None

    def dispose(self) -> None:
        if self._dispose is None:
            return
        dispose, self._dispose = self._dispose, None
        dispose()


class SampleFeed(Generic[T]):
    """Fan-out of sensor samples to subscribed listeners.

    Samples pushed while nobody listens are dropped. A listener that raises
    is logged and stays subscribed.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: List[tuple[SampleCallback[T], Optional[ErrorCallback]]] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(
        self, on_sample: SampleCallback[T], on_error: Optional[ErrorCallback] = None
    ) -> Subscription:
        entry = (on_sample, on_error)
        self._listeners.append(entry)

        def _remove() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return Subscription(_remove)

    def push(self, sample: T) -> int:
        """Deliver ``sample``; return the number of listeners that received it."""

        delivered = 0
        for on_sample, _ in list(self._listeners):
            try:
                on_sample(sample)
            except Exception:
                logger.exception("%s listener failed on sample %r", self.name, sample)
            delivered += 1
        return delivered

    def fail(self, error: Exception) -> None:
        for _, on_error in list(self._listeners):
            if on_error is not None:
                on_error(error)

    def close(self) -> None:
        self._listeners.clear()


class SensorUnavailableError(RuntimeError):
    """Raised through ``on_error`` when a sensor reports a failure."""

    def __init__(self, sensor: str, message: str, code: Optional[int] = None) -> None:
        super().__init__(f"{sensor} sensor error{f' {code}' if code is not None else ''}: {message}")
        self.sensor = sensor
        self.code = code


__all__ = ["SampleFeed", "SensorUnavailableError", "Subscription"]
