"""asyncio-backed interval scheduler used by the companion service."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from ..domain.scheduling import IntervalHandle, IntervalScheduler

logger = logging.getLogger(__name__)


class _TaskHandle(IntervalHandle):
    def __init__(self, task: asyncio.Task[None]) -> None:
        self._task = task

    def cancel(self) -> None:
        self._task.cancel()

    @property
    def cancelled(self) -> bool:
        return self._task.cancelled() or self._task.done()


class AsyncioIntervalScheduler(IntervalScheduler):
    """Run interval callbacks on the running event loop.

    Deadlines are computed from the loop clock so a slow callback does not
    push later ticks back; one callback is delivered per elapsed interval.
    """

    def call_every(self, seconds: float, callback: Callable[[], None]) -> IntervalHandle:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._run(loop, seconds, callback))
        return _TaskHandle(task)

    @staticmethod
    async def _run(
        loop: asyncio.AbstractEventLoop, seconds: float, callback: Callable[[], None]
    ) -> None:
        deadline = loop.time() + seconds
        while True:
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            deadline += seconds
            try:
                callback()
            except Exception:
                logger.exception("Interval callback %r failed", callback)


__all__ = ["AsyncioIntervalScheduler"]
