"""Page load scopes that drop results arriving after navigation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Generic, Optional, TypeVar

from ..services.fitness_api import FitnessApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PageState(Generic[T]):
    """Loading, loaded and error states rendered by a page."""

    loading: bool = True
    data: Optional[T] = None
    error: Optional[str] = None

    @property
    def empty(self) -> bool:
        return not self.loading and self.error is None and not self.data


@dataclass
class PageScope:
    """Lifetime of one mounted page.

    Results of loads that complete after ``close`` are discarded. Requests
    already on the wire are not cancelled.
    """

    name: str
    _closed: bool = field(default=False, repr=False)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    async def load(
        self, awaitable: Awaitable[T], state: Optional[PageState[T]] = None
    ) -> PageState[T]:
        """Await a page load and publish it into ``state`` unless the scope closed."""

        state = state if state is not None else PageState()
        state.loading = True
        try:
            result = await awaitable
        except FitnessApiError as exc:
            if self._closed:
                logger.debug("Discarding late %s failure: %s", self.name, exc)
                return state
            logger.warning("Loading %s failed: %s", self.name, exc)
            state.loading = False
            state.error = exc.message
            return state
        if self._closed:
            logger.debug("Discarding late %s result", self.name)
            return state
        state.loading = False
        state.error = None
        state.data = result
        return state


__all__ = ["PageScope", "PageState"]
