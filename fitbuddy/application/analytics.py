from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, List

from ..models import DailySummary
from ..services.interfaces import FitnessAPI

RANGES = (7, 30, 90)


@dataclass
class LoadAnalyticsUseCase:
    """Daily summaries for the last ``days`` days in chronological order."""

    api: FitnessAPI
    today: Callable[[], date] = date.today

    async def __call__(self, days: int = 7) -> List[DailySummary]:
        if days not in RANGES:
            raise ValueError(f"Unsupported range {days}; expected one of {RANGES}")
        end = self.today()
        start = end - timedelta(days=days)
        summaries = await self.api.daily_summaries(start, end)
        return list(reversed(summaries))


__all__ = ["LoadAnalyticsUseCase", "RANGES"]
