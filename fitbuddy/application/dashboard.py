from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional

from ..models import DailySummary, User, WorkoutSession
from ..services.interfaces import FitnessAPI

RECENT_SESSION_COUNT = 3


@dataclass
class DashboardView:
    today: Optional[DailySummary]
    user: Optional[User]
    recent_sessions: List[WorkoutSession] = field(default_factory=list)


@dataclass
class LoadDashboardUseCase:
    """Today's summary, the user and the most recent sessions, fetched together."""

    api: FitnessAPI
    today: Callable[[], date] = date.today

    async def __call__(self) -> DashboardView:
        day = self.today()
        summaries, sessions, user = await asyncio.gather(
            self.api.daily_summaries(day, day),
            self.api.list_sessions(),
            self.api.get_user(),
        )
        return DashboardView(
            today=summaries[0] if summaries else None,
            user=user,
            recent_sessions=sessions[:RECENT_SESSION_COUNT],
        )


__all__ = ["DashboardView", "LoadDashboardUseCase"]
