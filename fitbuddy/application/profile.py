from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, List, Optional

from ..domain.nutrition import EnergyEstimate, estimate_for_user
from ..models import BodyMetric, BodyMetricCreate, User, UserUpdate
from ..services.interfaces import FitnessAPI

logger = logging.getLogger(__name__)


@dataclass
class ProfileView:
    user: User
    metrics: List[BodyMetric] = field(default_factory=list)

    @property
    def latest_metric(self) -> Optional[BodyMetric]:
        return self.metrics[0] if self.metrics else None

    @property
    def latest_weight(self) -> Optional[float]:
        latest = self.latest_metric
        return latest.weight_kg if latest else None

    def energy(
        self,
        today: date,
        *,
        activity_level: Optional[str] = None,
        weight_goal: Optional[str] = None,
    ) -> Optional[EnergyEstimate]:
        """None until a body metric exists; a metric without weight uses the default."""

        if self.latest_metric is None:
            return None
        return estimate_for_user(
            self.user,
            self.latest_weight,
            today=today,
            activity_level=activity_level,
            weight_goal=weight_goal,
        )


@dataclass
class LoadProfileUseCase:
    api: FitnessAPI

    async def __call__(self) -> ProfileView:
        user, metrics = await asyncio.gather(self.api.get_user(), self.api.list_body_metrics())
        return ProfileView(user=user, metrics=metrics)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SaveProfileUseCase:
    """Update the profile, then log a weight sample when it changed."""

    api: FitnessAPI
    clock: Callable[[], datetime] = _utcnow

    async def __call__(
        self,
        payload: UserUpdate,
        weight_kg: Optional[float],
        latest: Optional[BodyMetric],
    ) -> Optional[BodyMetric]:
        await self.api.update_user(payload)
        if weight_kg is None or (latest is not None and latest.weight_kg == weight_kg):
            return None
        logger.info("Recording new body weight %.1f kg", weight_kg)
        return await self.api.create_body_metric(
            BodyMetricCreate(recorded_at=self.clock(), weight_kg=weight_kg)
        )


__all__ = ["LoadProfileUseCase", "ProfileView", "SaveProfileUseCase"]
