from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, List, Optional

from ..domain.nutrition import (
    DEFAULT_CALORIE_TARGET,
    CalorieBudget,
    estimate_for_user,
    scale_library_item,
    total_calories,
    water_progress_percent,
)
from ..models import (
    DailySummary,
    FoodEntry,
    FoodEntryCreate,
    FoodLibraryItem,
    Meal,
    MealCreate,
    User,
)
from ..services.interfaces import FitnessAPI


@dataclass
class MealLogView:
    meals: List[Meal]
    user: Optional[User]
    library: List[FoodLibraryItem]
    today: Optional[DailySummary]
    calorie_target: int = DEFAULT_CALORIE_TARGET

    @property
    def budget(self) -> CalorieBudget:
        burned = self.today.exercise_calories if self.today else 0.0
        return CalorieBudget(
            target=self.calorie_target, eaten=total_calories(self.meals), burned=burned
        )

    @property
    def water_ml(self) -> float:
        return self.today.water_ml if self.today else 0.0

    @property
    def water_progress(self) -> float:
        return water_progress_percent(self.water_ml)


def calorie_target(user: Optional[User], today: Optional[DailySummary], on: date) -> int:
    """Profile-based target, or the default when the profile is incomplete."""

    if today is None:
        return DEFAULT_CALORIE_TARGET
    estimate = estimate_for_user(user, today.weight_kg, today=on)
    return estimate.target if estimate else DEFAULT_CALORIE_TARGET


@dataclass
class LoadMealLogUseCase:
    api: FitnessAPI
    today: Callable[[], date] = date.today

    async def __call__(self) -> MealLogView:
        day = self.today()
        meals, user, library, summaries = await asyncio.gather(
            self.api.list_meals(),
            self.api.get_user(),
            self.api.list_library(),
            self.api.daily_summaries(day, day),
        )
        summary = summaries[0] if summaries else None
        return MealLogView(
            meals=meals,
            user=user,
            library=library,
            today=summary,
            calorie_target=calorie_target(user, summary, day),
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CreateMealUseCase:
    api: FitnessAPI
    clock: Callable[[], datetime] = _utcnow

    async def __call__(self, name: Optional[str]) -> Meal:
        return await self.api.create_meal(MealCreate(name=name or None, eaten_at=self.clock()))


@dataclass
class AddLibraryEntryUseCase:
    api: FitnessAPI

    async def __call__(self, meal_id: int, item: FoodLibraryItem, grams: float) -> FoodEntry:
        return await self.api.add_entry(meal_id, scale_library_item(item, grams))


@dataclass
class AddCustomEntryUseCase:
    api: FitnessAPI

    async def __call__(self, meal_id: int, payload: FoodEntryCreate) -> FoodEntry:
        return await self.api.add_entry(meal_id, payload)


__all__ = [
    "AddCustomEntryUseCase",
    "AddLibraryEntryUseCase",
    "CreateMealUseCase",
    "LoadMealLogUseCase",
    "MealLogView",
    "calorie_target",
]
