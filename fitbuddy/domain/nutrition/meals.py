"""Meal totals, library scaling and the daily calorie budget."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from ...models.nutrition import FoodEntryCreate, FoodLibraryItem, Meal
from ..numbers import round_half_up, round_int

WATER_GOAL_ML = 3000


@dataclass(frozen=True)
class MacroTotals:
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float


def meal_totals(meal: Meal) -> MacroTotals:
    return MacroTotals(
        calories=sum(e.calories for e in meal.entries),
        protein_g=sum(e.protein_g for e in meal.entries),
        carbs_g=sum(e.carbs_g for e in meal.entries),
        fat_g=sum(e.fat_g for e in meal.entries),
    )


def total_calories(meals: Iterable[Meal]) -> int:
    return sum(meal_totals(meal).calories for meal in meals)


def scale_library_item(item: FoodLibraryItem, grams: float) -> FoodEntryCreate:
    """Build an entry for ``grams`` of a per-100 g library item."""

    factor = grams / 100
    return FoodEntryCreate(
        name=f"{item.name} ({grams:g}g)",
        calories=round_int(item.calories_per_100g * factor),
        protein_g=round_half_up(item.protein_per_100g * factor, 1),
        carbs_g=round_half_up(item.carbs_per_100g * factor, 1),
        fat_g=round_half_up(item.fat_per_100g * factor, 1),
        quantity=f"{grams:g}g",
    )


def search_library(items: Sequence[FoodLibraryItem], query: str) -> List[FoodLibraryItem]:
    needle = query.lower()
    return [item for item in items if needle in item.name.lower()]


@dataclass(frozen=True)
class CalorieBudget:
    target: int
    eaten: int
    burned: float

    @property
    def remaining(self) -> float:
        return self.target - self.eaten + self.burned

    @property
    def progress_percent(self) -> float:
        return self.eaten / self.target * 100 if self.target else 0.0


def water_progress_percent(water_ml: float, goal_ml: int = WATER_GOAL_ML) -> float:
    return water_ml / goal_ml * 100
