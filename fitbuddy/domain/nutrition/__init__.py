"""Nutrition domain utilities."""

from .energy import (
    ACTIVITY_MULTIPLIERS,
    DEFAULT_CALORIE_TARGET,
    GOAL_OFFSETS,
    EnergyEstimate,
    estimate_energy,
    estimate_for_user,
)
from .meals import (
    CalorieBudget,
    MacroTotals,
    meal_totals,
    scale_library_item,
    search_library,
    total_calories,
    water_progress_percent,
)

__all__ = [
    "ACTIVITY_MULTIPLIERS",
    "CalorieBudget",
    "DEFAULT_CALORIE_TARGET",
    "EnergyEstimate",
    "GOAL_OFFSETS",
    "MacroTotals",
    "estimate_energy",
    "estimate_for_user",
    "meal_totals",
    "scale_library_item",
    "search_library",
    "total_calories",
    "water_progress_percent",
]
