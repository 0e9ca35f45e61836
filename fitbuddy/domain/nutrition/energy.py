"""Daily energy target from the Mifflin-St Jeor basal metabolic rate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional

from ...models.identity import User
from ..numbers import round_int

DEFAULT_WEIGHT_KG = 70.0
DEFAULT_CALORIE_TARGET = 2000

ACTIVITY_MULTIPLIERS: Dict[str, float] = {
    "Sedentary": 1.2,
    "Lightly Active": 1.375,
    "Moderately Active": 1.55,
    "Very Active": 1.725,
    "Extra Active": 1.9,
}

ACTIVITY_LABELS: Dict[str, str] = {
    "Sedentary": "Sedentary (Office job, little exercise)",
    "Lightly Active": "Lightly Active (Light exercise 1-3 days/week)",
    "Moderately Active": "Moderately Active (Moderate exercise 3-5 days/week)",
    "Very Active": "Very Active (Hard exercise 6-7 days/week)",
    "Extra Active": "Extra Active (Very hard exercise, physical job)",
}

GOAL_OFFSETS: Dict[str, int] = {
    "Lose Weight": -500,
    "Maintain": 0,
    "Gain Weight": 500,
}

GOAL_LABELS: Dict[str, str] = {
    "Lose Weight": "Lose Weight (-500 kcal)",
    "Maintain": "Maintain Weight",
    "Gain Weight": "Gain Weight (+500 kcal)",
}


@dataclass(frozen=True)
class EnergyEstimate:
    bmr: float
    multiplier: float
    maintenance: int
    target: int

    @property
    def display_bmr(self) -> int:
        return round_int(self.maintenance / self.multiplier)


def basal_metabolic_rate(weight_kg: float, height_cm: float, age: int, sex: Optional[str]) -> float:
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return bmr + 5 if sex == "M" else bmr - 161


def activity_multiplier(activity_level: Optional[str]) -> float:
    return ACTIVITY_MULTIPLIERS.get(activity_level or "Sedentary", 1.2)


def goal_offset(weight_goal: Optional[str]) -> int:
    return GOAL_OFFSETS.get(weight_goal or "Maintain", 0)


def estimate_energy(
    *,
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: Optional[str],
    activity_level: Optional[str],
    weight_goal: Optional[str],
) -> EnergyEstimate:
    """Pure estimate of maintenance and target calories."""

    bmr = basal_metabolic_rate(weight_kg, height_cm, age, sex)
    multiplier = activity_multiplier(activity_level)
    maintenance = bmr * multiplier
    return EnergyEstimate(
        bmr=bmr,
        multiplier=multiplier,
        maintenance=round_int(maintenance),
        target=round_int(maintenance + goal_offset(weight_goal)),
    )


def age_on(birth_date: date, today: date) -> int:
    """Age as the difference of calendar years."""

    return today.year - birth_date.year


def estimate_for_user(
    user: Optional[User],
    weight_kg: Optional[float],
    *,
    today: date,
    activity_level: Optional[str] = None,
    weight_goal: Optional[str] = None,
) -> Optional[EnergyEstimate]:
    """Estimate from a profile; None when height or date of birth is missing.

    ``activity_level`` and ``weight_goal`` override the stored profile values,
    which lets the profile form preview unsaved selections.
    """

    if user is None or not user.height_cm:
        return None
    born = user.birth_date()
    if born is None:
        return None
    return estimate_energy(
        weight_kg=weight_kg or DEFAULT_WEIGHT_KG,
        height_cm=user.height_cm,
        age=age_on(born, today),
        sex=user.sex,
        activity_level=activity_level or user.activity_level,
        weight_goal=weight_goal or user.weight_goal,
    )
