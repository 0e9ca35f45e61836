from __future__ import annotations

from pydantic import BaseModel, Field


class DailySummary(BaseModel):
    """Server-computed daily aggregate; read-only on the client."""

    date: str
    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fat: float = 0.0
    run_distance: float = Field(0.0, description="Distance run in meters")
    workout_volume_kg: float = Field(0.0, description="Sum of weight x reps")
    exercise_calories: float = Field(0.0, description="Estimated calories burned")
    water_ml: float = 0.0
    weight_kg: float = 0.0
