from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class FoodEntry(BaseModel):
    id: int
    meal_id: int
    name: str
    calories: int
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    quantity: Optional[str] = None


class Meal(BaseModel):
    """A meal and the food entries logged against it."""

    id: int
    name: Optional[str] = None
    eaten_at: datetime
    entries: List[FoodEntry] = Field(default_factory=list)

    @field_validator("entries", mode="before")
    @classmethod
    def _null_entries(cls, value: object) -> object:
        return value or []


class FoodLibraryItem(BaseModel):
    """Reusable nutrition template expressed per 100 g."""

    id: int
    name: str
    calories_per_100g: float
    protein_per_100g: float = 0.0
    carbs_per_100g: float = 0.0
    fat_per_100g: float = 0.0


class MealCreate(BaseModel):
    name: Optional[str] = None
    eaten_at: Optional[datetime] = None


class MealRename(BaseModel):
    name: str = Field(..., min_length=1)


class FoodEntryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    calories: int = Field(..., ge=0)
    protein_g: float = Field(0.0, ge=0)
    carbs_g: float = Field(0.0, ge=0)
    fat_g: float = Field(0.0, ge=0)
    quantity: Optional[str] = None


class FoodLibraryItemCreate(BaseModel):
    name: str = Field(..., min_length=1)
    calories_per_100g: float = Field(..., ge=0)
    protein_per_100g: float = Field(0.0, ge=0)
    carbs_per_100g: float = Field(0.0, ge=0)
    fat_per_100g: float = Field(0.0, ge=0)


class WaterLog(BaseModel):
    amount_ml: int = Field(..., gt=0)
