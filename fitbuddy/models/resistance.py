from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Exercise(BaseModel):
    """Catalog entry for a resistance exercise."""

    id: int
    name: str
    category: str = ""
    equipment: Optional[str] = None


class WorkoutSet(BaseModel):
    id: int
    exercise_id: int
    exercise_name: Optional[str] = None
    weight_kg: float = 0.0
    reps: int = 0
    rpe: Optional[float] = None
    performed_at: Optional[datetime] = None


class WorkoutSession(BaseModel):
    """A resistance-training session with its ordered sets."""

    id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    notes: Optional[str] = None
    sets: List[WorkoutSet] = Field(default_factory=list)

    @field_validator("sets", mode="before")
    @classmethod
    def _null_sets(cls, value: object) -> object:
        return value or []


class RoutineExercise(BaseModel):
    id: int
    exercise_id: int
    exercise_name: str = ""
    exercise_order: int = 0


class Routine(BaseModel):
    """Named, ordered list of exercises used as a session template."""

    id: int
    name: str
    exercises: List[RoutineExercise] = Field(default_factory=list)

    @field_validator("exercises", mode="before")
    @classmethod
    def _null_exercises(cls, value: object) -> object:
        return value or []


class ExerciseCreate(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    equipment: Optional[str] = None


class SessionCreate(BaseModel):
    start_time: Optional[datetime] = None
    notes: Optional[str] = None


class SetCreate(BaseModel):
    exercise_id: int
    weight_kg: float = Field(0.0, ge=0)
    reps: int = Field(0, ge=0)
    rpe: Optional[float] = Field(None, ge=0, le=10)


class SetUpdate(BaseModel):
    weight_kg: float = Field(..., ge=0)
    reps: int = Field(..., ge=0)
    rpe: Optional[float] = Field(None, ge=0, le=10)


class RoutineCreate(BaseModel):
    name: str = Field(..., min_length=1)
    exercise_ids: List[int] = Field(..., min_length=1)
