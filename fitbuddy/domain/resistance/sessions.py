"""Workout session views: set grouping, volume and elapsed time."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Sequence

from ...models.resistance import Exercise, WorkoutSet
from ..running.splits import format_duration


@dataclass
class ExerciseGroup:
    exercise_id: int
    exercise_name: str
    sets: List[WorkoutSet] = field(default_factory=list)


def group_sets(sets: Sequence[WorkoutSet]) -> List[ExerciseGroup]:
    """Group consecutive sets of the same exercise, preserving order."""

    groups: List[ExerciseGroup] = []
    for workout_set in sets:
        if groups and groups[-1].exercise_id == workout_set.exercise_id:
            groups[-1].sets.append(workout_set)
        else:
            groups.append(
                ExerciseGroup(
                    exercise_id=workout_set.exercise_id,
                    exercise_name=workout_set.exercise_name or "Unknown",
                    sets=[workout_set],
                )
            )
    return groups


def total_volume(sets: Sequence[WorkoutSet]) -> float:
    return sum(s.weight_kg * s.reps for s in sets)


def elapsed_since(start: datetime, now: datetime) -> str:
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return format_duration(max(0.0, (now - start).total_seconds()))


def search_exercises(exercises: Sequence[Exercise], query: str) -> List[Exercise]:
    needle = query.lower()
    return [e for e in exercises if needle in e.name.lower()]
