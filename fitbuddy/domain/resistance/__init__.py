"""Resistance-training domain utilities."""

from .sessions import ExerciseGroup, elapsed_since, group_sets, search_exercises, total_volume

__all__ = ["ExerciseGroup", "elapsed_since", "group_sets", "search_exercises", "total_volume"]
