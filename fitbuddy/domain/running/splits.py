"""Per-kilometre splits and pace formatting for recorded runs."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Sequence

from ...models.running import PathPoint, Run
from ..tracking.geo import haversine_m

SPLIT_DISTANCE_M = 1000.0
MIN_PARTIAL_SPLIT_M = 100.0


@dataclass(frozen=True)
class Split:
    index: int
    time_s: float
    distance_m: float

    @property
    def display_time(self) -> str:
        return format_duration(self.time_s)


def kilometre_splits(path: Sequence[PathPoint]) -> List[Split]:
    """Split a route every 1000 m of accumulated distance.

    Each split's time runs from its first point to the point where the
    threshold was reached. A trailing partial split is kept only when it is
    longer than 100 m.
    """

    if len(path) < 2:
        return []
    splits: List[Split] = []
    current = 0.0
    start_index = 0
    for i in range(1, len(path)):
        current += haversine_m(path[i - 1][0], path[i - 1][1], path[i][0], path[i][1])
        if current >= SPLIT_DISTANCE_M:
            splits.append(
                Split(len(splits) + 1, path[i][3] - path[start_index][3], current)
            )
            current = 0.0
            start_index = i
    if current > MIN_PARTIAL_SPLIT_M:
        splits.append(
            Split(len(splits) + 1, path[-1][3] - path[start_index][3], current)
        )
    return splits


def format_duration(seconds: float) -> str:
    """Render seconds as ``m:ss`` with unpadded minutes."""

    total = int(math.floor(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def average_pace(duration_seconds: float, distance_meters: float) -> str:
    """Average pace per kilometre as ``m:ss``; zero distance counts as 1 km."""

    km = distance_meters / 1000 or 1
    return format_duration(duration_seconds / km)


WEEKLY_GOAL_KM = 40.0


def weekly_distance_km(runs: Sequence[Run], now: datetime) -> float:
    """Kilometres run within the seven days before ``now``."""

    total = 0.0
    for run in runs:
        start = run.start_time
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        if (now - start) < timedelta(days=7):
            total += run.distance_meters / 1000
    return total
