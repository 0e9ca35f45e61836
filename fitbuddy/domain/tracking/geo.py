"""Great-circle distance and GPS-jitter filtered distance accumulation."""

from __future__ import annotations

from dataclasses import dataclass, field
from math import atan2, cos, radians, sin, sqrt
from typing import List, Optional, Tuple

EARTH_RADIUS_M = 6371e3
MIN_MOVEMENT_M = 3.0
MAX_ACCURACY_M = 20.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the great-circle distance between two coordinates in metres."""

    phi1 = radians(lat1)
    phi2 = radians(lat2)
    d_phi = radians(lat2 - lat1)
    d_lambda = radians(lon2 - lon1)
    a = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_M * c


@dataclass
class DistanceAccumulator:
    """Running distance total that ignores jitter and low-accuracy fixes.

    A delta is added only when it exceeds ``min_movement_m`` and the fix's
    reported accuracy is better than ``max_accuracy_m``. Every fix becomes the
    reference for the next one, accepted or not.
    """

    min_movement_m: float = MIN_MOVEMENT_M
    max_accuracy_m: float = MAX_ACCURACY_M
    total_m: float = 0.0
    _last: Optional[Tuple[float, float]] = field(default=None, repr=False)

    def add(self, latitude: float, longitude: float, accuracy: float) -> float:
        """Feed one fix and return the distance credited for it."""

        credited = 0.0
        if self._last is not None:
            delta = haversine_m(self._last[0], self._last[1], latitude, longitude)
            if delta > self.min_movement_m and accuracy < self.max_accuracy_m:
                credited = delta
                self.total_m += delta
        self._last = (latitude, longitude)
        return credited

    def reset(self) -> None:
        self.total_m = 0.0
        self._last = None


def path_distance_m(points: List[Tuple[float, float]]) -> float:
    """Sum of pairwise haversine distances along ``points``."""

    return sum(
        haversine_m(a[0], a[1], b[0], b[1]) for a, b in zip(points, points[1:])
    )
