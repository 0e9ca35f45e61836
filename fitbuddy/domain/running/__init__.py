"""Run analysis helpers."""

from .route import (
    elevation_profile,
    encode_path,
    latest_position,
    path_bounds,
    route_geojson,
)
from .splits import (
    WEEKLY_GOAL_KM,
    Split,
    average_pace,
    format_duration,
    kilometre_splits,
    weekly_distance_km,
)

__all__ = [
    "Split",
    "WEEKLY_GOAL_KM",
    "average_pace",
    "elevation_profile",
    "encode_path",
    "format_duration",
    "kilometre_splits",
    "latest_position",
    "path_bounds",
    "route_geojson",
    "weekly_distance_km",
]
