"""Live tracking primitives: distance, steps and sensor feeds."""

from .geo import DistanceAccumulator, haversine_m, path_distance_m
from .steps import StepCounter
from .streams import SampleFeed, SensorUnavailableError, Subscription

__all__ = [
    "DistanceAccumulator",
    "SampleFeed",
    "SensorUnavailableError",
    "StepCounter",
    "Subscription",
    "haversine_m",
    "path_distance_m",
]
