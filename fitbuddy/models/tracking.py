from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class PositionSample(BaseModel):
    """A single geolocation fix reported by the device."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    altitude: Optional[float] = Field(None, description="Metres above sea level")
    accuracy: float = Field(..., ge=0, description="Horizontal accuracy in metres")
    timestamp: Optional[float] = Field(
        None, description="Unix seconds; the receive time is used when omitted"
    )


class MotionSample(BaseModel):
    """Acceleration including gravity, in m/s^2, for each axis."""

    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None


class SensorError(BaseModel):
    sensor: Literal["position", "motion"]
    code: Optional[int] = None
    message: str = ""


class LiveRunStart(BaseModel):
    motion_permission: Literal["granted", "denied", "unavailable"] = "granted"


class LiveRunSnapshot(BaseModel):
    """Current state of a live run, as rendered by the live view."""

    id: str
    started_at: datetime
    active: bool
    status: Literal["idle", "recording", "unsaved", "saved", "abandoned"] = Field(
        "recording", description="``unsaved`` after a failed save; stopping again retries it"
    )
    duration_seconds: int
    distance_meters: float
    steps: int
    step_counting: bool
    gps_accuracy: Optional[int] = None
    point_count: int
    route: Dict[str, Any] = Field(..., description="GeoJSON LineString feature")
    position: Optional[List[float]] = Field(
        None, description="Latest [lon, lat], used as marker and map centre"
    )
