from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

PathPoint = Tuple[float, float, float, float]
"""A recorded route sample: ``(lat, lon, altitude_m, unix_seconds)``."""


class Run(BaseModel):
    """A logged run, either entered manually or recorded live."""

    id: int
    start_time: datetime
    duration_seconds: int = Field(0, description="Moving duration in seconds")
    distance_meters: float = Field(0.0, description="Distance in meters")
    elevation_gain_meters: float = Field(0.0, description="Elevation gain in meters")
    avg_heart_rate: Optional[int] = None
    cadence: Optional[int] = None
    steps: Optional[int] = None
    relative_effort: Optional[int] = None
    shoe_id: Optional[int] = None
    shoe_name: Optional[str] = None
    route_data: Optional[str] = Field(
        None, description="JSON array of [lat, lon, altitude, unix_seconds] samples"
    )
    run_type: str = "Run"
    notes: Optional[str] = None

    def path(self) -> List[PathPoint]:
        """Decode ``route_data``; malformed routes decode to an empty path."""

        if not self.route_data:
            return []
        try:
            raw = json.loads(self.route_data)
            return [
                (float(p[0]), float(p[1]), float(p[2] or 0), float(p[3]))
                for p in raw
            ]
        except (ValueError, TypeError, IndexError):
            logger.warning("Run %s has malformed route data", self.id)
            return []


class Shoe(BaseModel):
    id: int
    brand: str
    model: str
    is_active: bool = True

    @property
    def label(self) -> str:
        return f"{self.brand} {self.model}"


class RunCreate(BaseModel):
    """Payload accepted by ``POST /runs``."""

    start_time: datetime
    duration_seconds: int = Field(..., ge=0)
    distance_meters: float = Field(..., ge=0)
    elevation_gain_meters: Optional[float] = Field(None, ge=0)
    avg_heart_rate: Optional[int] = Field(None, gt=0)
    cadence: Optional[int] = None
    steps: Optional[int] = Field(None, ge=0)
    relative_effort: Optional[int] = None
    shoe_id: Optional[int] = None
    route_data: Optional[str] = None
    run_type: str = "Run"
    notes: Optional[str] = None


class ShoeCreate(BaseModel):
    brand: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
