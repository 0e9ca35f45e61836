from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BodyMetric(BaseModel):
    """A timestamped body-weight or body-fat sample."""

    id: int
    recorded_at: datetime
    weight_kg: Optional[float] = Field(None, description="Body weight in kilograms")
    body_fat_percent: Optional[float] = Field(None, description="Body fat percentage")


class BodyMetricCreate(BaseModel):
    recorded_at: datetime
    weight_kg: Optional[float] = Field(None, gt=0)
    body_fat_percent: Optional[float] = Field(None, ge=0, le=100)
