from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from ..domain.running import (
    Split,
    average_pace,
    elevation_profile,
    format_duration,
    kilometre_splits,
    path_bounds,
    route_geojson,
)
from ..models import PathPoint, Run, RunCreate, Shoe
from ..services.interfaces import FitnessAPI


class RunNotFoundError(Exception):
    """Raised when a run id is not among the loaded runs."""


@dataclass
class RunLogView:
    runs: List[Run] = field(default_factory=list)
    shoes: List[Shoe] = field(default_factory=list)


@dataclass
class LoadRunLogUseCase:
    api: FitnessAPI

    async def __call__(self) -> RunLogView:
        runs, shoes = await asyncio.gather(self.api.list_runs(), self.api.list_shoes())
        return RunLogView(runs=runs, shoes=shoes)


@dataclass
class ManualRunForm:
    """Manual run entry as typed by the user: kilometres and minutes."""

    start_time: datetime
    distance_km: float
    duration_minutes: float
    elevation_m: Optional[float] = None
    avg_heart_rate: Optional[int] = None
    shoe_id: Optional[int] = None
    run_type: str = "Run"
    notes: str = ""

    def to_payload(self) -> RunCreate:
        return RunCreate(
            start_time=self.start_time,
            distance_meters=self.distance_km * 1000,
            duration_seconds=int(self.duration_minutes * 60),
            elevation_gain_meters=self.elevation_m or 0,
            avg_heart_rate=self.avg_heart_rate or None,
            shoe_id=self.shoe_id,
            run_type=self.run_type,
            notes=self.notes or None,
        )


@dataclass
class LogManualRunUseCase:
    api: FitnessAPI

    async def __call__(self, form: ManualRunForm) -> Run:
        return await self.api.create_run(form.to_payload())


@dataclass
class RunDetailView:
    run: Run
    path: List[PathPoint]
    splits: List[Split]

    @property
    def pace(self) -> str:
        return average_pace(self.run.duration_seconds, self.run.distance_meters)

    @property
    def moving_time(self) -> str:
        return format_duration(self.run.duration_seconds)

    @property
    def elevation(self) -> List[Dict[str, float]]:
        return elevation_profile(self.path)

    @property
    def bounds(self) -> Optional[Tuple[Tuple[float, float], Tuple[float, float]]]:
        return path_bounds(self.path)

    @property
    def route(self) -> Dict[str, Any]:
        return route_geojson(self.path)


def build_run_detail(run: Run) -> RunDetailView:
    path = run.path()
    return RunDetailView(run=run, path=path, splits=kilometre_splits(path))


@dataclass
class LoadRunDetailUseCase:
    api: FitnessAPI

    async def __call__(self, run_id: int) -> RunDetailView:
        for run in await self.api.list_runs():
            if run.id == run_id:
                return build_run_detail(run)
        raise RunNotFoundError(f"Run {run_id} not found")


__all__ = [
    "LoadRunDetailUseCase",
    "LoadRunLogUseCase",
    "LogManualRunUseCase",
    "ManualRunForm",
    "RunDetailView",
    "RunLogView",
    "RunNotFoundError",
    "build_run_detail",
]
