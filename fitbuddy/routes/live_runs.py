from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..application.live_run import (
    LiveRunFinishedError,
    LiveRunNotFoundError,
    LiveRunRegistry,
    LiveRunSession,
)
from ..models import (
    LiveRunSnapshot,
    LiveRunStart,
    MotionSample,
    OperationStatus,
    PositionSample,
    Run,
    SensorError,
)
from ..platform.wiring import get_live_run_registry
from ..services.fitness_api import FitnessApiError, get_fitness_api
from ..services.interfaces import FitnessAPI

logger = logging.getLogger(__name__)

router: APIRouter = APIRouter(prefix="/live-runs", tags=["live-runs"])


def _session(registry: LiveRunRegistry, run_id: str) -> LiveRunSession:
    try:
        return registry.get(run_id)
    except LiveRunNotFoundError:
        raise HTTPException(status_code=404, detail={"error": "Live run not found"}) from None
    except LiveRunFinishedError:
        raise _finished(run_id) from None


def _finished(run_id: str) -> HTTPException:
    return HTTPException(status_code=409, detail={"error": f"Live run {run_id} is finished"})


@router.post("", response_model=LiveRunSnapshot, status_code=201)
async def start_live_run(
    body: LiveRunStart | None = None,
    registry: LiveRunRegistry = Depends(get_live_run_registry),
) -> LiveRunSnapshot:
    session = registry.create((body or LiveRunStart()).motion_permission)
    return session.snapshot()


@router.get("/{run_id}", response_model=LiveRunSnapshot)
async def read_live_run(
    run_id: str, registry: LiveRunRegistry = Depends(get_live_run_registry)
) -> LiveRunSnapshot:
    return _session(registry, run_id).snapshot()


@router.post("/{run_id}/positions", response_model=LiveRunSnapshot)
async def push_position(
    run_id: str,
    sample: PositionSample,
    registry: LiveRunRegistry = Depends(get_live_run_registry),
) -> LiveRunSnapshot:
    session = _session(registry, run_id)
    try:
        session.push_position(sample)
    except LiveRunFinishedError:
        raise _finished(run_id) from None
    return session.snapshot()


@router.post("/{run_id}/motion", response_model=LiveRunSnapshot)
async def push_motion(
    run_id: str,
    sample: MotionSample,
    registry: LiveRunRegistry = Depends(get_live_run_registry),
) -> LiveRunSnapshot:
    session = _session(registry, run_id)
    try:
        session.push_motion(sample)
    except LiveRunFinishedError:
        raise _finished(run_id) from None
    return session.snapshot()


@router.post("/{run_id}/errors", response_model=OperationStatus, status_code=202)
async def report_sensor_error(
    run_id: str,
    error: SensorError,
    registry: LiveRunRegistry = Depends(get_live_run_registry),
) -> OperationStatus:
    session = _session(registry, run_id)
    try:
        session.report_error(error)
    except LiveRunFinishedError:
        raise _finished(run_id) from None
    return OperationStatus(status="logged")


@router.post("/{run_id}/stop", response_model=Run)
async def stop_live_run(
    run_id: str,
    registry: LiveRunRegistry = Depends(get_live_run_registry),
    api: FitnessAPI = Depends(get_fitness_api),
) -> Run:
    _session(registry, run_id)
    try:
        return await registry.stop(run_id, api)
    except LiveRunFinishedError:
        raise _finished(run_id) from None
    except FitnessApiError as exc:
        logger.exception("Saving live run %s failed", run_id)
        raise HTTPException(status_code=502, detail={"error": exc.message}) from exc


@router.post("/{run_id}/abandon", response_model=OperationStatus)
async def abandon_live_run(
    run_id: str, registry: LiveRunRegistry = Depends(get_live_run_registry)
) -> OperationStatus:
    _session(registry, run_id)
    try:
        registry.abandon(run_id)
    except LiveRunFinishedError:
        raise _finished(run_id) from None
    return OperationStatus(status="abandoned", id=run_id)
