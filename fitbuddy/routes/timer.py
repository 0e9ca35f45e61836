from __future__ import annotations

from fastapi import APIRouter, Depends

from ..domain.timer import RestTimer
from ..models import TimerAdjust, TimerStart, TimerState
from ..platform.wiring import get_rest_timer

router: APIRouter = APIRouter(prefix="/timer", tags=["timer"])


@router.get("", response_model=TimerState)
async def read_timer(timer: RestTimer = Depends(get_rest_timer)) -> TimerState:
    return timer.state()


@router.post("/start", response_model=TimerState)
async def start_timer(
    body: TimerStart | None = None, timer: RestTimer = Depends(get_rest_timer)
) -> TimerState:
    timer.start_timer(body.initial_seconds if body else None)
    return timer.state()


@router.post("/add", response_model=TimerState)
async def add_time(body: TimerAdjust, timer: RestTimer = Depends(get_rest_timer)) -> TimerState:
    timer.add_time(body.delta)
    return timer.state()


@router.post("/pause", response_model=TimerState)
async def pause_timer(timer: RestTimer = Depends(get_rest_timer)) -> TimerState:
    timer.pause()
    return timer.state()


@router.post("/resume", response_model=TimerState)
async def resume_timer(timer: RestTimer = Depends(get_rest_timer)) -> TimerState:
    timer.resume()
    return timer.state()


@router.post("/stop", response_model=TimerState)
async def stop_timer(timer: RestTimer = Depends(get_rest_timer)) -> TimerState:
    timer.stop_timer()
    return timer.state()
