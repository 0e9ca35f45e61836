"""FastAPI dependency wiring for companion state."""

from __future__ import annotations

from fastapi import Request

from ..application.live_run import LiveRunRegistry
from ..domain.timer import RestTimer


def get_rest_timer(request: Request) -> RestTimer:
    return request.app.state.rest_timer


def get_live_run_registry(request: Request) -> LiveRunRegistry:
    return request.app.state.live_runs


__all__ = ["get_live_run_registry", "get_rest_timer"]
