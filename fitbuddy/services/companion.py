"""Synchronous client used by the dashboard to drive the companion service."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..models import (
    LiveRunSnapshot,
    LiveRunStart,
    MotionSample,
    OperationStatus,
    PositionSample,
    Run,
    SensorError,
    TimerState,
)
from ..settings import Settings

logger = logging.getLogger(__name__)


class CompanionError(Exception):
    def __init__(self, status_code: Optional[int], message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class CompanionClient:
    """Timer and live-run calls against the companion ``/v1`` API."""

    def __init__(self, http_client: httpx.Client) -> None:
        self._client = http_client

    def close(self) -> None:
        self._client.close()

    def _call(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = self._client.request(method, f"/v1{path}", **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Companion %s %s failed: %s", method, path, exc)
            raise CompanionError(None, str(exc) or type(exc).__name__) from exc
        if not resp.is_success:
            message = resp.text or f"Error {resp.status_code}"
            try:
                body = resp.json()
            except ValueError:
                body = None
            detail = body.get("detail") if isinstance(body, dict) else None
            if isinstance(detail, dict) and "error" in detail:
                message = str(detail["error"])
            elif isinstance(detail, str):
                message = detail
            raise CompanionError(resp.status_code, message)
        return resp.json()

    # rest timer

    def timer(self) -> TimerState:
        return TimerState.model_validate(self._call("GET", "/timer"))

    def start_timer(self, initial_seconds: Optional[int] = None) -> TimerState:
        body: Dict[str, Any] = {}
        if initial_seconds is not None:
            body["initial_seconds"] = initial_seconds
        return TimerState.model_validate(self._call("POST", "/timer/start", json=body))

    def add_time(self, delta: int) -> TimerState:
        return TimerState.model_validate(self._call("POST", "/timer/add", json={"delta": delta}))

    def pause_timer(self) -> TimerState:
        return TimerState.model_validate(self._call("POST", "/timer/pause"))

    def resume_timer(self) -> TimerState:
        return TimerState.model_validate(self._call("POST", "/timer/resume"))

    def stop_timer(self) -> TimerState:
        return TimerState.model_validate(self._call("POST", "/timer/stop"))

    # live runs

    def start_live_run(self, motion_permission: str = "granted") -> LiveRunSnapshot:
        body = LiveRunStart(motion_permission=motion_permission).model_dump()
        return LiveRunSnapshot.model_validate(self._call("POST", "/live-runs", json=body))

    def live_run(self, run_id: str) -> LiveRunSnapshot:
        return LiveRunSnapshot.model_validate(self._call("GET", f"/live-runs/{run_id}"))

    def push_position(self, run_id: str, sample: PositionSample) -> LiveRunSnapshot:
        data = self._call(
            "POST", f"/live-runs/{run_id}/positions", json=sample.model_dump(exclude_none=True)
        )
        return LiveRunSnapshot.model_validate(data)

    def push_motion(self, run_id: str, sample: MotionSample) -> LiveRunSnapshot:
        data = self._call("POST", f"/live-runs/{run_id}/motion", json=sample.model_dump())
        return LiveRunSnapshot.model_validate(data)

    def report_error(self, run_id: str, error: SensorError) -> None:
        self._call("POST", f"/live-runs/{run_id}/errors", json=error.model_dump())

    def stop_live_run(self, run_id: str, *, session_token: Optional[str] = None) -> Run:
        headers = {"x-backend-session": session_token} if session_token else None
        return Run.model_validate(self._call("POST", f"/live-runs/{run_id}/stop", headers=headers))

    def abandon_live_run(self, run_id: str) -> OperationStatus:
        return OperationStatus.model_validate(self._call("POST", f"/live-runs/{run_id}/abandon"))


def create_companion_client(
    *, settings: Settings, transport: Optional[httpx.BaseTransport] = None
) -> CompanionClient:
    return CompanionClient(
        httpx.Client(
            base_url=settings.companion_url,
            headers={"x-api-key": settings.api_key},
            timeout=settings.backend_timeout_seconds,
            transport=transport,
        )
    )
