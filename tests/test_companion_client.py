from __future__ import annotations

import json

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from fitbuddy.models import MotionSample, PositionSample, Run, SensorError
from fitbuddy.services.companion import CompanionClient, CompanionError, create_companion_client
from fitbuddy.settings import Settings
from tests.builders import make_run
from tests.conftest import FitnessAPIStub, ManualScheduler


@pytest.fixture
def companion(app: FastAPI, settings: Settings) -> CompanionClient:
    client = TestClient(app, base_url="http://testserver", headers={"x-api-key": settings.api_key})
    return CompanionClient(client)


def test_timer_commands_round_trip(companion: CompanionClient, scheduler: ManualScheduler) -> None:
    assert companion.timer().is_running is False

    started = companion.start_timer(30)
    scheduler.advance(3)
    ticking = companion.timer()
    paused = companion.pause_timer()
    adjusted = companion.add_time(-30)
    resumed = companion.resume_timer()
    stopped = companion.stop_timer()

    assert started.mode == "countdown"
    assert ticking.display == "0:27"
    assert paused.is_paused
    assert adjusted.display == "+0:03"
    assert not resumed.is_paused
    assert stopped.time == 0 and not stopped.is_running


def test_live_run_round_trip(
    companion: CompanionClient, scheduler: ManualScheduler, fitness_api_stub: FitnessAPIStub
) -> None:
    fitness_api_stub.expect("create_run", returns=Run.model_validate(make_run(id=31)))

    run = companion.start_live_run()
    companion.push_position(run.id, PositionSample(latitude=12.97, longitude=77.59, accuracy=5))
    snapshot = companion.push_motion(run.id, MotionSample(x=0, y=0, z=30))
    companion.report_error(run.id, SensorError(sensor="motion", message="paused by OS"))
    scheduler.advance(10)
    current = companion.live_run(run.id)
    saved = companion.stop_live_run(run.id, session_token="token-1")

    assert snapshot.point_count == 1
    assert current.duration_seconds == 10
    assert current.position == [77.59, 12.97]
    assert saved.id == 31
    assert fitness_api_stub.calls("create_run")[0]["payload"].duration_seconds == 10


def test_abandoned_run_reports_conflict(companion: CompanionClient) -> None:
    run = companion.start_live_run("denied")
    status = companion.abandon_live_run(run.id)

    assert (status.status, status.id) == ("abandoned", run.id)

    with pytest.raises(CompanionError) as excinfo:
        companion.push_motion(run.id, MotionSample(x=1, y=1, z=1))

    assert excinfo.value.status_code == 409
    assert excinfo.value.message == f"Live run {run.id} is finished"


def test_unknown_run_message(companion: CompanionClient) -> None:
    with pytest.raises(CompanionError, match="Live run not found"):
        companion.live_run("nope")


def test_error_detail_parsing(settings: Settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/timer":
            return httpx.Response(401, json={"detail": {"error": "Unauthorized"}})
        if request.url.path == "/v1/timer/stop":
            return httpx.Response(422, json={"detail": "bad body"})
        if request.url.path == "/v1/timer/resume":
            return httpx.Response(500, json=["unexpected", "list"])
        return httpx.Response(503, text="")

    client = create_companion_client(settings=settings, transport=httpx.MockTransport(handler))

    with pytest.raises(CompanionError, match="Unauthorized"):
        client.timer()
    with pytest.raises(CompanionError, match="bad body"):
        client.stop_timer()
    with pytest.raises(CompanionError, match="Error 503"):
        client.pause_timer()
    with pytest.raises(CompanionError) as excinfo:
        client.resume_timer()
    assert excinfo.value.status_code == 500
    assert "unexpected" in excinfo.value.message


def test_requests_carry_api_key_and_forwarded_session(settings: Settings) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=make_run(id=2))

    client = create_companion_client(settings=settings, transport=httpx.MockTransport(handler))

    client.stop_live_run("abc", session_token="token-1")
    client.close()

    assert seen[0].url.path == "/v1/live-runs/abc/stop"
    assert seen[0].headers["x-api-key"] == "test-key"
    assert seen[0].headers["x-backend-session"] == "token-1"


def test_start_timer_body(settings: Settings) -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={"time": 0, "mode": "stopwatch", "is_running": True, "is_paused": False, "display": "0:00"},
        )

    client = create_companion_client(settings=settings, transport=httpx.MockTransport(handler))

    client.start_timer()
    client.start_timer(45)

    assert bodies == [{}, {"initial_seconds": 45}]
