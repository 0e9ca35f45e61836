from __future__ import annotations

import json
from datetime import date, datetime, timezone

import httpx
import pytest
import respx

from fitbuddy.models import PhoneSignIn, RunCreate, SetUpdate
from fitbuddy.services.fitness_api import (
    FitnessApiClient,
    FitnessApiError,
    create_fitness_api_client,
    google_login_url,
)
from fitbuddy.settings import Settings
from tests.builders import make_meal, make_run, make_summary, make_user

pytestmark = pytest.mark.asyncio

BASE = "https://api.test/api"


@pytest.fixture
def api(settings: Settings) -> FitnessApiClient:
    return create_fitness_api_client(settings=settings, session_token="token-1")


async def test_get_user_sends_session_cookie(api: FitnessApiClient, respx_mock: respx.Router) -> None:
    route = respx_mock.get(f"{BASE}/user").mock(return_value=httpx.Response(200, json=make_user()))

    user = await api.get_user()

    assert user.height_cm == 175
    assert "auth_token=token-1" in route.calls.last.request.headers["cookie"]
    assert api.session_token == "token-1"


async def test_error_response_uses_body_text(api: FitnessApiClient, respx_mock: respx.Router) -> None:
    respx_mock.get(f"{BASE}/runs").mock(return_value=httpx.Response(404, text="run table missing"))

    with pytest.raises(FitnessApiError) as excinfo:
        await api.list_runs()

    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "run table missing"
    assert not excinfo.value.is_unauthenticated


async def test_error_response_without_body(api: FitnessApiClient, respx_mock: respx.Router) -> None:
    respx_mock.delete(f"{BASE}/runs/3").mock(return_value=httpx.Response(500))

    with pytest.raises(FitnessApiError, match="Error 500"):
        await api.delete_run(3)


async def test_unauthorized_flags_unauthenticated(api: FitnessApiClient, respx_mock: respx.Router) -> None:
    respx_mock.get(f"{BASE}/user").mock(return_value=httpx.Response(401, text="Unauthorized"))

    with pytest.raises(FitnessApiError) as excinfo:
        await api.get_user()

    assert excinfo.value.is_unauthenticated


async def test_transport_failure_is_wrapped(
    api: FitnessApiClient, respx_mock: respx.Router, caplog: pytest.LogCaptureFixture
) -> None:
    respx_mock.get(f"{BASE}/meals").mock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(FitnessApiError) as excinfo:
        await api.list_meals()

    assert excinfo.value.status_code is None
    assert "connection refused" in excinfo.value.message
    assert "GET /meals failed" in caplog.text


async def test_malformed_json_is_logged_and_treated_as_empty(
    api: FitnessApiClient, respx_mock: respx.Router, caplog: pytest.LogCaptureFixture
) -> None:
    respx_mock.get(f"{BASE}/runs").mock(return_value=httpx.Response(200, text="<html>oops</html>"))

    runs = await api.list_runs()

    assert runs == []
    assert "JSON parse error for GET /runs" in caplog.text


async def test_null_collections_become_empty(api: FitnessApiClient, respx_mock: respx.Router) -> None:
    respx_mock.get(f"{BASE}/sessions").mock(return_value=httpx.Response(200, json=None))
    respx_mock.get(f"{BASE}/meals").mock(
        return_value=httpx.Response(200, json=[{**make_meal(), "entries": None}])
    )

    assert await api.list_sessions() == []
    meals = await api.list_meals()
    assert meals[0].entries == []


async def test_unexpected_payload_raises(api: FitnessApiClient, respx_mock: respx.Router) -> None:
    respx_mock.get(f"{BASE}/user").mock(return_value=httpx.Response(200, json={"name": "no id"}))

    with pytest.raises(FitnessApiError, match="Unexpected User payload"):
        await api.get_user()


async def test_empty_success_body(api: FitnessApiClient, respx_mock: respx.Router) -> None:
    route = respx_mock.put(f"{BASE}/sets/4").mock(return_value=httpx.Response(204))

    await api.update_set(4, SetUpdate(weight_kg=80, reps=5))

    assert json.loads(route.calls.last.request.content) == {"weight_kg": 80.0, "reps": 5}


async def test_daily_summaries_sends_date_range(api: FitnessApiClient, respx_mock: respx.Router) -> None:
    respx_mock.get(
        f"{BASE}/analytics/daily", params={"start": "2026-10-12", "end": "2026-10-19"}
    ).mock(return_value=httpx.Response(200, json=[make_summary()]))

    summaries = await api.daily_summaries(date(2026, 10, 12), date(2026, 10, 19))

    assert summaries[0].water_ml == 1500


async def test_finish_session_posts_end_time(api: FitnessApiClient, respx_mock: respx.Router) -> None:
    route = respx_mock.post(f"{BASE}/sessions/9/finish").mock(return_value=httpx.Response(200, json={}))

    await api.finish_session(9, datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc))

    assert json.loads(route.calls.last.request.content) == {"end_time": "2026-10-19T08:00:00+00:00"}


async def test_create_run_omits_unset_fields(api: FitnessApiClient, respx_mock: respx.Router) -> None:
    route = respx_mock.post(f"{BASE}/runs").mock(return_value=httpx.Response(201, json=make_run(id=12)))

    run = await api.create_run(
        RunCreate(
            start_time=datetime(2026, 10, 19, 6, 0, tzinfo=timezone.utc),
            duration_seconds=1500,
            distance_meters=5000,
        )
    )

    assert run.id == 12
    body = json.loads(route.calls.last.request.content)
    assert body["start_time"] == "2026-10-19T06:00:00Z"
    assert "avg_heart_rate" not in body
    assert body["run_type"] == "Run"


async def test_phone_sign_in_uses_camel_case_keys_and_stores_cookie(
    settings: Settings, respx_mock: respx.Router
) -> None:
    api = create_fitness_api_client(settings=settings)
    route = respx_mock.post(f"{BASE}/auth/phone").mock(
        return_value=httpx.Response(
            200,
            json={"user": make_user(id=4)},
            headers={"set-cookie": "auth_token=fresh; Path=/"},
        )
    )

    user = await api.sign_in_with_phone(PhoneSignIn(id_token="tok", phone_number="+919876543210"))

    assert user is not None and user.id == 4
    assert json.loads(route.calls.last.request.content) == {
        "idToken": "tok",
        "phoneNumber": "+919876543210",
    }
    assert api.session_token == "fresh"


async def test_phone_sign_in_without_user(api: FitnessApiClient, respx_mock: respx.Router) -> None:
    respx_mock.post(f"{BASE}/auth/phone").mock(return_value=httpx.Response(200, json={"ok": True}))

    assert await api.sign_in_with_phone(PhoneSignIn(id_token="tok", phone_number="+1")) is None


async def test_logout_accepts_redirect_and_drops_cookie(api: FitnessApiClient, respx_mock: respx.Router) -> None:
    respx_mock.get(f"{BASE}/auth/logout").mock(
        return_value=httpx.Response(302, headers={"location": "https://app.test/login"})
    )

    await api.logout()

    assert api.session_token is None


async def test_google_login_url(api: FitnessApiClient) -> None:
    assert google_login_url("https://api.test/api/") == "https://api.test/api/auth/google/login"
    assert api.google_login_url() == "https://api.test/api/auth/google/login"
