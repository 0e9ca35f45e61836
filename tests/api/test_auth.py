"""Authentication and schema contract tests."""

from __future__ import annotations

import httpx
import pytest
from openapi_spec_validator import validate

from fitbuddy.settings import Settings

pytestmark = pytest.mark.asyncio


@pytest.mark.parametrize(
    ("headers", "expected_status"),
    [
        pytest.param({}, 401, id="missing"),
        pytest.param({"x-api-key": "wrong"}, 401, id="invalid"),
        pytest.param("valid", 200, id="valid"),
    ],
)
async def test_api_schema_auth_contract(
    client: httpx.AsyncClient, settings: Settings, headers: dict[str, str] | str, expected_status: int
) -> None:
    """The API schema endpoint enforces the x-api-key contract."""

    request_headers = (
        {"x-api-key": settings.api_key} if isinstance(headers, str) else headers
    )

    response = await client.get("/v1/api-schema", headers=request_headers)

    assert response.status_code == expected_status


@pytest.mark.parametrize(
    ("method", "path"),
    [
        pytest.param("GET", "/v1/timer", id="timer"),
        pytest.param("POST", "/v1/timer/start", id="timer-start"),
        pytest.param("POST", "/v1/live-runs", id="live-run-start"),
        pytest.param("GET", "/v1/live-runs/abc", id="live-run-read"),
    ],
)
async def test_routes_require_api_key(client: httpx.AsyncClient, method: str, path: str) -> None:
    response = await client.request(method, path, headers={"x-api-key": "wrong"})

    assert response.status_code == 401
    assert response.json() == {"detail": {"error": "Unauthorized"}}


async def test_rejected_key_is_logged(client: httpx.AsyncClient, caplog: pytest.LogCaptureFixture) -> None:
    await client.get("/v1/timer", headers={"x-api-key": "wrong"})
    await client.post("/v1/live-runs")

    assert "Rejected GET /v1/timer: invalid API key" in caplog.text
    assert "Rejected POST /v1/live-runs: missing API key" in caplog.text


async def test_openapi_schema(client: httpx.AsyncClient, settings: Settings) -> None:
    """The generated schema defines the API key security scheme only once."""

    response = await client.get("/v1/api-schema", headers={"x-api-key": settings.api_key})

    assert response.status_code == 200
    schema = response.json()
    validate(schema)

    assert schema["servers"] == [{"url": settings.companion_url}]
    assert schema["components"]["securitySchemes"]["ApiKeyAuth"]["name"] == "x-api-key"
    assert "/v1/live-runs/{run_id}/stop" in schema["paths"]
    for path_item in schema["paths"].values():
        for operation in path_item.values():
            if isinstance(operation, dict) and "parameters" in operation:
                assert all(parameter["name"] != "x-api-key" for parameter in operation["parameters"])
