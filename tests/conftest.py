"""Shared test fixtures and doubles."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from fitbuddy import main
from fitbuddy.application.live_run import LiveRunRegistry
from fitbuddy.domain.timer import RestTimer
from fitbuddy.models import (
    BodyMetricCreate,
    ExerciseCreate,
    FoodEntryCreate,
    FoodLibraryItemCreate,
    MealCreate,
    PhoneSignIn,
    RoutineCreate,
    RunCreate,
    SessionCreate,
    SetCreate,
    SetUpdate,
    ShoeCreate,
    UserUpdate,
)
from fitbuddy.services.fitness_api import get_fitness_api
from fitbuddy.services.interfaces import FitnessAPI
from fitbuddy.settings import Settings, get_settings


class ManualHandle:
    def __init__(self, scheduler: "ManualScheduler", seconds: float, callback: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self.seconds = seconds
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Interval scheduler driven explicitly by tests via ``advance``."""

    def __init__(self) -> None:
        self.handles: List[ManualHandle] = []

    def call_every(self, seconds: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self, seconds, callback)
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> List[ManualHandle]:
        return [handle for handle in self.handles if not handle.cancelled]

    def advance(self, ticks: int = 1) -> None:
        """Fire every live interval ``ticks`` times."""

        for _ in range(ticks):
            for handle in self.active:
                handle.callback()


class TimerSpy:
    """Records rest-timer calls made by page use cases."""

    def __init__(self) -> None:
        self.calls: List[tuple[str, Optional[int]]] = []

    def start_timer(self, initial_seconds: Optional[int] = None) -> None:
        self.calls.append(("start", initial_seconds))

    def stop_timer(self) -> None:
        self.calls.append(("stop", None))


@dataclass
class _Expectation:
    expected: Dict[str, Any]
    returns: Any = None
    raises: Exception | None = None


_LIST_CALLS = {
    "list_exercises",
    "list_sessions",
    "list_routines",
    "list_runs",
    "list_shoes",
    "list_meals",
    "list_library",
    "list_body_metrics",
    "daily_summaries",
}


@dataclass
class FitnessAPIStub(FitnessAPI):
    """Stubbed backend API with expectation helpers.

    ``expect(name, returns=..., raises=..., **expected)`` queues a response for
    the next ``name`` call and checks any expected keyword values. Calls without
    a queued expectation return an empty list for list calls and None otherwise.
    """

    _expectations: Dict[str, List[_Expectation]] = field(default_factory=dict)
    history: List[tuple[str, Dict[str, Any]]] = field(default_factory=list)

    def expect(
        self,
        name: str,
        *,
        returns: Any = None,
        raises: Exception | None = None,
        **expected: Any,
    ) -> "FitnessAPIStub":
        self._expectations.setdefault(name, []).append(_Expectation(expected, returns, raises))
        return self

    def calls(self, name: str) -> List[Dict[str, Any]]:
        return [arguments for call, arguments in self.history if call == name]

    def call_names(self) -> List[str]:
        return [call for call, _ in self.history]

    def assert_last(self, name: str, **expected: Any) -> None:
        recorded = self.calls(name)
        assert recorded, f"No {name} call was recorded"
        for key, value in expected.items():
            assert (
                recorded[-1].get(key) == value
            ), f"Expected last {name} {key}={value!r}, saw {recorded[-1].get(key)!r}"

    async def _handle(self, name: str, **arguments: Any) -> Any:
        self.history.append((name, arguments))
        queue = self._expectations.get(name)
        if queue:
            expectation = queue.pop(0)
            for key, expected_value in expectation.expected.items():
                if arguments.get(key) != expected_value:
                    raise AssertionError(
                        f"Expected {name} {key}={expected_value!r} but got {arguments.get(key)!r}"
                    )
            if expectation.raises:
                raise expectation.raises
            return expectation.returns
        return [] if name in _LIST_CALLS else None

    async def get_user(self):
        return await self._handle("get_user")

    async def create_user(self, payload: UserUpdate):
        return await self._handle("create_user", payload=payload)

    async def update_user(self, payload: UserUpdate):
        return await self._handle("update_user", payload=payload)

    def google_login_url(self) -> str:
        return "https://api.test/api/auth/google/login"

    async def sign_in_with_phone(self, payload: PhoneSignIn):
        return await self._handle("sign_in_with_phone", payload=payload)

    async def logout(self):
        return await self._handle("logout")

    async def list_exercises(self):
        return await self._handle("list_exercises")

    async def create_exercise(self, payload: ExerciseCreate):
        return await self._handle("create_exercise", payload=payload)

    async def list_sessions(self):
        return await self._handle("list_sessions")

    async def create_session(self, payload: SessionCreate):
        return await self._handle("create_session", payload=payload)

    async def finish_session(self, session_id: int, end_time: datetime):
        return await self._handle("finish_session", session_id=session_id, end_time=end_time)

    async def delete_session(self, session_id: int):
        return await self._handle("delete_session", session_id=session_id)

    async def add_set(self, session_id: int, payload: SetCreate):
        return await self._handle("add_set", session_id=session_id, payload=payload)

    async def update_set(self, set_id: int, payload: SetUpdate):
        return await self._handle("update_set", set_id=set_id, payload=payload)

    async def delete_set(self, set_id: int):
        return await self._handle("delete_set", set_id=set_id)

    async def list_routines(self):
        return await self._handle("list_routines")

    async def create_routine(self, payload: RoutineCreate):
        return await self._handle("create_routine", payload=payload)

    async def delete_routine(self, routine_id: int):
        return await self._handle("delete_routine", routine_id=routine_id)

    async def list_runs(self):
        return await self._handle("list_runs")

    async def create_run(self, payload: RunCreate):
        return await self._handle("create_run", payload=payload)

    async def delete_run(self, run_id: int):
        return await self._handle("delete_run", run_id=run_id)

    async def list_shoes(self):
        return await self._handle("list_shoes")

    async def create_shoe(self, payload: ShoeCreate):
        return await self._handle("create_shoe", payload=payload)

    async def list_meals(self):
        return await self._handle("list_meals")

    async def create_meal(self, payload: MealCreate):
        return await self._handle("create_meal", payload=payload)

    async def rename_meal(self, meal_id: int, name: str):
        return await self._handle("rename_meal", meal_id=meal_id, name=name)

    async def delete_meal(self, meal_id: int):
        return await self._handle("delete_meal", meal_id=meal_id)

    async def add_entry(self, meal_id: int, payload: FoodEntryCreate):
        return await self._handle("add_entry", meal_id=meal_id, payload=payload)

    async def delete_entry(self, entry_id: int):
        return await self._handle("delete_entry", entry_id=entry_id)

    async def list_library(self):
        return await self._handle("list_library")

    async def create_library_item(self, payload: FoodLibraryItemCreate):
        return await self._handle("create_library_item", payload=payload)

    async def log_water(self, amount_ml: int):
        return await self._handle("log_water", amount_ml=amount_ml)

    async def list_body_metrics(self):
        return await self._handle("list_body_metrics")

    async def create_body_metric(self, payload: BodyMetricCreate):
        return await self._handle("create_body_metric", payload=payload)

    async def daily_summaries(self, start: Optional[date] = None, end: Optional[date] = None):
        return await self._handle("daily_summaries", start=start, end=end)


@pytest.fixture(autouse=True)
def _restore_logger_state() -> Iterator[None]:
    """Undo loggers disabled by third-party dictConfig calls (e.g. import-linter's CLI)."""
    yield
    for logger in logging.root.manager.loggerDict.values():
        if isinstance(logger, logging.Logger) and logger.name.startswith("fitbuddy"):
            logger.disabled = False


@pytest.fixture
def settings() -> Settings:
    """Canonical settings instance reused across tests."""

    return Settings(
        api_key="test-key",
        backend_url="https://api.test/api",
        backend_session_cookie=None,
        companion_url="http://testserver",
        mapbox_token="",
        tile_url_template="https://tiles.test/{z}/{x}/{y}.png?key={key}",
        tile_api_key="tile-key",
    )


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def timer_spy() -> TimerSpy:
    return TimerSpy()


@pytest.fixture
def fitness_api_stub() -> FitnessAPIStub:
    return FitnessAPIStub()


@pytest.fixture
def app(
    settings: Settings,
    scheduler: ManualScheduler,
    fitness_api_stub: FitnessAPIStub,
) -> Iterator[FastAPI]:
    """Configured companion application with manual clocks and a stubbed backend."""

    app = main.app
    app.state.rest_timer = RestTimer(scheduler)
    app.state.live_runs = LiveRunRegistry(scheduler)
    overrides = {
        get_settings: lambda: settings,
        get_fitness_api: lambda: fitness_api_stub,
    }
    app.dependency_overrides.update(overrides)
    try:
        yield app
    finally:
        app.state.live_runs.close()
        app.state.rest_timer.close()
        for dependency in overrides:
            app.dependency_overrides.pop(dependency, None)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    """Async HTTP client bound to the companion app."""

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as api_client:
        yield api_client


@pytest.fixture
def auth_headers(settings: Settings) -> Dict[str, str]:
    return {"x-api-key": settings.api_key}
