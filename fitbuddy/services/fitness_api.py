"""Async HTTP client for the Fitness Buddy REST backend."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, AsyncIterator, Dict, List, Optional, Type, TypeVar

import httpx
from fastapi import Depends, Header
from pydantic import BaseModel, TypeAdapter, ValidationError

from ..models import (
    BodyMetric,
    BodyMetricCreate,
    DailySummary,
    Exercise,
    ExerciseCreate,
    FoodEntry,
    FoodEntryCreate,
    FoodLibraryItem,
    FoodLibraryItemCreate,
    Meal,
    MealCreate,
    MealRename,
    PhoneSignIn,
    Routine,
    RoutineCreate,
    Run,
    RunCreate,
    SessionCreate,
    SetCreate,
    SetUpdate,
    Shoe,
    ShoeCreate,
    User,
    UserUpdate,
    WaterLog,
    WorkoutSession,
    WorkoutSet,
)
from ..settings import Settings, get_settings
from .interfaces import FitnessAPI

logger = logging.getLogger(__name__)

SESSION_COOKIE = "auth_token"

ModelT = TypeVar("ModelT", bound=BaseModel)


def google_login_url(base_url: str) -> str:
    """Browser URL starting the Google OAuth redirect flow."""

    return f"{base_url.rstrip('/')}/auth/google/login"


class FitnessApiError(Exception):
    """Raised for non-2xx responses, transport failures and unusable payloads."""

    def __init__(self, status_code: Optional[int], message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def is_unauthenticated(self) -> bool:
        return self.status_code in (401, 403)


def _body(payload: BaseModel) -> Dict[str, Any]:
    return payload.model_dump(mode="json", by_alias=True, exclude_none=True)


class FitnessApiClient(FitnessAPI):
    """Backend client sharing one ``httpx.AsyncClient`` and its cookie jar."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._client = http_client

    @property
    def session_token(self) -> Optional[str]:
        return self._client.cookies.get(SESSION_COOKIE)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise FitnessApiError(None, str(exc) or type(exc).__name__) from exc
        text = resp.text
        if not (resp.is_success or resp.is_redirect):
            raise FitnessApiError(resp.status_code, text or f"Error {resp.status_code}")
        if not text or resp.is_redirect:
            return {}
        try:
            return resp.json()
        except ValueError:
            logger.error("JSON parse error for %s %s: %r", method, path, text[:200])
            return {}

    @staticmethod
    def _one(model: Type[ModelT], payload: Any) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise FitnessApiError(None, f"Unexpected {model.__name__} payload") from exc

    @staticmethod
    def _many(model: Type[ModelT], payload: Any) -> List[ModelT]:
        if not isinstance(payload, list):
            return []
        try:
            return TypeAdapter(List[model]).validate_python(payload)  # type: ignore[valid-type]
        except ValidationError as exc:
            raise FitnessApiError(None, f"Unexpected {model.__name__} list payload") from exc

    # identity

    async def get_user(self) -> User:
        return self._one(User, await self._request("GET", "/user"))

    async def create_user(self, payload: UserUpdate) -> User:
        return self._one(User, await self._request("POST", "/user", json=_body(payload)))

    async def update_user(self, payload: UserUpdate) -> User:
        return self._one(User, await self._request("PUT", "/user", json=_body(payload)))

    # authentication

    def google_login_url(self) -> str:
        return google_login_url(str(self._client.base_url))

    async def sign_in_with_phone(self, payload: PhoneSignIn) -> Optional[User]:
        data = await self._request("POST", "/auth/phone", json=_body(payload))
        user = data.get("user") if isinstance(data, dict) else None
        return self._one(User, user) if user else None

    async def logout(self) -> None:
        await self._request("GET", "/auth/logout")
        self._client.cookies.delete(SESSION_COOKIE)

    # resistance

    async def list_exercises(self) -> List[Exercise]:
        return self._many(Exercise, await self._request("GET", "/exercises"))

    async def create_exercise(self, payload: ExerciseCreate) -> Exercise:
        return self._one(Exercise, await self._request("POST", "/exercises", json=_body(payload)))

    async def list_sessions(self) -> List[WorkoutSession]:
        return self._many(WorkoutSession, await self._request("GET", "/sessions"))

    async def create_session(self, payload: SessionCreate) -> WorkoutSession:
        data = await self._request("POST", "/sessions", json=_body(payload))
        return self._one(WorkoutSession, data)

    async def finish_session(self, session_id: int, end_time: datetime) -> None:
        await self._request(
            "POST", f"/sessions/{session_id}/finish", json={"end_time": end_time.isoformat()}
        )

    async def delete_session(self, session_id: int) -> None:
        await self._request("DELETE", f"/sessions/{session_id}")

    async def add_set(self, session_id: int, payload: SetCreate) -> WorkoutSet:
        data = await self._request("POST", f"/sessions/{session_id}/sets", json=_body(payload))
        return self._one(WorkoutSet, data)

    async def update_set(self, set_id: int, payload: SetUpdate) -> None:
        await self._request("PUT", f"/sets/{set_id}", json=_body(payload))

    async def delete_set(self, set_id: int) -> None:
        await self._request("DELETE", f"/sets/{set_id}")

    async def list_routines(self) -> List[Routine]:
        return self._many(Routine, await self._request("GET", "/routines"))

    async def create_routine(self, payload: RoutineCreate) -> Routine:
        return self._one(Routine, await self._request("POST", "/routines", json=_body(payload)))

    async def delete_routine(self, routine_id: int) -> None:
        await self._request("DELETE", f"/routines/{routine_id}")

    # running

    async def list_runs(self) -> List[Run]:
        return self._many(Run, await self._request("GET", "/runs"))

    async def create_run(self, payload: RunCreate) -> Run:
        return self._one(Run, await self._request("POST", "/runs", json=_body(payload)))

    async def delete_run(self, run_id: int) -> None:
        await self._request("DELETE", f"/runs/{run_id}")

    async def list_shoes(self) -> List[Shoe]:
        return self._many(Shoe, await self._request("GET", "/shoes"))

    async def create_shoe(self, payload: ShoeCreate) -> Shoe:
        return self._one(Shoe, await self._request("POST", "/shoes", json=_body(payload)))

    # nutrition

    async def list_meals(self) -> List[Meal]:
        return self._many(Meal, await self._request("GET", "/meals"))

    async def create_meal(self, payload: MealCreate) -> Meal:
        return self._one(Meal, await self._request("POST", "/meals", json=_body(payload)))

    async def rename_meal(self, meal_id: int, name: str) -> None:
        await self._request("PUT", f"/meals/{meal_id}", json=_body(MealRename(name=name)))

    async def delete_meal(self, meal_id: int) -> None:
        await self._request("DELETE", f"/meals/{meal_id}")

    async def add_entry(self, meal_id: int, payload: FoodEntryCreate) -> FoodEntry:
        data = await self._request("POST", f"/meals/{meal_id}/entries", json=_body(payload))
        return self._one(FoodEntry, data)

    async def delete_entry(self, entry_id: int) -> None:
        await self._request("DELETE", f"/meals/entries/{entry_id}")

    async def list_library(self) -> List[FoodLibraryItem]:
        return self._many(FoodLibraryItem, await self._request("GET", "/nutrition/library"))

    async def create_library_item(self, payload: FoodLibraryItemCreate) -> FoodLibraryItem:
        data = await self._request("POST", "/nutrition/library", json=_body(payload))
        return self._one(FoodLibraryItem, data)

    async def log_water(self, amount_ml: int) -> None:
        await self._request("POST", "/nutrition/water", json=_body(WaterLog(amount_ml=amount_ml)))

    # body

    async def list_body_metrics(self) -> List[BodyMetric]:
        return self._many(BodyMetric, await self._request("GET", "/body/metrics"))

    async def create_body_metric(self, payload: BodyMetricCreate) -> BodyMetric:
        data = await self._request("POST", "/body/metrics", json=_body(payload))
        return self._one(BodyMetric, data)

    # analytics

    async def daily_summaries(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[DailySummary]:
        params: Dict[str, str] = {}
        if start:
            params["start"] = start.isoformat()
        if end:
            params["end"] = end.isoformat()
        data = await self._request("GET", "/analytics/daily", params=params)
        return self._many(DailySummary, data)


def create_http_client(
    *,
    settings: Settings,
    session_token: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build the shared ``httpx.AsyncClient`` for backend calls."""

    cookies = httpx.Cookies()
    token = session_token or settings.backend_session_cookie
    if token:
        cookies.set(SESSION_COOKIE, token)
    return httpx.AsyncClient(
        base_url=settings.backend_url,
        timeout=settings.backend_timeout_seconds,
        cookies=cookies,
        transport=transport,
    )


def create_fitness_api_client(
    *,
    settings: Settings,
    session_token: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FitnessApiClient:
    """Create a backend client without FastAPI dependencies."""

    return FitnessApiClient(
        create_http_client(settings=settings, session_token=session_token, transport=transport)
    )


async def get_fitness_api(
    settings: Settings = Depends(get_settings),
    x_backend_session: Optional[str] = Header(None),
) -> AsyncIterator[FitnessAPI]:
    """Dependency yielding a backend client, optionally bound to a forwarded session."""

    client = create_fitness_api_client(settings=settings, session_token=x_backend_session)
    try:
        yield client
    finally:
        await client.aclose()


__all__ = [
    "FitnessApiClient",
    "FitnessApiError",
    "SESSION_COOKIE",
    "create_fitness_api_client",
    "create_http_client",
    "get_fitness_api",
    "google_login_url",
]
