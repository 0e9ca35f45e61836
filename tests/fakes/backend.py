"""In-memory Fitness Buddy backend served through ``httpx.MockTransport``."""

from __future__ import annotations

import itertools
import json
from typing import Any, Dict, List, Optional, Tuple

import httpx

from tests.builders import make_summary, make_user


class InMemoryBackend:
    """Minimal nutrition and profile backend tailored for round-trip tests.

    Only the routes the meal and profile pages touch are implemented; any
    other request answers 404 so a test notices unexpected traffic.
    """

    def __init__(self, *, prefix: str = "/api", session_token: str = "token-1") -> None:
        self._prefix = prefix
        self._session_token = session_token
        self._ids = itertools.count(1)
        self.user: Dict[str, Any] = make_user()
        self.meals: List[Dict[str, Any]] = []
        self.library: List[Dict[str, Any]] = []
        self.metrics: List[Dict[str, Any]] = []
        self.water_ml = 0
        self.requests: List[Tuple[str, str]] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith(self._prefix):
            path = path[len(self._prefix):]
        self.requests.append((request.method, path))
        if f"auth_token={self._session_token}" not in request.headers.get("cookie", ""):
            return httpx.Response(401, text="Unauthorized")
        body = json.loads(request.content) if request.content else None
        route = self._route(request.method, path, body)
        if route is None:
            return httpx.Response(404, text="Not Found")
        status, payload = route
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)

    def _route(
        self, method: str, path: str, body: Optional[Dict[str, Any]]
    ) -> Optional[Tuple[int, Any]]:
        parts = [part for part in path.split("/") if part]
        if parts == ["user"] and method == "GET":
            return 200, self.user
        if parts == ["user"] and method == "PUT":
            self.user.update(body or {})
            return 200, self.user
        if parts == ["meals"] and method == "GET":
            return 200, self.meals
        if parts == ["meals"] and method == "POST":
            meal = {
                "id": next(self._ids),
                "name": body.get("name"),
                "eaten_at": body["eaten_at"],
                "entries": None,
            }
            self.meals.append(meal)
            return 201, meal
        if len(parts) == 2 and parts[0] == "meals" and parts[1].isdigit():
            meal = self._meal(int(parts[1]))
            if meal is None:
                return 404, {"error": "meal not found"}
            if method == "PUT":
                meal["name"] = body["name"]
                return 204, None
            if method == "DELETE":
                self.meals.remove(meal)
                return 204, None
        if len(parts) == 3 and parts[0] == "meals" and parts[2] == "entries" and method == "POST":
            meal = self._meal(int(parts[1]))
            if meal is None:
                return 404, {"error": "meal not found"}
            entry = {"id": next(self._ids), "meal_id": meal["id"], **body}
            meal["entries"] = (meal.get("entries") or []) + [entry]
            return 201, entry
        if len(parts) == 3 and parts[:2] == ["meals", "entries"] and method == "DELETE":
            entry_id = int(parts[2])
            for meal in self.meals:
                meal["entries"] = [e for e in meal.get("entries") or [] if e["id"] != entry_id]
            return 204, None
        if parts == ["nutrition", "library"] and method == "GET":
            return 200, self.library
        if parts == ["nutrition", "library"] and method == "POST":
            item = {"id": next(self._ids), **body}
            self.library.append(item)
            return 201, item
        if parts == ["nutrition", "water"] and method == "POST":
            self.water_ml += body["amount_ml"]
            return 201, {"status": "logged"}
        if parts == ["analytics", "daily"] and method == "GET":
            eaten = sum(e["calories"] for m in self.meals for e in m.get("entries") or [])
            summary = make_summary(total_calories=eaten, water_ml=self.water_ml, exercise_calories=0)
            return 200, [summary]
        if parts == ["body", "metrics"] and method == "GET":
            return 200, list(reversed(self.metrics))
        if parts == ["body", "metrics"] and method == "POST":
            metric = {"id": next(self._ids), "body_fat_percent": None, **body}
            self.metrics.append(metric)
            return 201, metric
        return None

    def _meal(self, meal_id: int) -> Optional[Dict[str, Any]]:
        return next((meal for meal in self.meals if meal["id"] == meal_id), None)
