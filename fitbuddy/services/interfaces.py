"""Protocol interfaces for external service clients."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Protocol, runtime_checkable

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
    WorkoutSession,
    WorkoutSet,
)


@runtime_checkable
class FitnessAPI(Protocol):
    """Typed view of the Fitness Buddy REST backend."""

    # identity
    async def get_user(self) -> User:
        """Return the signed-in user."""

    async def create_user(self, payload: UserUpdate) -> User: ...

    async def update_user(self, payload: UserUpdate) -> User: ...

    # authentication
    def google_login_url(self) -> str: ...

    async def sign_in_with_phone(self, payload: PhoneSignIn) -> Optional[User]:
        """Exchange an identity-provider token for a backend session."""

    async def logout(self) -> None: ...

    # resistance
    async def list_exercises(self) -> List[Exercise]: ...

    async def create_exercise(self, payload: ExerciseCreate) -> Exercise: ...

    async def list_sessions(self) -> List[WorkoutSession]: ...

    async def create_session(self, payload: SessionCreate) -> WorkoutSession: ...

    async def finish_session(self, session_id: int, end_time: datetime) -> None: ...

    async def delete_session(self, session_id: int) -> None: ...

    async def add_set(self, session_id: int, payload: SetCreate) -> WorkoutSet: ...

    async def update_set(self, set_id: int, payload: SetUpdate) -> None: ...

    async def delete_set(self, set_id: int) -> None: ...

    async def list_routines(self) -> List[Routine]: ...

    async def create_routine(self, payload: RoutineCreate) -> Routine: ...

    async def delete_routine(self, routine_id: int) -> None: ...

    # running
    async def list_runs(self) -> List[Run]: ...

    async def create_run(self, payload: RunCreate) -> Run: ...

    async def delete_run(self, run_id: int) -> None: ...

    async def list_shoes(self) -> List[Shoe]: ...

    async def create_shoe(self, payload: ShoeCreate) -> Shoe: ...

    # nutrition
    async def list_meals(self) -> List[Meal]: ...

    async def create_meal(self, payload: MealCreate) -> Meal: ...

    async def rename_meal(self, meal_id: int, name: str) -> None: ...

    async def delete_meal(self, meal_id: int) -> None: ...

    async def add_entry(self, meal_id: int, payload: FoodEntryCreate) -> FoodEntry: ...

    async def delete_entry(self, entry_id: int) -> None: ...

    async def list_library(self) -> List[FoodLibraryItem]: ...

    async def create_library_item(self, payload: FoodLibraryItemCreate) -> FoodLibraryItem: ...

    async def log_water(self, amount_ml: int) -> None: ...

    # body
    async def list_body_metrics(self) -> List[BodyMetric]: ...

    async def create_body_metric(self, payload: BodyMetricCreate) -> BodyMetric: ...

    # analytics
    async def daily_summaries(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[DailySummary]:
        """Return server-computed daily aggregates, newest first."""
