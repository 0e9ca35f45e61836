"""Application use cases shared by the companion service and the dashboard."""

from .analytics import LoadAnalyticsUseCase
from .auth import CurrentUserUseCase, LogoutUseCase, PhoneSignInUseCase
from .dashboard import LoadDashboardUseCase
from .live_run import LiveRunRegistry, LiveRunSession
from .meals import LoadMealLogUseCase
from .pages import PageScope, PageState
from .profile import LoadProfileUseCase, SaveProfileUseCase
from .runs import LoadRunDetailUseCase, LoadRunLogUseCase, LogManualRunUseCase
from .workouts import (
    FinishSessionUseCase,
    LoadWorkoutLogUseCase,
    LoadWorkoutSessionUseCase,
    SaveSetUseCase,
    StartRoutineUseCase,
)

__all__ = [
    "CurrentUserUseCase",
    "FinishSessionUseCase",
    "LiveRunRegistry",
    "LiveRunSession",
    "LoadAnalyticsUseCase",
    "LoadDashboardUseCase",
    "LoadMealLogUseCase",
    "LoadProfileUseCase",
    "LoadRunDetailUseCase",
    "LoadRunLogUseCase",
    "LoadWorkoutLogUseCase",
    "LoadWorkoutSessionUseCase",
    "LogManualRunUseCase",
    "LogoutUseCase",
    "PageScope",
    "PageState",
    "PhoneSignInUseCase",
    "SaveProfileUseCase",
    "SaveSetUseCase",
    "StartRoutineUseCase",
]
