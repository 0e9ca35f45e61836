from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from ..domain.resistance import ExerciseGroup, group_sets, total_volume
from ..models import (
    Exercise,
    ExerciseCreate,
    Routine,
    RoutineCreate,
    SessionCreate,
    SetCreate,
    SetUpdate,
    WorkoutSession,
    WorkoutSet,
)
from ..services.companion import CompanionError
from ..services.fitness_api import FitnessApiError
from ..services.interfaces import FitnessAPI
from .ports import TimerPort

logger = logging.getLogger(__name__)

FREESTYLE_NOTES = "Freestyle"
REST_SECONDS = 30


class SessionNotFoundError(Exception):
    """Raised when a session id is not among the loaded sessions."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class WorkoutLogView:
    sessions: List[WorkoutSession] = field(default_factory=list)
    routines: List[Routine] = field(default_factory=list)
    exercises: List[Exercise] = field(default_factory=list)


@dataclass
class LoadWorkoutLogUseCase:
    api: FitnessAPI

    async def __call__(self) -> WorkoutLogView:
        sessions, routines, exercises = await asyncio.gather(
            self.api.list_sessions(), self.api.list_routines(), self.api.list_exercises()
        )
        return WorkoutLogView(sessions=sessions, routines=routines, exercises=exercises)


@dataclass
class StartEmptySessionUseCase:
    api: FitnessAPI

    async def __call__(self) -> WorkoutSession:
        return await self.api.create_session(SessionCreate(notes=FREESTYLE_NOTES))


@dataclass
class StartRoutineUseCase:
    """Open a session named after the routine with one empty set per exercise."""

    api: FitnessAPI

    async def __call__(self, routine: Routine) -> WorkoutSession:
        session = await self.api.create_session(SessionCreate(notes=routine.name))
        # Sequential so the placeholder sets keep the routine's order.
        for routine_exercise in routine.exercises:
            await self.api.add_set(
                session.id,
                SetCreate(exercise_id=routine_exercise.exercise_id, weight_kg=0, reps=0, rpe=0),
            )
        return session


@dataclass
class CreateRoutineUseCase:
    api: FitnessAPI

    async def __call__(self, name: str, exercise_ids: Sequence[int]) -> Routine:
        return await self.api.create_routine(
            RoutineCreate(name=name, exercise_ids=list(exercise_ids))
        )


@dataclass
class CreateExerciseUseCase:
    api: FitnessAPI

    async def __call__(self, payload: ExerciseCreate) -> Exercise:
        return await self.api.create_exercise(payload)


@dataclass
class WorkoutSessionView:
    """A live session page: the session, its sets and the exercise catalogue."""

    session: WorkoutSession
    exercises: List[Exercise]
    sets: List[WorkoutSet] = field(default_factory=list)

    @property
    def groups(self) -> List[ExerciseGroup]:
        return group_sets(self.sets)

    @property
    def volume(self) -> float:
        return total_volume(self.sets)

    def exercise_name(self, exercise_id: int) -> str:
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise.name
        return "Unknown"

    def update_set_locally(self, set_id: int, **changes: object) -> Optional[WorkoutSet]:
        for index, workout_set in enumerate(self.sets):
            if workout_set.id == set_id:
                updated = workout_set.model_copy(update=changes)
                self.sets[index] = updated
                return updated
        return None


@dataclass
class LoadWorkoutSessionUseCase:
    api: FitnessAPI

    async def __call__(self, session_id: int) -> WorkoutSessionView:
        exercises, sessions = await asyncio.gather(
            self.api.list_exercises(), self.api.list_sessions()
        )
        for session in sessions:
            if session.id == session_id:
                return WorkoutSessionView(
                    session=session, exercises=exercises, sets=list(session.sets)
                )
        raise SessionNotFoundError(f"Session {session_id} not found")


@dataclass
class AddSetUseCase:
    api: FitnessAPI

    async def __call__(
        self,
        view: WorkoutSessionView,
        exercise_id: int,
        *,
        weight_kg: float = 0,
        reps: int = 0,
        rpe: float = 0,
    ) -> WorkoutSet:
        created = await self.api.add_set(
            view.session.id,
            SetCreate(exercise_id=exercise_id, weight_kg=weight_kg, reps=reps, rpe=rpe),
        )
        created = created.model_copy(update={"exercise_name": view.exercise_name(exercise_id)})
        view.sets.append(created)
        return created


@dataclass
class SaveSetUseCase:
    """Persist a set, then restart the rest countdown."""

    api: FitnessAPI
    timer: TimerPort
    rest_seconds: int = REST_SECONDS

    async def __call__(self, workout_set: WorkoutSet) -> bool:
        """Return whether the rest timer was restarted after the save."""

        await self.api.update_set(
            workout_set.id,
            SetUpdate(weight_kg=workout_set.weight_kg, reps=workout_set.reps, rpe=workout_set.rpe),
        )
        try:
            self.timer.stop_timer()
            self.timer.start_timer(self.rest_seconds)
        except CompanionError as exc:
            logger.warning("Rest timer not restarted after saving set %s: %s", workout_set.id, exc)
            return False
        return True


@dataclass
class DeleteSetUseCase:
    api: FitnessAPI

    async def __call__(self, view: WorkoutSessionView, set_id: int) -> None:
        await self.api.delete_set(set_id)
        view.sets = [s for s in view.sets if s.id != set_id]


@dataclass
class FinishSessionUseCase:
    """Record the end time; the timer is stopped whether or not that succeeds."""

    api: FitnessAPI
    timer: TimerPort
    clock: Callable[[], datetime] = _utcnow

    async def __call__(self, session_id: int) -> bool:
        try:
            await self.api.finish_session(session_id, self.clock())
        except FitnessApiError as exc:
            logger.warning("Finishing session %s failed: %s", session_id, exc)
            return False
        finally:
            _stop_timer(self.timer, session_id)
        return True


def _stop_timer(timer: TimerPort, session_id: int) -> None:
    try:
        timer.stop_timer()
    except CompanionError as exc:
        logger.warning("Rest timer not stopped after finishing session %s: %s", session_id, exc)


__all__ = [
    "AddSetUseCase",
    "CreateExerciseUseCase",
    "CreateRoutineUseCase",
    "DeleteSetUseCase",
    "FinishSessionUseCase",
    "LoadWorkoutLogUseCase",
    "LoadWorkoutSessionUseCase",
    "SaveSetUseCase",
    "SessionNotFoundError",
    "StartEmptySessionUseCase",
    "StartRoutineUseCase",
    "WorkoutLogView",
    "WorkoutSessionView",
]
