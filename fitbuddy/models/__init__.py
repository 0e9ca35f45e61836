from .analytics import DailySummary
from .body import BodyMetric, BodyMetricCreate
from .identity import PhoneSignIn, User, UserUpdate
from .nutrition import (
    FoodEntry,
    FoodEntryCreate,
    FoodLibraryItem,
    FoodLibraryItemCreate,
    Meal,
    MealCreate,
    MealRename,
    WaterLog,
)
from .resistance import (
    Exercise,
    ExerciseCreate,
    Routine,
    RoutineCreate,
    RoutineExercise,
    SessionCreate,
    SetCreate,
    SetUpdate,
    WorkoutSession,
    WorkoutSet,
)
from .responses import OperationStatus
from .running import PathPoint, Run, RunCreate, Shoe, ShoeCreate
from .timer import TimerAdjust, TimerMode, TimerStart, TimerState
from .tracking import (
    LiveRunSnapshot,
    LiveRunStart,
    MotionSample,
    PositionSample,
    SensorError,
)

__all__ = [
    'BodyMetric',
    'BodyMetricCreate',
    'DailySummary',
    'Exercise',
    'ExerciseCreate',
    'FoodEntry',
    'FoodEntryCreate',
    'FoodLibraryItem',
    'FoodLibraryItemCreate',
    'LiveRunSnapshot',
    'LiveRunStart',
    'Meal',
    'MealCreate',
    'MealRename',
    'MotionSample',
    'OperationStatus',
    'PathPoint',
    'PhoneSignIn',
    'PositionSample',
    'Routine',
    'RoutineCreate',
    'RoutineExercise',
    'Run',
    'RunCreate',
    'SensorError',
    'SessionCreate',
    'SetCreate',
    'SetUpdate',
    'Shoe',
    'ShoeCreate',
    'TimerAdjust',
    'TimerMode',
    'TimerStart',
    'TimerState',
    'User',
    'UserUpdate',
    'WaterLog',
    'WorkoutSession',
    'WorkoutSet',
]
