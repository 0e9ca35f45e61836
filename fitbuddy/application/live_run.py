"""Live GPS run sessions fed by device samples."""

from __future__ import annotations

import logging
import time
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Callable, Dict, List, Literal, Optional

from ..domain.numbers import round_int
from ..domain.running import encode_path, latest_position, route_geojson
from ..domain.scheduling import IntervalHandle, IntervalScheduler
from ..domain.tracking import (
    DistanceAccumulator,
    SampleFeed,
    SensorUnavailableError,
    StepCounter,
    Subscription,
)
from ..models import (
    LiveRunSnapshot,
    MotionSample,
    PathPoint,
    PositionSample,
    Run,
    RunCreate,
    SensorError,
)
from ..services.interfaces import FitnessAPI

logger = logging.getLogger(__name__)

LIVE_RUN_NOTES = "Map-Integrated Session"
FINISHED_HISTORY = 256

LiveRunStatus = Literal["idle", "recording", "unsaved", "saved", "abandoned"]


class LiveRunNotFoundError(LookupError):
    """Raised for an unknown live-run id."""


class LiveRunFinishedError(RuntimeError):
    """Raised when a stopped or abandoned session receives more work."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LiveRunSession:
    """One recording: position and motion subscriptions plus a duration ticker.

    The session owns every subscription and the ticker handle and releases
    them all on ``stop``, ``abandon`` or ``close``. A session whose save
    failed keeps its recording as ``unsaved`` until it is saved or abandoned.
    """

    def __init__(
        self,
        scheduler: IntervalScheduler,
        *,
        motion_permission: str = "granted",
        session_id: Optional[str] = None,
        clock: Callable[[], float] = time.time,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.id = session_id or uuid.uuid4().hex
        self.positions: SampleFeed[PositionSample] = SampleFeed("position")
        self.motion: SampleFeed[MotionSample] = SampleFeed("motion")
        self.path: List[PathPoint] = []
        self.distance = DistanceAccumulator()
        self.steps = StepCounter()
        self.duration_seconds = 0
        self.gps_accuracy: Optional[int] = None
        self.step_counting = motion_permission == "granted"
        self.status: LiveRunStatus = "idle"
        self._scheduler = scheduler
        self._clock = clock
        self._now = now
        self.started_at = now()
        self._subscriptions: List[Subscription] = []
        self._ticker: Optional[IntervalHandle] = None
        self._pending: Optional[RunCreate] = None
        self._submitting = False

    @property
    def active(self) -> bool:
        return self.status == "recording"

    @property
    def finished(self) -> bool:
        return self.status in ("saved", "abandoned")

    def start(self) -> None:
        if self.status != "idle":
            return
        self.status = "recording"
        self._subscriptions.append(
            self.positions.subscribe(self._on_position, self._on_sensor_error)
        )
        if self.step_counting:
            self._subscriptions.append(
                self.motion.subscribe(self._on_motion, self._on_sensor_error)
            )
        else:
            logger.info("Live run %s started without step counting", self.id)
        self._ticker = self._scheduler.call_every(1.0, self._tick)
        logger.info("Live run %s started", self.id)

    # sample intake

    def push_position(self, sample: PositionSample) -> None:
        self._ensure_active()
        self.positions.push(sample)

    def push_motion(self, sample: MotionSample) -> None:
        self._ensure_active()
        self.motion.push(sample)

    def report_error(self, error: SensorError) -> None:
        self._ensure_active()
        feed = self.positions if error.sensor == "position" else self.motion
        feed.fail(SensorUnavailableError(error.sensor, error.message, error.code))

    def _on_position(self, sample: PositionSample) -> None:
        timestamp = sample.timestamp if sample.timestamp is not None else self._clock()
        self.path.append(
            (sample.latitude, sample.longitude, sample.altitude or 0.0, timestamp)
        )
        self.distance.add(sample.latitude, sample.longitude, sample.accuracy)
        self.gps_accuracy = round_int(sample.accuracy)

    def _on_motion(self, sample: MotionSample) -> None:
        self.steps.add(sample.x, sample.y, sample.z)

    def _on_sensor_error(self, error: Exception) -> None:
        logger.warning("Live run %s sensor error: %s", self.id, error)

    def _tick(self) -> None:
        self.duration_seconds += 1

    # termination

    async def stop(self, api: FitnessAPI) -> Run:
        """Tear down and submit the run.

        The first call freezes the recording into a ``RunCreate``. If the
        backend rejects it the session stays ``unsaved`` with its distance,
        duration, steps and path intact, and calling ``stop`` again resubmits
        the same payload. Submission errors propagate.
        """

        if self.status in ("idle", "recording"):
            self._teardown()
            self.status = "unsaved"
            self._pending = RunCreate(
                start_time=self._now(),
                duration_seconds=self.duration_seconds,
                distance_meters=self.distance.total_m,
                steps=self.steps.steps,
                route_data=encode_path(self.path),
                run_type="Run",
                notes=LIVE_RUN_NOTES,
            )
        elif self.status != "unsaved" or self._pending is None:
            raise LiveRunFinishedError(f"Live run {self.id} is finished")
        if self._submitting:
            raise LiveRunFinishedError(f"Live run {self.id} is already being saved")
        payload = self._pending
        logger.info(
            "Submitting live run %s: %.0f m in %s s",
            self.id,
            payload.distance_meters,
            payload.duration_seconds,
        )
        self._submitting = True
        try:
            run = await api.create_run(payload)
        finally:
            self._submitting = False
        self.status = "saved"
        self._pending = None
        return run

    def abandon(self) -> None:
        """Discard the recording, including one whose save failed."""

        if self.finished:
            raise LiveRunFinishedError(f"Live run {self.id} is finished")
        if self._submitting:
            raise LiveRunFinishedError(f"Live run {self.id} is already being saved")
        self._teardown()
        self.status = "abandoned"
        self._pending = None
        logger.info("Live run %s abandoned", self.id)

    def close(self) -> None:
        self._teardown()
        if not self.finished:
            if self.status == "unsaved":
                logger.warning("Discarding unsaved live run %s on shutdown", self.id)
            self.status = "abandoned"

    def _teardown(self) -> None:
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _ensure_active(self) -> None:
        if not self.active:
            raise LiveRunFinishedError(f"Live run {self.id} is no longer recording")

    @property
    def subscription_count(self) -> int:
        return sum(1 for s in self._subscriptions if s.active)

    def snapshot(self) -> LiveRunSnapshot:
        return LiveRunSnapshot(
            id=self.id,
            started_at=self.started_at,
            active=self.active,
            status=self.status,
            duration_seconds=self.duration_seconds,
            distance_meters=self.distance.total_m,
            steps=self.steps.steps,
            step_counting=self.step_counting,
            gps_accuracy=self.gps_accuracy,
            point_count=len(self.path),
            route=route_geojson(self.path),
            position=latest_position(self.path),
        )


class LiveRunRegistry:
    """Live-run sessions owned by the companion process.

    Sessions leave the registry once saved or abandoned. Their ids are kept
    in a bounded history so late calls get ``LiveRunFinishedError`` rather
    than ``LiveRunNotFoundError``.
    """

    def __init__(self, scheduler: IntervalScheduler, *, history_size: int = FINISHED_HISTORY) -> None:
        self._scheduler = scheduler
        self._sessions: Dict[str, LiveRunSession] = {}
        self._finished: "OrderedDict[str, str]" = OrderedDict()
        self._history_size = history_size

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, motion_permission: str = "granted") -> LiveRunSession:
        session = LiveRunSession(self._scheduler, motion_permission=motion_permission)
        self._sessions[session.id] = session
        session.start()
        return session

    def get(self, session_id: str) -> LiveRunSession:
        session = self._sessions.get(session_id)
        if session is not None:
            return session
        if session_id in self._finished:
            raise LiveRunFinishedError(
                f"Live run {session_id} is {self._finished[session_id]}"
            )
        raise LiveRunNotFoundError(f"Live run {session_id} not found")

    async def stop(self, session_id: str, api: FitnessAPI) -> Run:
        """Save a session; it is only evicted once the backend accepts it."""

        session = self.get(session_id)
        run = await session.stop(api)
        self._retire(session)
        return run

    def abandon(self, session_id: str) -> None:
        session = self.get(session_id)
        session.abandon()
        self._retire(session)

    def _retire(self, session: LiveRunSession) -> None:
        self._sessions.pop(session.id, None)
        self._finished[session.id] = session.status
        while len(self._finished) > self._history_size:
            self._finished.popitem(last=False)

    def close(self) -> None:
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()


__all__ = [
    "LIVE_RUN_NOTES",
    "LiveRunFinishedError",
    "LiveRunNotFoundError",
    "LiveRunRegistry",
    "LiveRunSession",
]
