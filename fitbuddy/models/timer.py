from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

TimerMode = Literal["countdown", "stopwatch"]


class TimerState(BaseModel):
    """Snapshot of the rest timer exposed to views."""

    time: int = Field(..., description="Remaining (countdown) or elapsed (stopwatch) seconds")
    mode: TimerMode
    is_running: bool
    is_paused: bool
    display: str = Field(..., description="Rendered 'm:ss' value, '+' prefixed in overtime")
    overtime: bool = Field(False, description="True when a countdown went past zero")


class TimerStart(BaseModel):
    initial_seconds: Optional[int] = Field(
        None, description="Seed a countdown; omit to start a stopwatch."
    )


class TimerAdjust(BaseModel):
    delta: int = Field(..., description="Signed number of seconds to add")
