from .live_runs import router as live_runs_router
from .timer import router as timer_router

__all__ = ["live_runs_router", "timer_router"]
