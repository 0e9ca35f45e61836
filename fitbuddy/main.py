from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from .application.live_run import LiveRunRegistry
from .domain.timer import RestTimer
from .platform.scheduler import AsyncioIntervalScheduler
from .routes import live_runs_router, timer_router
from .security import verify_api_key
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logging.getLogger("fitbuddy").setLevel(settings.log_level.upper())
    scheduler = AsyncioIntervalScheduler()
    app.state.rest_timer = RestTimer(scheduler)
    app.state.live_runs = LiveRunRegistry(scheduler)
    logger.info("Companion started")
    try:
        yield
    finally:
        app.state.live_runs.close()
        app.state.rest_timer.close()
        logger.info("Companion stopped")


app: FastAPI = FastAPI(
    title="Fitness Buddy Companion",
    version="1.0.0",
    description="Rest timer and live GPS run tracking for the Fitness Buddy dashboard",
    lifespan=lifespan,
)


@app.api_route("/", methods=["GET", "HEAD"], include_in_schema=False)
@app.api_route("/healthz", methods=["GET", "HEAD"], include_in_schema=False)
async def healthz() -> dict[str, str]:
    """Lightweight endpoint used for health checks."""
    return {"status": "ok"}


@app.get("/v1/api-schema")
async def get_api_schema(
    request: Request,
    _: Any = Depends(verify_api_key),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Return the OpenAPI schema for this API version."""
    openapi_schema: Dict[str, Any] = request.app.openapi()
    openapi_schema["servers"] = [{"url": settings.companion_url}]
    return JSONResponse(openapi_schema)


for router in (timer_router, live_runs_router):
    app.include_router(router, prefix="/v1", dependencies=[Depends(verify_api_key)])
