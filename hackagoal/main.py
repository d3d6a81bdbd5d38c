"""Main FastAPI application."""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import FileResponse

from .api.models import (
    GoalConfigResponse,
    LoginRequest,
    MetricsResponse,
    StatusResponse,
    UserResponse,
)
from .config import settings
from .dashboard.renderer import DashboardRenderer
from .dashboard.state import DashboardState
from .goals.models import GoalConfig, GoalMode
from .storage.database import UserStore

VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="HackaGoal",
    description="Coding-time goal dashboard for Hackatime",
    version=VERSION,
)

# Initialize components
store = UserStore(settings.database_path)
renderer = DashboardRenderer(settings.image_dir)
state = DashboardState(
    settings.hackatime_api_base,
    timezone_name=settings.timezone,
    batch_size=settings.fetch_batch_size,
    timeout=settings.request_timeout,
)


def current_username() -> Optional[str]:
    """Saved username, falling back to the configured default."""
    return store.get_username() or settings.hackatime_username or None


def require_username() -> str:
    username = current_username()
    if not username:
        raise HTTPException(status_code=404, detail="No username set, log in first")
    return username


async def ensure_loaded(username: str):
    """Fetch data if nothing is loaded for this user today."""
    snapshot = state.snapshot
    if (
        snapshot is None
        or snapshot.username != username
        or snapshot.loaded_for != state.today()
    ):
        await state.load(username)


def goal_config(
    mode: Optional[GoalMode],
    daily_goal_hours: Optional[float],
    target_total_hours: Optional[float],
    streak_min_minutes: Optional[int],
) -> GoalConfig:
    """Apply per-request overrides on top of the configured defaults."""
    defaults = GoalConfig.from_settings(settings)
    return GoalConfig(
        mode=mode or defaults.mode,
        daily_goal_hours=daily_goal_hours if daily_goal_hours is not None else defaults.daily_goal_hours,
        target_total_hours=target_total_hours if target_total_hours is not None else defaults.target_total_hours,
        streak_min_minutes=streak_min_minutes if streak_min_minutes is not None else defaults.streak_min_minutes,
        legacy_leap_year_pacing=defaults.legacy_leap_year_pacing,
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "HackaGoal",
        "version": VERSION,
        "endpoints": {
            "user": "/api/user",
            "login": "/api/login",
            "config": "/api/config",
            "metrics": "/api/metrics",
            "refresh": "/api/refresh",
            "dashboard": "/api/dashboard.png",
            "status": "/status",
        },
    }


@app.get("/status", response_model=StatusResponse)
async def status():
    """Server status endpoint."""
    return StatusResponse(
        version=VERSION,
        timestamp=datetime.now(timezone.utc),
        api_base=settings.hackatime_api_base,
        username=current_username(),
        loaded_at=state.snapshot.loaded_at if state.snapshot else None,
    )


@app.get("/api/user", response_model=UserResponse)
async def get_user():
    """
    Currently tracked user.

    A null username means no one has logged in yet.
    """
    return UserResponse(username=current_username())


@app.post("/api/login", response_model=UserResponse)
async def login(request: LoginRequest):
    """
    Switch the tracked user.

    Persists the username and fetches fresh data for it.
    """
    logger.info(f"Login as {request.username}")

    store.set_username(request.username)
    await state.load(request.username)

    return UserResponse(username=request.username)


@app.delete("/api/user", response_model=UserResponse)
async def logout():
    """Forget the saved username."""
    store.clear_username()
    return UserResponse(username=current_username())


@app.get("/api/config", response_model=GoalConfigResponse)
async def get_config():
    """Default goal configuration from the environment."""
    return GoalConfigResponse.from_config(GoalConfig.from_settings(settings))


@app.get("/api/metrics", response_model=MetricsResponse)
async def metrics_endpoint(
    mode: Optional[GoalMode] = Query(None),
    daily_goal_hours: Optional[float] = Query(None, gt=0, allow_inf_nan=False),
    target_total_hours: Optional[float] = Query(None, gt=0, allow_inf_nan=False),
    streak_min_minutes: Optional[int] = Query(None, ge=0),
):
    """
    Dashboard metrics for the tracked user.

    Query parameters override the configured goal for this request only.
    """
    username = require_username()
    await ensure_loaded(username)

    config = goal_config(mode, daily_goal_hours, target_total_hours, streak_min_minutes)
    today = state.today()

    return MetricsResponse.from_metrics(
        state.metrics(config, today),
        config,
        username,
        today,
        loaded_at=state.snapshot.loaded_at if state.snapshot else None,
    )


@app.post("/api/refresh")
async def refresh_endpoint():
    """Fetch fresh data for the tracked user."""
    username = require_username()

    logger.info("Manual refresh requested")
    snapshot = await state.load(username)

    return {
        "status": "success",
        "message": "Data refreshed",
        "username": username,
        "days": len(snapshot.series),
    }


@app.get("/api/dashboard.png")
async def dashboard_image(
    mode: Optional[GoalMode] = Query(None),
    daily_goal_hours: Optional[float] = Query(None, gt=0, allow_inf_nan=False),
    target_total_hours: Optional[float] = Query(None, gt=0, allow_inf_nan=False),
    streak_min_minutes: Optional[int] = Query(None, ge=0),
):
    """Render the dashboard for the tracked user as a PNG."""
    username = require_username()
    await ensure_loaded(username)

    config = goal_config(mode, daily_goal_hours, target_total_hours, streak_min_minutes)
    _, file_path = renderer.render(state.metrics(config), config, username)

    return FileResponse(file_path, media_type="image/png")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
