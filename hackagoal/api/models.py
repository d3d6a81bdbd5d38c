"""HTTP API models."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from hackagoal.goals.models import DerivedMetrics, GoalConfig, GoalMode


class LoginRequest(BaseModel):
    """Body for /api/login."""

    username: str = Field(..., min_length=1, max_length=64)

    @field_validator("username")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("username must not be blank")
        return value


class UserResponse(BaseModel):
    """Response for /api/user. A null username means the login form should be shown."""

    username: Optional[str] = None


class GoalConfigResponse(BaseModel):
    """Goal configuration the metrics were computed with."""

    mode: GoalMode
    daily_goal_hours: float
    target_total_hours: float
    streak_min_minutes: int
    legacy_leap_year_pacing: bool = False

    @classmethod
    def from_config(cls, config: GoalConfig) -> "GoalConfigResponse":
        return cls(
            mode=config.mode,
            daily_goal_hours=config.daily_goal_hours,
            target_total_hours=config.target_total_hours,
            streak_min_minutes=config.streak_min_minutes,
            legacy_leap_year_pacing=config.legacy_leap_year_pacing,
        )


class ChartPointResponse(BaseModel):
    """One bar of the 7-day chart."""

    date: date
    weekday: str
    hours: float
    deviation: float


class MetricsResponse(BaseModel):
    """Response for /api/metrics."""

    username: str
    today: date
    loaded_at: Optional[datetime] = None
    config: GoalConfigResponse
    total_hours: float
    today_hours: float
    current_streak: int
    streak_average_hours: float
    high_score_hours: float
    required_daily_hours: float
    projection: Optional[float] = None  # daily mode
    deviation: Optional[float] = None  # total mode
    days_remaining: int
    days_elapsed: int
    hours_to_target: float
    chart: list[ChartPointResponse]

    @classmethod
    def from_metrics(
        cls,
        metrics: DerivedMetrics,
        config: GoalConfig,
        username: str,
        today: date,
        loaded_at: Optional[datetime] = None,
    ) -> "MetricsResponse":
        is_daily = config.mode == GoalMode.DAILY
        return cls(
            username=username,
            today=today,
            loaded_at=loaded_at,
            config=GoalConfigResponse.from_config(config),
            total_hours=metrics.total_hours,
            today_hours=metrics.today_hours,
            current_streak=metrics.current_streak,
            streak_average_hours=metrics.streak_average_hours,
            high_score_hours=metrics.high_score_hours,
            required_daily_hours=metrics.required_daily_hours,
            projection=metrics.projection_or_deviation if is_daily else None,
            deviation=None if is_daily else metrics.projection_or_deviation,
            days_remaining=metrics.days_remaining,
            days_elapsed=metrics.days_elapsed,
            hours_to_target=metrics.hours_to_target,
            chart=[
                ChartPointResponse(
                    date=point.date,
                    weekday=point.weekday,
                    hours=point.hours,
                    deviation=point.deviation,
                )
                for point in metrics.chart
            ],
        )


class StatusResponse(BaseModel):
    """Response for /status."""

    status: str = "running"
    version: str
    timestamp: datetime
    api_base: str
    username: Optional[str] = None
    loaded_at: Optional[datetime] = None
