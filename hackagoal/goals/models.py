"""Data models for goal configuration and derived metrics."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class GoalMode(str, Enum):
    """How the yearly goal is expressed."""
    DAILY = "daily"  # fixed hours per day
    TOTAL = "total"  # reach X hours by year end


@dataclass(frozen=True)
class GoalConfig:
    """User goal settings."""
    mode: GoalMode = GoalMode.TOTAL
    daily_goal_hours: float = 1.0
    target_total_hours: float = 225.0
    streak_min_minutes: int = 1
    legacy_leap_year_pacing: bool = False

    @classmethod
    def from_settings(cls, settings) -> "GoalConfig":
        """Build the default goal configuration from application settings."""
        return cls(
            mode=GoalMode(settings.goal_mode),
            daily_goal_hours=settings.daily_goal_hours,
            target_total_hours=settings.target_total_hours,
            streak_min_minutes=settings.streak_min_minutes,
            legacy_leap_year_pacing=settings.legacy_leap_year_pacing,
        )


@dataclass(frozen=True)
class ChartPoint:
    """One day of the 7-day chart."""
    date: date
    weekday: str
    hours: float
    deviation: float  # hours minus required daily hours


@dataclass(frozen=True)
class DerivedMetrics:
    """Everything the dashboard shows, computed from one snapshot."""
    total_hours: float
    today_hours: float
    current_streak: int
    streak_average_hours: float
    high_score_hours: float
    required_daily_hours: float
    # Daily mode: projected year-end total. Total mode: hours ahead (+) or behind (-) of pace.
    projection_or_deviation: float
    days_remaining: int
    days_elapsed: int
    hours_to_target: float
    chart: list[ChartPoint] = field(default_factory=list)
