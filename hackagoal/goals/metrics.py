"""Goal, streak and projection metrics from the daily series.

All functions are pure: they take the reference date explicitly and never
read the clock.
"""

import logging
import math
from datetime import date, timedelta
from typing import Iterable, Mapping

from hackagoal.hackatime.models import DailyData

from .dates import (
    days_elapsed_in_year,
    days_remaining_in_year,
    year_length,
)
from .models import ChartPoint, DerivedMetrics, GoalConfig, GoalMode

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600
STREAK_LOOKBACK_DAYS = 365  # safety bound on the backward walk
CHART_DAYS = 7


def seconds_by_date(series: Iterable[DailyData]) -> dict[date, int]:
    """Index the series by date. A later entry for the same date wins."""
    return {day.date: day.total_seconds for day in series}


def year_to_date_hours(total_seconds: float) -> float:
    """Authoritative year total in hours."""
    return _finite(total_seconds) / SECONDS_PER_HOUR


def required_daily_hours(
    config: GoalConfig, total_hours: float, days_remaining: int
) -> float:
    """
    Calculate hours per day needed to stay on goal.

    Args:
        config: Goal configuration
        total_hours: Hours recorded so far this year
        days_remaining: Days left after today

    Returns:
        Daily goal in daily mode, otherwise the remaining hours spread over
        the remaining days

    Example:
        target = 225, total_hours = 100, days_remaining = 50
        = (225 - 100) / 50 = 2.5
    """
    if config.mode == GoalMode.DAILY:
        return _finite(config.daily_goal_hours)

    remaining = max(0.0, _finite(config.target_total_hours) - _finite(total_hours))
    return remaining / days_remaining if days_remaining > 0 else remaining


def _streak_anchor(
    by_date: Mapping[date, int], threshold_seconds: float, today: date
) -> date:
    """Today if it already qualifies, otherwise yesterday."""
    if by_date.get(today, 0) >= threshold_seconds:
        return today
    return today - timedelta(days=1)


def current_streak(
    series: Iterable[DailyData], threshold_minutes: float, today: date
) -> int:
    """
    Count consecutive qualifying days ending at the streak anchor.

    A day qualifies when its seconds reach threshold_minutes * 60. Days
    missing from the series count as zero. A streak not yet extended today
    still counts through yesterday.

    Args:
        series: Daily series
        threshold_minutes: Minimum minutes for a day to count
        today: Reference date

    Returns:
        Streak length in days (capped at STREAK_LOOKBACK_DAYS)
    """
    by_date = seconds_by_date(series)
    threshold_seconds = _finite(threshold_minutes) * 60
    check_date = _streak_anchor(by_date, threshold_seconds, today)

    streak = 0
    for _ in range(STREAK_LOOKBACK_DAYS):
        if by_date.get(check_date, 0) < threshold_seconds:
            break
        streak += 1
        check_date -= timedelta(days=1)

    return streak


def streak_average_hours(
    series: Iterable[DailyData],
    streak_length: int,
    threshold_minutes: float,
    today: date,
) -> float:
    """
    Average hours per day over the current streak.

    Sums exactly streak_length days walking backward from the same anchor
    current_streak uses.
    """
    if streak_length <= 0:
        return 0.0

    by_date = seconds_by_date(series)
    threshold_seconds = _finite(threshold_minutes) * 60
    check_date = _streak_anchor(by_date, threshold_seconds, today)

    total_seconds = 0
    for _ in range(streak_length):
        total_seconds += by_date.get(check_date, 0)
        check_date -= timedelta(days=1)

    return total_seconds / streak_length / SECONDS_PER_HOUR


def high_score_hours(series: Iterable[DailyData]) -> float:
    """Most hours recorded on a single day."""
    max_seconds = max((day.total_seconds for day in series), default=0)
    return max_seconds / SECONDS_PER_HOUR


def projection_or_deviation(
    config: GoalConfig,
    total_hours: float,
    days_remaining: int,
    days_elapsed: int,
    days_in_year: int,
) -> float:
    """
    Year-end projection (daily mode) or pace deviation (total mode).

    Daily mode assumes the daily goal is met exactly on every remaining day.
    Total mode compares actual progress to a straight line from zero on
    January 1 to the target on December 31.

    Args:
        config: Goal configuration
        total_hours: Hours recorded so far this year
        days_remaining: Days left after today
        days_elapsed: Days since January 1, inclusive of today
        days_in_year: 365 or 366

    Returns:
        Projected hours, or hours ahead (positive) / behind (negative) of pace

    Example:
        daily mode, daily_goal_hours = 2, total_hours = 50, days_remaining = 30
        = 50 + 2 * 30 = 110
    """
    total_hours = _finite(total_hours)

    if config.mode == GoalMode.DAILY:
        return total_hours + _finite(config.daily_goal_hours) * days_remaining

    expected_by_now = _finite(config.target_total_hours) / days_in_year * days_elapsed
    return total_hours - expected_by_now


def seven_day_chart(
    series: Iterable[DailyData], required_hours: float, today: date
) -> list[ChartPoint]:
    """
    Hours and deviation from the required rate for the last 7 days.

    Always returns CHART_DAYS points, oldest first, however sparse the
    series is.
    """
    by_date = seconds_by_date(series)
    required_hours = _finite(required_hours)

    points = []
    for offset in range(CHART_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        hours = by_date.get(day, 0) / SECONDS_PER_HOUR
        points.append(
            ChartPoint(
                date=day,
                weekday=day.strftime("%a"),
                hours=hours,
                deviation=hours - required_hours,
            )
        )
    return points


def compute_metrics(
    series: list[DailyData],
    yearly_total_seconds: float,
    config: GoalConfig,
    today: date,
) -> DerivedMetrics:
    """
    Derive every dashboard metric from one loaded snapshot.

    Args:
        series: Reconciled daily series for the current year
        yearly_total_seconds: Authoritative year-to-date total
        config: Goal configuration
        today: Reference date in the viewer's timezone

    Returns:
        DerivedMetrics
    """
    total_hours = year_to_date_hours(yearly_total_seconds)
    days_remaining = days_remaining_in_year(today)
    days_elapsed = days_elapsed_in_year(today)
    days_in_year = year_length(today.year, legacy=config.legacy_leap_year_pacing)

    required = required_daily_hours(config, total_hours, days_remaining)
    streak = current_streak(series, config.streak_min_minutes, today)
    today_seconds = seconds_by_date(series).get(today, 0)

    metrics = DerivedMetrics(
        total_hours=total_hours,
        today_hours=today_seconds / SECONDS_PER_HOUR,
        current_streak=streak,
        streak_average_hours=streak_average_hours(
            series, streak, config.streak_min_minutes, today
        ),
        high_score_hours=high_score_hours(series),
        required_daily_hours=required,
        projection_or_deviation=projection_or_deviation(
            config, total_hours, days_remaining, days_elapsed, days_in_year
        ),
        days_remaining=days_remaining,
        days_elapsed=days_elapsed,
        hours_to_target=_finite(config.target_total_hours) - total_hours,
        chart=seven_day_chart(series, required, today),
    )

    logger.debug(
        f"Metrics for {today}: {total_hours:.1f}h total, streak {streak}, "
        f"required {required:.2f}h/day"
    )
    return metrics


def _finite(value) -> float:
    """Coerce NaN, infinite, negative or non-numeric input to zero."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return value
