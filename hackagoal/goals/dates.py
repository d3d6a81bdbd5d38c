"""Calendar helpers for year-to-date bucketing.

Every function takes the reference date or timezone explicitly so that
metric code never depends on the process-local clock.
"""

import calendar
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterator, Optional


def today_in(tz: tzinfo, now: Optional[datetime] = None) -> date:
    """
    Get the calendar date of `now` in the given timezone.

    Args:
        tz: Reference timezone
        now: Aware datetime to convert (defaults to the current instant)

    Returns:
        Local calendar date
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return now.astimezone(tz).date()


def day_bounds(day: date, tz: tzinfo, days: int = 1) -> tuple[str, str]:
    """
    Get the half-open interval covering local calendar day(s) as UTC instants.

    Args:
        day: First local calendar day
        tz: Reference timezone
        days: Number of days covered by the interval

    Returns:
        Tuple of (start, end) ISO-8601 strings

    Example:
        day_bounds(date(2025, 3, 1), ZoneInfo("Europe/Berlin"))
        = ("2025-02-28T23:00:00+00:00", "2025-03-01T23:00:00+00:00")
    """
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=days), time.min, tzinfo=tz)
    return (
        start.astimezone(timezone.utc).isoformat(),
        end.astimezone(timezone.utc).isoformat(),
    )


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end, inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def year_start(today: date) -> date:
    return date(today.year, 1, 1)


def days_remaining_in_year(today: date) -> int:
    """Whole days after today up to and including December 31."""
    return (date(today.year, 12, 31) - today).days


def days_elapsed_in_year(today: date) -> int:
    """Days since January 1, counting both January 1 and today."""
    return (today - year_start(today)).days + 1


def year_length(year: int, legacy: bool = False) -> int:
    """
    Number of days in a year.

    Args:
        year: Calendar year
        legacy: Always report 366, matching the pacing numbers of the
            original dashboard

    Returns:
        365 or 366
    """
    if legacy:
        return 366
    return 366 if calendar.isleap(year) else 365
