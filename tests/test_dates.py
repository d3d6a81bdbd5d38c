"""Tests for calendar helpers."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from hackagoal.goals.dates import (
    day_bounds,
    days_elapsed_in_year,
    days_remaining_in_year,
    iter_days,
    today_in,
    year_length,
)


class TestYearCounts:
    def test_first_day_of_year(self):
        assert days_elapsed_in_year(date(2026, 1, 1)) == 1
        assert days_remaining_in_year(date(2026, 1, 1)) == 364

    def test_last_day_of_year(self):
        assert days_remaining_in_year(date(2026, 12, 31)) == 0
        assert days_elapsed_in_year(date(2026, 12, 31)) == 365

    def test_leap_year(self):
        assert days_elapsed_in_year(date(2028, 12, 31)) == 366
        assert days_remaining_in_year(date(2028, 2, 29)) == 306

    def test_year_length(self):
        assert year_length(2026) == 365
        assert year_length(2028) == 366
        assert year_length(2026, legacy=True) == 366


class TestDayBounds:
    def test_utc_day(self):
        start, end = day_bounds(date(2026, 3, 1), ZoneInfo("UTC"))
        assert start == "2026-03-01T00:00:00+00:00"
        assert end == "2026-03-02T00:00:00+00:00"

    def test_local_midnight_converted_to_utc(self):
        start, end = day_bounds(date(2026, 3, 1), ZoneInfo("Europe/Berlin"))
        assert start == "2026-02-28T23:00:00+00:00"
        assert end == "2026-03-01T23:00:00+00:00"

    def test_dst_change_day_is_23_hours(self):
        start, end = day_bounds(date(2026, 3, 29), ZoneInfo("Europe/Berlin"))
        assert start == "2026-03-28T23:00:00+00:00"
        assert end == "2026-03-29T22:00:00+00:00"

    def test_multi_day_span(self):
        start, end = day_bounds(date(2026, 1, 1), ZoneInfo("UTC"), days=20)
        assert start == "2026-01-01T00:00:00+00:00"
        assert end == "2026-01-21T00:00:00+00:00"


class TestTodayIn:
    def test_date_depends_on_timezone(self):
        now = datetime(2026, 1, 1, 2, 0, tzinfo=timezone.utc)
        assert today_in(ZoneInfo("UTC"), now) == date(2026, 1, 1)
        assert today_in(ZoneInfo("America/New_York"), now) == date(2025, 12, 31)


def test_iter_days_inclusive():
    days = list(iter_days(date(2026, 2, 27), date(2026, 3, 2)))
    assert days == [date(2026, 2, 27), date(2026, 2, 28), date(2026, 3, 1), date(2026, 3, 2)]
