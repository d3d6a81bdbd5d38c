"""Shared test fixtures for HackaGoal tests."""

import os
import tempfile

# Keep the app's SQLite file and rendered images out of the working tree.
_TMP = tempfile.mkdtemp(prefix="hackagoal-tests-")
os.environ.setdefault("DATABASE_PATH", os.path.join(_TMP, "hackagoal.db"))
os.environ.setdefault("IMAGE_DIR", os.path.join(_TMP, "images"))
os.environ.setdefault("HACKATIME_USERNAME", "")
os.environ.setdefault("TIMEZONE", "UTC")

from datetime import date, datetime, timedelta  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402

from hackagoal.hackatime.models import DailyData, DayStats  # noqa: E402


def make_series(seconds: dict[date, int]) -> list[DailyData]:
    """Build a sorted daily series from a {date: seconds} mapping."""
    return [
        DailyData(date=day, stats=DayStats(total_seconds=total))
        for day, total in sorted(seconds.items())
    ]


def days_before(today: date, *seconds: int) -> dict[date, int]:
    """Map seconds onto today, yesterday, the day before... in that order."""
    return {today - timedelta(days=i): total for i, total in enumerate(seconds)}


class FakeHackatime:
    """In-memory stand-in for the Hackatime stats endpoint.

    Per-day intervals are answered from `daily`, longer intervals from
    `yearly_total`. Dates listed in `failing` return HTTP 500.
    """

    def __init__(self, daily=None, yearly_total=0, failing=()):
        self.daily = daily or {}
        self.yearly_total = yearly_total
        self.failing = set(failing)
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        start = datetime.fromisoformat(request.url.params["start_date"])
        end = datetime.fromisoformat(request.url.params["end_date"])
        day = start.date()

        if end - start > timedelta(days=1):
            return httpx.Response(200, json={"data": {"total_seconds": self.yearly_total}})

        if day in self.failing:
            return httpx.Response(500, text="upstream error")

        total = self.daily.get(day, 0)

        return httpx.Response(
            200,
            json={
                "data": {
                    "total_seconds": total,
                    "languages": [{"name": "Python", "total_seconds": total}],
                    "editors": [],
                    "operating_systems": [],
                }
            },
        )

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def today():
    return date(2026, 1, 20)


@pytest.fixture
def fake_api():
    return FakeHackatime()
