"""Year-to-date time series fetching from Hackatime."""

import asyncio
import logging
from datetime import date, tzinfo
from typing import Optional

from hackagoal.goals.dates import day_bounds, iter_days, year_start

from .client import HackatimeClient
from .models import DailyData, DayStats

logger = logging.getLogger(__name__)


class TimeSeriesFetcher:
    """Fetches the daily series, the yearly total and today's live stats."""

    def __init__(self, client: HackatimeClient, tz: tzinfo, batch_size: int = 10):
        """
        Initialize fetcher.

        Args:
            client: Connected Hackatime client
            tz: Timezone whose calendar days the series is bucketed by
            batch_size: Maximum number of concurrent per-day requests
        """
        self.client = client
        self.tz = tz
        self.batch_size = batch_size

    async def load(self, username: str, today: date) -> tuple[list[DailyData], int]:
        """
        Fetch everything the dashboard needs for one user.

        The three top-level queries run concurrently and are all awaited
        before today's live stats are merged into the series.

        Args:
            username: Hackatime user identifier
            today: Current date in the fetcher's timezone

        Returns:
            Tuple of (reconciled daily series, yearly total seconds)
        """
        logger.info(f"Loading stats for {username} up to {today}...")

        series, yearly_total, today_stats = await asyncio.gather(
            self.fetch_daily_series(username, today),
            self.fetch_yearly_total(username, today),
            self.fetch_today_stats(username, today),
        )

        series = reconcile_today(series, today_stats, today)

        logger.info(
            f"✓ Loaded {len(series)} days for {username} "
            f"({yearly_total / 3600:.1f}h this year)"
        )
        return series, yearly_total

    async def fetch_daily_series(self, username: str, today: date) -> list[DailyData]:
        """
        Fetch per-day stats from January 1 through today.

        Requests go out in batches of batch_size: batches run one after
        another, days within a batch run concurrently. Days that fail map to
        zero seconds so the series has no gaps.

        Returns:
            One DailyData per day, sorted by date
        """
        if not username:
            return []

        days = list(iter_days(year_start(today), today))
        logger.debug(
            f"Fetching {len(days)} days in batches of {self.batch_size}"
        )

        all_data: list[DailyData] = []
        for i in range(0, len(days), self.batch_size):
            batch = days[i : i + self.batch_size]
            results = await asyncio.gather(
                *(self._fetch_day(username, day) for day in batch)
            )
            all_data.extend(results)

        return sorted(all_data, key=lambda d: d.date)

    async def fetch_yearly_total(self, username: str, today: date) -> int:
        """
        Fetch the authoritative year-to-date total in one query.

        Returns:
            Total seconds from January 1 to the end of today, 0 on failure
        """
        if not username:
            return 0

        first_day = year_start(today)
        span = (today - first_day).days + 1
        start, end = day_bounds(first_day, self.tz, days=span)

        data = await self.client.get_stats(username, start, end)
        if data is None:
            logger.warning(f"Failed to fetch yearly total for {username}")
            return 0

        return DayStats.from_api(data).total_seconds

    async def fetch_today_stats(self, username: str, today: date) -> Optional[DayStats]:
        """
        Fetch today's live stats.

        Returns:
            DayStats for today, or None if the query failed
        """
        if not username:
            return None

        start, end = day_bounds(today, self.tz)
        data = await self.client.get_stats(username, start, end)
        if data is None:
            logger.warning(f"Failed to fetch today's stats for {username}")
            return None

        return DayStats.from_api(data)

    async def _fetch_day(self, username: str, day: date) -> DailyData:
        start, end = day_bounds(day, self.tz)
        data = await self.client.get_stats(username, start, end)
        return DailyData(date=day, stats=DayStats.from_api(data))


def reconcile_today(
    series: list[DailyData], today_stats: Optional[DayStats], today: date
) -> list[DailyData]:
    """
    Merge today's live stats into the daily series.

    The live value replaces the batch value for today, or is inserted if
    today is missing. None leaves the series unchanged.

    Args:
        series: Daily series sorted by date
        today_stats: Live stats for today, or None
        today: Current date

    Returns:
        New list sorted by date; the input list is not modified
    """
    if today_stats is None:
        return list(series)

    merged = [day for day in series if day.date != today]
    merged.append(DailyData(date=today, stats=today_stats))
    return sorted(merged, key=lambda d: d.date)


async def demo_fetch():
    """Demo: Fetch and summarize this year's series."""
    import os
    from zoneinfo import ZoneInfo

    from dotenv import load_dotenv

    from hackagoal.goals.dates import today_in

    load_dotenv()

    username = os.getenv("HACKATIME_USERNAME")
    api_base = os.getenv(
        "HACKATIME_API_BASE", "https://hackatime.hackclub.com/api/v1/users"
    )

    if not username:
        print("Error: HACKATIME_USERNAME must be set in .env file")
        return

    tz = ZoneInfo(os.getenv("TIMEZONE", "UTC"))
    client = HackatimeClient(api_base)

    try:
        await client.connect()

        fetcher = TimeSeriesFetcher(client, tz)
        today = today_in(tz)
        series, yearly_total = await fetcher.load(username, today)

        print("\n" + "=" * 60)
        print(f"STATS FOR {username}")
        print("=" * 60 + "\n")
        print(f"Year total: {yearly_total / 3600:.1f}h")
        print(f"Days fetched: {len(series)}")
        print()

        for day in series[-7:]:
            print(f"  {day.date.strftime('%a %b %d')}: {day.total_seconds / 3600:.2f}h")

    finally:
        await client.disconnect()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(demo_fetch())
