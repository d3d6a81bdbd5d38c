"""Loaded dashboard data and metric recomputation."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import httpx

from hackagoal.goals.dates import today_in
from hackagoal.goals.metrics import compute_metrics
from hackagoal.goals.models import DerivedMetrics, GoalConfig
from hackagoal.hackatime.client import HackatimeClient
from hackagoal.hackatime.fetcher import TimeSeriesFetcher
from hackagoal.hackatime.models import DailyData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSnapshot:
    """Everything fetched for one user in one load."""
    username: str
    series: tuple[DailyData, ...]
    yearly_total_seconds: int
    loaded_for: date
    loaded_at: datetime


class DashboardState:
    """Holds the single current snapshot and recomputes metrics from it."""

    def __init__(
        self,
        api_base: str,
        timezone_name: str = "UTC",
        batch_size: int = 10,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_base = api_base
        self.tz = ZoneInfo(timezone_name)
        self.batch_size = batch_size
        self.timeout = timeout
        self.transport = transport
        self.snapshot: Optional[DashboardSnapshot] = None

    def today(self) -> date:
        return today_in(self.tz)

    async def load(self, username: str) -> DashboardSnapshot:
        """
        Fetch fresh data for a user and replace the current snapshot.

        A load that finishes after a newer one still replaces the snapshot;
        the last load to finish wins.

        Args:
            username: Hackatime user identifier

        Returns:
            The new snapshot
        """
        client = HackatimeClient(self.api_base, self.timeout, self.transport)

        try:
            await client.connect()

            fetcher = TimeSeriesFetcher(client, self.tz, self.batch_size)
            today = self.today()
            series, yearly_total = await fetcher.load(username, today)

        finally:
            await client.disconnect()

        self.snapshot = DashboardSnapshot(
            username=username,
            series=tuple(series),
            yearly_total_seconds=yearly_total,
            loaded_for=today,
            loaded_at=datetime.now(timezone.utc),
        )
        return self.snapshot

    def metrics(
        self, config: GoalConfig, today: Optional[date] = None
    ) -> DerivedMetrics:
        """
        Compute metrics for the current snapshot.

        Args:
            config: Goal configuration for this request
            today: Reference date (defaults to today in the state's timezone)

        Returns:
            DerivedMetrics (all zero if nothing is loaded yet)
        """
        if today is None:
            today = self.today()

        if self.snapshot is None:
            logger.warning("No data loaded yet, returning empty metrics")
            return compute_metrics([], 0, config, today)

        return compute_metrics(
            list(self.snapshot.series),
            self.snapshot.yearly_total_seconds,
            config,
            today,
        )
