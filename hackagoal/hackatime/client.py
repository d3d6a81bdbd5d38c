"""Hackatime HTTP client."""

import asyncio
import logging
from typing import Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)


class HackatimeClient:
    """Async client for the Hackatime per-user stats API."""

    def __init__(
        self,
        api_base: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Hackatime client.

        Args:
            api_base: Users API base (e.g., https://hackatime.hackclub.com/api/v1/users)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to stub the API in tests)
        """
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.http: Optional[httpx.AsyncClient] = None

    async def connect(self):
        """Open the underlying HTTP connection pool."""
        logger.debug(f"Opening HTTP client for {self.api_base}")
        self.http = httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            headers={"Cache-Control": "no-store"},
        )

    async def disconnect(self):
        """Close the HTTP connection pool."""
        if self.http:
            await self.http.aclose()
            self.http = None
            logger.debug("Closed HTTP client")

    def stats_url(self, username: str) -> str:
        return f"{self.api_base}/{quote(username, safe='')}/stats"

    async def get_stats(
        self, username: str, start_date: str, end_date: str
    ) -> Optional[dict]:
        """
        Query aggregated stats for a half-open time interval.

        Never raises for upstream problems: non-2xx responses, transport
        errors and malformed JSON are logged and reported as None.

        Args:
            username: Hackatime (Slack) user identifier
            start_date: Interval start as an ISO-8601 instant
            end_date: Interval end (exclusive) as an ISO-8601 instant

        Returns:
            The `data` dictionary of the response, or None
        """
        if not self.http:
            raise RuntimeError("HackatimeClient is not connected")

        params = {"start_date": start_date, "end_date": end_date}

        try:
            response = await self.http.get(self.stats_url(username), params=params)
        except httpx.HTTPError as e:
            logger.error(f"Stats request failed for {start_date}: {e}")
            return None

        if response.status_code != 200:
            logger.warning(
                f"Stats request for {start_date} returned {response.status_code}"
            )
            return None

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning(f"Malformed stats response for {start_date}: {e}")
            return None

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            logger.debug(f"No data in stats response for {start_date}")
            return None

        return data


async def test_connection():
    """Test Hackatime connection."""
    import os
    from dotenv import load_dotenv

    from hackagoal.goals.dates import day_bounds, today_in
    from zoneinfo import ZoneInfo

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

        start, end = day_bounds(today_in(tz), tz)
        data = await client.get_stats(username, start, end)
        if data is None:
            print("No stats returned")
            return

        print(f"\nToday: {data.get('total_seconds', 0) / 3600:.2f}h")
        for language in data.get("languages", [])[:5]:
            print(f"  - {language.get('name')}: {language.get('total_seconds', 0)}s")

    finally:
        await client.disconnect()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(test_connection())
