"""Data models for Hackatime daily statistics."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class DayStats:
    """Coding activity for a single day as reported by Hackatime."""
    total_seconds: int = 0
    languages: list[dict] = field(default_factory=list)
    editors: list[dict] = field(default_factory=list)
    operating_systems: list[dict] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "DayStats":
        """Stats for a day with no recorded activity."""
        return cls()

    @classmethod
    def from_api(cls, data: Optional[dict]) -> "DayStats":
        """
        Build stats from the `data` object of a stats response.

        Missing or malformed values degrade to zero / empty lists.

        Args:
            data: The `data` dictionary from the API, or None

        Returns:
            DayStats with a non-negative integer total
        """
        if not isinstance(data, dict):
            return cls.empty()

        raw_total = data.get("total_seconds") or 0
        try:
            total_seconds = max(0, int(raw_total))
        except (ValueError, TypeError, OverflowError):
            logger.warning(f"Non-numeric total_seconds: {raw_total!r}")
            total_seconds = 0

        return cls(
            total_seconds=total_seconds,
            languages=_as_list(data.get("languages")),
            editors=_as_list(data.get("editors")),
            operating_systems=_as_list(data.get("operating_systems")),
        )


@dataclass
class DailyData:
    """One calendar day in the daily series."""
    date: date
    stats: DayStats

    @property
    def total_seconds(self) -> int:
        return self.stats.total_seconds


def _as_list(value) -> list[dict]:
    return value if isinstance(value, list) else []
