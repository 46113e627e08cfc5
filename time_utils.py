from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Named zone if it loads, otherwise the system local zone."""
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            logger.warning("Failed to load timezone %s via zoneinfo (%s)", name, exc)
    local_tz = datetime.now().astimezone().tzinfo
    if name and local_tz:
        logger.warning("Using system local timezone instead: %s", getattr(local_tz, "key", local_tz))
    return local_tz


def now_in_tz(tz: Optional[tzinfo]) -> datetime:
    if tz:
        return datetime.now(tz)
    return datetime.now().astimezone()


class SystemClock:
    """Calendar day boundaries in one fixed timezone."""

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz

    def today(self) -> str:
        return now_in_tz(self.tz).date().isoformat()


class FixedClock:
    def __init__(self, day: Union[str, date]):
        self.day = day.isoformat() if isinstance(day, date) else day

    def today(self) -> str:
        return self.day
