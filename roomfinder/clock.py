"""Current day and time on campus.

"Now" is always evaluated in the campus time zone, never the server's or
the caller's.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Tuple
from zoneinfo import ZoneInfo

from .models import WEEK_DAYS


class CampusClock:
    """Resolve the current weekday abbreviation and ``HH:mm`` time."""

    def __init__(self, timezone: str = "Asia/Kolkata", now: Optional[Callable[[ZoneInfo], datetime]] = None):
        self.zone = ZoneInfo(timezone)
        self._now = now or (lambda zone: datetime.now(zone))

    def now(self) -> datetime:
        return self._now(self.zone).astimezone(self.zone)

    def current_day(self) -> str:
        """Return ``Mon``..``Sun``, with Thursday as ``Thur``."""
        return WEEK_DAYS[self.now().weekday()]

    def current_time(self) -> str:
        return self.now().strftime("%H:%M")

    def day_and_time(self) -> Tuple[str, str]:
        """Return day and time read from a single clock sample."""
        now = self.now()
        return WEEK_DAYS[now.weekday()], now.strftime("%H:%M")
