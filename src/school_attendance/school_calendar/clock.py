from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SchoolClock:
    """Business date/time in the school's fixed timezone.

    Every "today" and every lateness check goes through here, so a scan at
    00:30 local time lands on the new local day no matter what the server
    zone is. ``now_fn`` is injectable so tests can pin the instant.
    """

    def __init__(self, timezone_name: str, *, now_fn: Optional[Callable[[], datetime]] = None):
        self._tz = ZoneInfo(timezone_name)
        self._now_fn = now_fn or utc_now

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def now(self) -> datetime:
        current = self._now_fn()
        if current.tzinfo is None:
            # Naive values are taken to be wall-clock time in the school zone.
            return current.replace(tzinfo=self._tz, microsecond=0)
        return current.astimezone(self._tz).replace(microsecond=0)

    def business_date(self) -> date:
        return self.now().date()

    def business_time(self) -> time:
        return self.now().time().replace(tzinfo=None)
