"""
Clock sources for calendar-day and timestamp reads.

Streaks and daily goals compare calendar days, so every component asks a
clock for "today" instead of calling ``date.today()`` directly. Tests inject a
``FixedClock`` and move it across midnight.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    """Source of the current date and timestamp."""

    def today(self) -> date: ...

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in the local timezone."""

    def today(self) -> date:
        return self.now().date()

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone()


class FixedClock:
    """
    Manually driven clock for deterministic tests.

    Usage:
        clock = FixedClock(datetime(2024, 11, 19, 23, 59, tzinfo=timezone.utc))
        clock.advance(minutes=2)   # now on 2024-11-20
    """

    def __init__(self, start: Optional[datetime] = None):
        if start is None:
            start = datetime(2024, 11, 19, 9, 0, tzinfo=timezone.utc)
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._now = start

    def today(self) -> date:
        return self._now.date()

    def now(self) -> datetime:
        return self._now

    def set(self, moment: datetime) -> None:
        """Jump to an absolute moment."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=self._now.tzinfo)
        self._now = moment

    def advance(self, days: int = 0, hours: int = 0, minutes: int = 0) -> datetime:
        """Move the clock forward and return the new moment."""
        self._now = self._now + timedelta(days=days, hours=hours, minutes=minutes)
        return self._now


def parse_date(value: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` date."""
    return date.fromisoformat(value)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment
