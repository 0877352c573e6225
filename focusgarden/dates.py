"""Wall-clock helpers. All instants are integer epoch milliseconds."""

from __future__ import annotations

import time
from datetime import date, datetime, timedelta, timezone

from focusgarden.models import DeadlineChoice


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def ms_to_datetime(ms: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


def end_of_day_ms(day: date) -> int:
    """Return 23:59:59.999 local time on *day* as epoch milliseconds."""
    last_second = datetime(day.year, day.month, day.day, 23, 59, 59)
    return int(last_second.timestamp()) * 1000 + 999


def deadline_for(choice: DeadlineChoice, today: date) -> int:
    """End-of-day deadline for today or tomorrow."""
    if choice == DeadlineChoice.TOMORROW:
        return end_of_day_ms(today + timedelta(days=1))
    return end_of_day_ms(today)


def local_day(moment: datetime) -> date:
    """Calendar day of *moment* in the local timezone.

    Naive datetimes are taken to already be local.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def local_today(ms: int) -> date:
    """Local calendar day containing the instant *ms*."""
    return datetime.fromtimestamp(ms / 1000).date()
