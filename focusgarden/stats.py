"""Statistics over the focus history and task list."""

from __future__ import annotations

from datetime import date, timedelta

from focusgarden.dates import local_day
from focusgarden.models import SESSION_MINUTES, FocusHistoryEntry, StatsSummary, Task

HISTOGRAM_DAYS = 7


def compute_summary(history: list[FocusHistoryEntry], tasks: list[Task]) -> StatsSummary:
    """Total sessions, total focus minutes and completed-task count."""
    return StatsSummary(
        total_sessions=len(history),
        total_time=sum(entry.duration or SESSION_MINUTES for entry in history),
        tasks_completed=sum(1 for t in tasks if t.completed),
    )


def histogram_days(reference_date: date) -> list[date]:
    """The seven calendar days ending on *reference_date*, oldest first."""
    return [
        reference_date - timedelta(days=offset)
        for offset in range(HISTOGRAM_DAYS - 1, -1, -1)
    ]


def compute_daily_histogram(
    history: list[FocusHistoryEntry], reference_date: date
) -> list[int]:
    """Sessions per local calendar day for the week ending *reference_date*."""
    buckets: dict[date, int] = {day: 0 for day in histogram_days(reference_date)}
    for entry in history:
        day = local_day(entry.date)
        if day in buckets:
            buckets[day] += 1
    return list(buckets.values())
