from __future__ import annotations

import math
from datetime import date, datetime, timedelta

from ..core.constants import DAYS_IN_WEEK, ISO_DATE_FORMAT, WEEK_START_WEEKDAY


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def format_iso_date(value: date) -> str:
    return value.strftime(ISO_DATE_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def week_bounds(day: date) -> tuple[date, date]:
    """Monday and Sunday of the week containing `day`."""
    start = day - timedelta(days=(day.weekday() - WEEK_START_WEEKDAY) % DAYS_IN_WEEK)
    return start, start + timedelta(days=DAYS_IN_WEEK - 1)


def days_between(start: date, end: date) -> list[date]:
    """All calendar days from start to end, inclusive."""
    if end < start:
        return []
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def round_half_up(value: float) -> int:
    # Percentages are never negative, so floor(x + 0.5) rounds .5 upwards.
    return int(math.floor(value + 0.5))
