# src/dev_metrics/utils/helpers.py

import math
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional


def parse_datetime(dt_str: Optional[str]) -> datetime | None:
    """Parses an ISO datetime string, handling 'Z' suffix for UTC.

    Returns None for empty or unparseable values instead of raising.
    """
    if not dt_str:
        return None
    try:
        parsed = datetime.fromisoformat(dt_str.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def now_utc() -> datetime:
    """Returns the current time in UTC."""
    return datetime.now(timezone.utc)


def utc_date(dt: datetime) -> date:
    """Returns the UTC calendar date of an aware datetime."""
    return dt.astimezone(timezone.utc).date()


def round_half_up(value: float, digits: int = 1) -> float:
    """Rounds half away from zero for non-negative values (0.25 -> 0.3)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def hours_between(start: datetime | None, end: datetime | None) -> float | None:
    """Hours from start to end, rounded to one decimal. None if either is missing."""
    if start is None or end is None:
        return None
    return round_half_up((end - start).total_seconds() / 3600)


def safe_mean(values: Iterable[float]) -> float:
    """Arithmetic mean, returning 0.0 for an empty population."""
    values = list(values)
    return sum(values) / len(values) if values else 0.0


def date_range(start: date, end: date) -> list[date]:
    """Every calendar date from start to end, inclusive."""
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def week_start(day: date) -> date:
    """The Sunday on or before the given date."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def first_line(text: Optional[str], limit: int = 100) -> str:
    """First line of a message, truncated to limit characters."""
    if not text:
        return ""
    return text.split("\n", 1)[0].rstrip("\r")[:limit]
