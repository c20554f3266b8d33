from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple

from ..core.constants import ISO_DATE_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def parse_hhmm(value: str) -> Tuple[int, int]:
    """Parse a 24h "HH:mm" string into (hour, minute).

    Raises ValueError for anything else (e.g. "9:5", "24:00", "07:60").
    """

    parts = (value or "").strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() and len(p) == 2 for p in parts):
        raise ValueError(f"Invalid HH:mm value: {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid HH:mm value: {value!r}")
    return hour, minute


def day_of_week(value: date) -> int:
    """Weekday with 0=Sunday .. 6=Saturday."""
    return (value.weekday() + 1) % 7


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC (the store keeps naive UTC values)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(now: Optional[datetime] = None) -> datetime:
    """UTC midnight of the day containing `now`."""
    now = ensure_utc(now or now_utc())
    return datetime.combine(now.date(), time(0, 0), tzinfo=timezone.utc)


def week_bounds(value: date) -> Tuple[datetime, datetime]:
    """Monday 00:00 .. Sunday 23:59:59.999999 (UTC) of the week containing `value`."""
    monday = value - timedelta(days=value.weekday())
    start = datetime.combine(monday, time(0, 0), tzinfo=timezone.utc)
    end = start + timedelta(days=7) - timedelta(microseconds=1)
    return start, end
