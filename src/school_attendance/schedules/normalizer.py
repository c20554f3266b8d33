from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from ..common.datetime_utils import ensure_utc, parse_hhmm
from ..core.constants import DEFAULT_TIMEZONE_OFFSET_HOURS


class TimeNormalizer:
    """Local school time <-> absolute UTC instant, using one fixed offset.

    There is no DST and no timezone database: the institution's clock is
    always UTC+offset. Subtracting the offset can land on the previous UTC
    calendar day (e.g. 02:00 local at +5 is 21:00Z the day before).
    """

    def __init__(self, offset_hours: float = DEFAULT_TIMEZONE_OFFSET_HOURS):
        self._offset = timedelta(hours=float(offset_hours))

    @property
    def offset(self) -> timedelta:
        return self._offset

    def normalize_parts(self, day: date, hour: int, minute: int) -> datetime:
        local = datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)
        return local - self._offset

    def normalize(self, day: date, hhmm: str) -> datetime:
        hour, minute = parse_hhmm(hhmm)
        return self.normalize_parts(day, hour, minute)

    def to_local(self, instant: datetime) -> datetime:
        """Wall-clock time at the school (naive) for display."""
        return (ensure_utc(instant) + self._offset).replace(tzinfo=None)
