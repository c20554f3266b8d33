from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping

from ..common.datetime_utils import parse_hhmm
from ..core.enums import LessonStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ScheduleRule:
    """Weekly recurrence attached to a subject.

    `day_of_week` uses 0=Sunday .. 6=Saturday; times are local school time "HH:mm".
    """

    day_of_week: int
    start_time: str
    end_time: str

    @classmethod
    def parse(cls, raw: Mapping[str, Any]) -> "ScheduleRule":
        """Build a rule from a request payload (camelCase or snake_case keys)."""

        if not isinstance(raw, Mapping):
            raise ValidationError("Schedule rule must be an object")

        day = raw.get("dayOfWeek", raw.get("day_of_week"))
        start = raw.get("startTime", raw.get("start_time"))
        end = raw.get("endTime", raw.get("end_time"))

        if isinstance(day, bool) or not isinstance(day, int):
            if isinstance(day, str) and day.strip().isdigit():
                day = int(day)
            else:
                raise ValidationError("Schedule day of week is invalid")
        if not 0 <= day <= 6:
            raise ValidationError("Schedule day of week must be between 0 and 6")

        try:
            start_hm = parse_hhmm(str(start or ""))
            end_hm = parse_hhmm(str(end or ""))
        except ValueError:
            raise ValidationError("Schedule times must be HH:mm")

        if end_hm <= start_hm:
            raise ValidationError("Schedule end time must be after start time")

        return cls(day_of_week=day, start_time=str(start).strip(), end_time=str(end).strip())

    def to_dict(self) -> dict:
        return {"day_of_week": self.day_of_week, "start_time": self.start_time, "end_time": self.end_time}


@dataclass(frozen=True)
class LessonDraft:
    """One concrete occurrence produced by the expander, not yet persisted."""

    date: date
    start_time: datetime
    end_time: datetime
    status: LessonStatus = LessonStatus.SCHEDULED
