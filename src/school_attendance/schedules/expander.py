from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional, Sequence

from ..common.datetime_utils import day_of_week
from ..core.enums import LessonStatus
from ..core.exceptions import ValidationError
from .model import LessonDraft, ScheduleRule
from .normalizer import TimeNormalizer


class ScheduleExpander:
    """Expand weekly schedule rules into dated lesson drafts.

    Every day of the closed interval [start_date, end_date] is visited; each
    rule whose weekday matches yields one draft. Rules on the same day are
    never merged, overlapping ones included. Output is ordered by date, then
    by the order of `rules`.
    """

    def __init__(self, normalizer: Optional[TimeNormalizer] = None, *, max_days: Optional[int] = None):
        self._normalizer = normalizer or TimeNormalizer()
        self._max_days = int(max_days) if max_days else None

    def expand(self, start_date: date, end_date: date, rules: Sequence[ScheduleRule]) -> List[LessonDraft]:
        if start_date > end_date:
            raise ValidationError("Start date cannot be after end date")

        total_days = (end_date - start_date).days + 1
        if self._max_days is not None and total_days > self._max_days:
            raise ValidationError(f"Schedule range is limited to {self._max_days} days")

        by_weekday: dict[int, list[ScheduleRule]] = {}
        for rule in rules:
            by_weekday.setdefault(rule.day_of_week, []).append(rule)

        drafts: list[LessonDraft] = []
        for offset in range(total_days):
            day = start_date + timedelta(days=offset)
            for rule in by_weekday.get(day_of_week(day), ()):
                drafts.append(
                    LessonDraft(
                        date=day,
                        start_time=self._normalizer.normalize(day, rule.start_time),
                        end_time=self._normalizer.normalize(day, rule.end_time),
                        status=LessonStatus.SCHEDULED,
                    )
                )
        return drafts
