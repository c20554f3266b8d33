import pytest

from school_attendance.core.exceptions import ValidationError
from school_attendance.schedules.model import ScheduleRule


def test_parse_accepts_camel_and_snake_case():
    camel = ScheduleRule.parse({"dayOfWeek": 1, "startTime": "09:00", "endTime": "10:30"})
    snake = ScheduleRule.parse({"day_of_week": "1", "start_time": "09:00", "end_time": "10:30"})

    assert camel == snake == ScheduleRule(day_of_week=1, start_time="09:00", end_time="10:30")


@pytest.mark.parametrize(
    "raw",
    [
        {"dayOfWeek": 7, "startTime": "09:00", "endTime": "10:00"},
        {"dayOfWeek": -1, "startTime": "09:00", "endTime": "10:00"},
        {"dayOfWeek": True, "startTime": "09:00", "endTime": "10:00"},
        {"dayOfWeek": "mon", "startTime": "09:00", "endTime": "10:00"},
        {"dayOfWeek": 1, "startTime": "9:00", "endTime": "10:00"},
        {"dayOfWeek": 1, "startTime": "09:00"},
        {"dayOfWeek": 1, "startTime": "10:00", "endTime": "10:00"},
        {"dayOfWeek": 1, "startTime": "11:00", "endTime": "10:00"},
    ],
)
def test_parse_rejects_invalid_rules(raw):
    with pytest.raises(ValidationError):
        ScheduleRule.parse(raw)


def test_parse_rejects_non_objects():
    with pytest.raises(ValidationError):
        ScheduleRule.parse(["1", "09:00", "10:00"])
