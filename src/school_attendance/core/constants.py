"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE_OFFSET_HOURS = 5
DEFAULT_MAX_SCHEDULE_DAYS = 731
DEFAULT_S3_PREFIX = "attendance-checker/"

LOCAL_DATETIME_FORMAT = "%Y-%m-%d %H:%M"
ISO_DATE_FORMAT = "%Y-%m-%d"

MIN_PASSWORD_LENGTH = 4
