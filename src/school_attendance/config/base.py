import os


def env_bool(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

# Local school time = UTC + offset, no DST.
TIMEZONE_OFFSET_HOURS = float(os.getenv("TIMEZONE_OFFSET_HOURS", "5"))
# Longest subject range (in days) the schedule expander accepts.
MAX_SCHEDULE_DAYS = int(os.getenv("MAX_SCHEDULE_DAYS", "731"))

ADMIN_LOGIN = os.getenv("ADMIN_LOGIN", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

# Photos go to S3 when a bucket is set, otherwise to UPLOAD_DIR.
S3_BUCKET = os.getenv("S3_BUCKET") or None
S3_PREFIX = os.getenv("S3_PREFIX", "attendance-checker/")
S3_BASE_URL = os.getenv("S3_BASE_URL") or None
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE") or None
