import os


def get_settings_module() -> str:
    """Settings module selected by APP_ENV (default: development)."""

    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "school_attendance.config.production"

    if env in {"test", "testing"}:
        return "school_attendance.config.testing"

    return "school_attendance.config.development"
