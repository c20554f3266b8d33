from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "DBConfig":
        """Build from the DB_CONFIG dict of the settings module."""
        return cls(
            host=str(settings.get("host", "localhost")),
            port=int(settings.get("port", 3306)),
            user=str(settings.get("user", "root")),
            password=str(settings.get("password", "")),
            database=str(settings.get("database", "school_attendance")),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> Dict[str, Any]:
        # DATETIME columns hold UTC.
        kwargs: Dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "charset": "utf8mb4",
            "time_zone": "+00:00",
        }
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Process-wide connection factory.

    Each repository call opens a short-lived connection through `db_cursor`,
    so one request is one or more independent units of work.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(**self._config.connect_kwargs())
