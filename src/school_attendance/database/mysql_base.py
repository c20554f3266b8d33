from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

import mysql.connector

from ..core.exceptions import PersistenceError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit on success, rollback on error.

    Driver errors surface as PersistenceError so services never see mysql types.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("Database connection failed: %s", e)
        raise PersistenceError("Database unavailable") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("Database operation failed: %s", e)
        raise PersistenceError("Database operation failed") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def to_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def from_json(value: Any, default: Any = None) -> Any:
    """Decode a JSON column (mysql-connector may return str, bytes or already-decoded values)."""

    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value) if value else default
    return value


def to_db_datetime(value: datetime) -> datetime:
    """DATETIME columns hold naive UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_db_datetime(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def in_clause(column: str, values: Sequence[Any]) -> Tuple[str, List[Any]]:
    """Build `column IN (%s, ...)` with params. Caller must ensure `values` is non-empty."""

    placeholders = ",".join(["%s"] * len(values))
    return f"{column} IN ({placeholders})", list(values)
