from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

_CREATE_DB_RE = re.compile(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$")
_USE_DB_RE = re.compile(r"(?im)^\s*USE\b.*?;\s*$")


def strip_database_statements(sql: str) -> str:
    # schema.sql stays usable regardless of the configured database name.
    return _USE_DB_RE.sub("", _CREATE_DB_RE.sub("", sql))


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ';' outside of quoted strings."""

    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue
        if ch == "\\":
            buf.append(ch)
            escape = True
            continue
        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
            buf.append(ch)
            continue
        if ch == ";" and quote is None:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _execute_all(cur, statements: Iterable[str]) -> int:
    count = 0
    for stmt in statements:
        cur.execute(stmt)
        count += 1
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_settings(db_config)
    conn = mysql.connector.connect(**target.connect_kwargs(with_database=False), use_pure=True)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Create the database if needed and run schema.sql (idempotent CREATE IF NOT EXISTS).

    Returns the number of executed statements.
    """

    target = DBConfig.from_settings(db_config)
    ensure_database_exists(db_config)

    sql = strip_database_statements(Path(schema_path).read_text(encoding="utf-8"))

    conn = mysql.connector.connect(**target.connect_kwargs(), use_pure=True)
    try:
        cur = conn.cursor()
        executed = _execute_all(cur, iter_sql_statements(sql))
        conn.commit()
    finally:
        conn.close()

    logger.info("Schema applied to %s (%d statements)", target.database, executed)
    return executed
