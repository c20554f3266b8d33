"""Logging setup.

One console handler, an optional rotating file handler, and a filter that
masks password values before a record is written.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_PASSWORD_RE = re.compile(r'(password|pass|pwd)["\']?\s*[:=]\s*["\']?([^"\'\s,}]+)', re.IGNORECASE)


def mask_phone(phone: str) -> str:
    """Keep the last two digits only.

    >>> mask_phone("+998901234567")
    '***********67'
    """
    if not phone or len(phone) <= 2:
        return "***"
    return "*" * (len(phone) - 2) + phone[-2:]


class SensitiveDataFilter(logging.Filter):
    """Mask `password=...` style fragments in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        # Values passed as %s arguments are masked too.
        record.msg = _PASSWORD_RE.sub(r"\1: ********", record.getMessage())
        record.args = ()
        return True


def setup_logger(
    name: str = "school_attendance",
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configure the package logger.

    Child loggers created with ``logging.getLogger(__name__)`` inside the
    package propagate to it, so this is called once from ``create_app``.
    """

    logger = logging.getLogger(name)

    # Avoid duplicate handlers when the app factory runs more than once (tests).
    if logger.handlers:
        return logger

    logger.setLevel(level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(SensitiveDataFilter())
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(SensitiveDataFilter())
        logger.addHandler(file_handler)

    return logger
