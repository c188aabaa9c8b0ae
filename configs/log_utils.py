"""
log_utils.py
------------

Utility module for project-wide logging with timezone-aware timestamps.

This module defines:
- `TZFormatter`: A logging formatter that renders `%(asctime)s` in a
  configurable pytz timezone (UTC unless told otherwise).
- `get_logger`: A helper function to configure and return a logger
  with a `TZFormatter`. Each module picks its own level.

By default, log messages look like:

    2026-10-18 09:10:25 | INFO | NetFunnelClient.py:42 | get_ticket | Making GET request to: ...

Usage Example:
--------------
```python
from configs.log_utils import get_logger

logger = get_logger(__name__, level="DEBUG")
logger.info("Waiting for admission")
```

Notes:

Avoid calling logging.basicConfig once you use this utility.
"""

import datetime
import logging

import pytz

from configs.constants import DEFAULT_LOG_TIMEZONE


class TZFormatter(logging.Formatter):
    """
    Formatter that renders record timestamps in the given timezone.
    """
    def __init__(self, fmt=None, datefmt=None, tz: str = DEFAULT_LOG_TIMEZONE):
        super().__init__(fmt, datefmt)
        self.tz = pytz.timezone(tz)

    def converter(self, timestamp) -> datetime.datetime:
        return datetime.datetime.fromtimestamp(timestamp, self.tz)

    def formatTime(self, record, datefmt=None) -> str:
        dt = self.converter(record.created)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.strftime("%Y-%m-%d %H:%M:%S")


_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def get_logger(
        name: str | None = None,
        level: int | str = "INFO",
        *,
        fmt: str = "%(asctime)s | %(levelname)s | %(filename)s:%(lineno)d | %(funcName)s | %(message)s",
        propagate: bool = False,
        tz: str = DEFAULT_LOG_TIMEZONE,
    ) -> logging.Logger:
    """
    Return a logger with timezone-aware formatted output.

    Args:
        name: Logger name (None = root).
        level: Log level (int or str like "DEBUG").
        fmt: Log line format.
        propagate: Whether to propagate to parent loggers.
        tz: pytz timezone name used for `%(asctime)s`.

    A handler is attached only once per logger name; later calls just
    adjust the level.
    """
    if isinstance(level, str):
        level = _LEVELS.get(level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = propagate

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(TZFormatter(fmt, tz=tz))
        logger.addHandler(handler)

    return logger


def configure_loggers(*names: str, level: int | str = "INFO", tz: str = DEFAULT_LOG_TIMEZONE) -> None:
    """Re-apply level and timezone to loggers created at import time."""
    for name in names:
        logger = get_logger(name, level, tz=tz)
        for handler in logger.handlers:
            if isinstance(handler.formatter, TZFormatter):
                handler.formatter.tz = pytz.timezone(tz)
