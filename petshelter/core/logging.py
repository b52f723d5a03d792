"""JSON logging for the API process and the activity monitor thread.

Every record goes to stderr as one JSON object; context passed through
``extra=`` (user ids, counts, action names) becomes top-level keys.
"""
from __future__ import annotations

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(threadName)s %(message)s"
RENAMED_FIELDS = {"asctime": "timestamp", "levelname": "level", "name": "logger", "threadName": "thread"}
# APScheduler logs every job addition and run at INFO and each skipped overlapping run at WARNING.
QUIET_LOGGERS = {"apscheduler.scheduler": logging.WARNING, "apscheduler.executors": logging.ERROR}


def setup_logging(level: Optional[str] = None) -> None:
    """Install the JSON handler on the root logger, replacing any existing one."""

    if level is None:
        from petshelter.config import get_settings

        level = get_settings().LOG_LEVEL

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(level.upper())

    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT, rename_fields=RENAMED_FIELDS))
    root_logger.addHandler(handler)
    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level.upper())
    return logger


__all__ = ["setup_logging", "get_logger"]
