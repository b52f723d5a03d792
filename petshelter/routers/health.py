"""Health check endpoint."""
from __future__ import annotations

import logging

from fastapi import APIRouter
from sqlalchemy import text

from petshelter.config import get_settings
from petshelter.core.runtime_state import is_scheduler_active
from petshelter.db import get_engine
from petshelter.services.scheduler_lock import describe_scheduler_lock

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger(__name__)

UNKNOWN_LOCK = {"status": "unknown", "owner": None, "present": None}


def _db_status() -> str:
    """Return 'ok' if the DB is reachable, 'error' otherwise."""

    try:
        engine = get_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return "ok"
    except Exception:  # noqa: BLE001
        logger.exception("DB health check failed")
        return "error"


def _scheduler_lock_status() -> dict[str, object]:
    try:
        return describe_scheduler_lock()
    except Exception:  # noqa: BLE001
        logger.exception("Scheduler lock lookup failed")
        return dict(UNKNOWN_LOCK)


@router.get("", summary="Health check")
def healthcheck() -> dict[str, object]:
    settings = get_settings()
    db_status = _db_status()
    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "db_status": db_status,
        "scheduler_config_enabled": bool(settings.MONITOR_ENABLED),
        "scheduler_running": is_scheduler_active(),
        "scheduler_lock": _scheduler_lock_status() if db_status == "ok" else dict(UNKNOWN_LOCK),
        "monitor": {
            "interval_seconds": settings.MONITOR_INTERVAL_SECONDS,
            "window_seconds": settings.MONITOR_WINDOW_SECONDS,
            "threshold": settings.MONITOR_THRESHOLD,
        },
    }
