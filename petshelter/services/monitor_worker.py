"""Background worker running the aggregate-then-promote cycle on an interval."""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from apscheduler.schedulers.base import BaseScheduler
from sqlalchemy.orm import Session

from petshelter import db
from petshelter.config import Settings
from petshelter.models.monitored_user import MonitoredUser
from petshelter.services.activity_monitor import (
    DEFAULT_THRESHOLD,
    DEFAULT_WINDOW_SECONDS,
    aggregate,
    promote,
)
from petshelter.services.errors import StoreUnavailable
from petshelter.utils.time import utcnow

logger = logging.getLogger(__name__)

JOB_ID = "activity-monitor"
DEFAULT_INTERVAL_SECONDS = 60


@dataclass
class CycleResult:
    """Outcome of one aggregate+promote cycle."""

    now: datetime
    counts: dict[int, int] = field(default_factory=dict)
    promoted: list[MonitoredUser] = field(default_factory=list)


class ActivityMonitor:
    """Owns the monitor cycle and its scheduling.

    Cycles never overlap: ``run_once`` skips when another cycle holds the lock,
    and the scheduler job is limited to a single running instance.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] | None = None,
        *,
        interval_seconds: int = DEFAULT_INTERVAL_SECONDS,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        threshold: int = DEFAULT_THRESHOLD,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.window_seconds = window_seconds
        self.threshold = threshold
        self._clock = clock
        self._cycle_lock = threading.Lock()
        self._scheduler: BaseScheduler | None = None

    @classmethod
    def from_settings(cls, settings: Settings, session_factory: Callable[[], Session] | None = None) -> "ActivityMonitor":
        return cls(
            session_factory,
            interval_seconds=settings.MONITOR_INTERVAL_SECONDS,
            window_seconds=settings.MONITOR_WINDOW_SECONDS,
            threshold=settings.MONITOR_THRESHOLD,
        )

    @property
    def scheduled(self) -> bool:
        return self._scheduler is not None

    @property
    def busy(self) -> bool:
        return self._cycle_lock.locked()

    def _open_session(self) -> Session:
        factory = self._session_factory or db.get_sessionmaker()
        return factory()

    def run_once(self, now: datetime | None = None) -> CycleResult | None:
        """Run one cycle; return ``None`` when skipped because one is in progress."""

        if not self._cycle_lock.acquire(blocking=False):
            logger.warning("Activity monitor cycle skipped: previous cycle still running")
            return None
        try:
            return self._cycle(now or self._clock())
        finally:
            self._cycle_lock.release()

    def _cycle(self, now: datetime) -> CycleResult:
        result = CycleResult(now=now)
        session = self._open_session()
        try:
            result.counts = aggregate(session, now, window_seconds=self.window_seconds)
            result.promoted = promote(
                session,
                result.counts,
                threshold=self.threshold,
                window_seconds=self.window_seconds,
            )
        finally:
            session.close()
        logger.info(
            "Activity monitor cycle finished",
            extra={"active_users": len(result.counts), "promoted": [record.user_id for record in result.promoted]},
        )
        return result

    def tick(self) -> None:
        """Scheduler entry point: never raises."""

        try:
            self.run_once()
        except StoreUnavailable:
            logger.warning("Activity monitor cycle skipped: action log unavailable", exc_info=True)
        except Exception:
            logger.exception("Activity monitor cycle failed")

    def start(self, scheduler: BaseScheduler) -> None:
        """Register the interval job on ``scheduler``."""

        scheduler.add_job(
            self.tick,
            "interval",
            seconds=self.interval_seconds,
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler = scheduler
        logger.info(
            "Activity monitor started",
            extra={
                "interval_seconds": self.interval_seconds,
                "window_seconds": self.window_seconds,
                "threshold": self.threshold,
            },
        )

    def drain(self, timeout: float | None = None) -> bool:
        """Block until no cycle is running; ``False`` if ``timeout`` expired first."""

        acquired = self._cycle_lock.acquire(timeout=-1 if timeout is None else timeout)
        if acquired:
            self._cycle_lock.release()
        return acquired

    def stop(self) -> None:
        """Remove the interval job; a cycle already running is left to finish."""

        if self._scheduler is None:
            return
        if self._scheduler.get_job(JOB_ID) is not None:
            self._scheduler.remove_job(JOB_ID)
        self._scheduler = None
        logger.info("Activity monitor stopped")


__all__ = ["ActivityMonitor", "CycleResult", "JOB_ID"]
