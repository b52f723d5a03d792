"""Suspicious activity detection: windowed counts and monitored-user promotion."""
from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from petshelter.models.monitored_user import MonitoredUser
from petshelter.services.action_log import query_range
from petshelter.services.errors import DuplicatePromotion

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 60
DEFAULT_THRESHOLD = 5
REASON_TEMPLATE = "Performed {count} operations in the last {window} seconds"


def aggregate(
    db: Session,
    now: datetime,
    *,
    window_seconds: int = DEFAULT_WINDOW_SECONDS,
) -> dict[int, int]:
    """Count log entries per user with ``now - window <= timestamp < now``."""

    start = now - timedelta(seconds=window_seconds)
    counts = Counter(entry.user_id for entry in query_range(db, start, now))
    return dict(counts)


def get_monitored_user(db: Session, user_id: int) -> MonitoredUser | None:
    stmt = select(MonitoredUser).where(MonitoredUser.user_id == user_id).limit(1)
    return db.scalars(stmt).first()


def _insert_monitored_user(db: Session, *, user_id: int, reason: str) -> MonitoredUser:
    """Insert inside a savepoint so a unique-key race only undoes this row."""

    record = MonitoredUser(user_id=user_id, reason=reason)
    try:
        with db.begin_nested():
            db.add(record)
    except IntegrityError as exc:
        raise DuplicatePromotion(user_id) from exc
    db.commit()
    return record


def promote(
    db: Session,
    counts: Mapping[int, int],
    *,
    threshold: int = DEFAULT_THRESHOLD,
    window_seconds: int = DEFAULT_WINDOW_SECONDS,
) -> list[MonitoredUser]:
    """Flag every user whose count reaches ``threshold`` and is not yet monitored.

    Returns only the records created by this call. Users already monitored are
    left untouched, whatever their new count.
    """

    created: list[MonitoredUser] = []
    for user_id, count in sorted(counts.items()):
        if count < threshold:
            continue
        try:
            if get_monitored_user(db, user_id) is not None:
                continue
            reason = REASON_TEMPLATE.format(count=count, window=window_seconds)
            record = _insert_monitored_user(db, user_id=user_id, reason=reason)
        except DuplicatePromotion:
            logger.info("User already promoted by a concurrent cycle", extra={"user_id": user_id, "count": count})
            continue
        except Exception:
            logger.exception("Promotion failed", extra={"user_id": user_id, "count": count})
            raise
        logger.warning(
            "User added to monitored users for suspicious activity",
            extra={"user_id": user_id, "count": count, "window_seconds": window_seconds},
        )
        created.append(record)
    return created


def list_monitored_users(db: Session) -> list[MonitoredUser]:
    return list(db.scalars(select(MonitoredUser).order_by(MonitoredUser.created_at, MonitoredUser.id)).all())


__all__ = [
    "DEFAULT_THRESHOLD",
    "DEFAULT_WINDOW_SECONDS",
    "REASON_TEMPLATE",
    "aggregate",
    "get_monitored_user",
    "list_monitored_users",
    "promote",
]
