"""Action log service: append-only record of user writes."""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from petshelter.models.action_log import ActionLogEntry
from petshelter.services.errors import StoreUnavailable
from petshelter.utils.time import ensure_utc, utcnow

logger = logging.getLogger(__name__)


def append_action(
    db: Session,
    *,
    user_id: int,
    action: str,
    timestamp: datetime | None = None,
) -> ActionLogEntry:
    """Persist a new log entry and commit it.

    Raises ``StoreUnavailable`` when the database rejects the write.
    """

    entry = ActionLogEntry(
        user_id=user_id,
        action=action,
        timestamp=ensure_utc(timestamp) if timestamp is not None else utcnow(),
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreUnavailable(f"could not append action {action!r}") from exc
    return entry


def record_action(db: Session, user_id: int, action: str) -> ActionLogEntry | None:
    """Best-effort append used by request handlers after a successful write."""

    try:
        entry = append_action(db, user_id=user_id, action=action)
    except StoreUnavailable:
        logger.exception("Action log append failed", extra={"user_id": user_id, "action": action})
        return None
    logger.info("Logged action", extra={"user_id": user_id, "action": action})
    return entry


def query_range(db: Session, start: datetime, end: datetime) -> list[ActionLogEntry]:
    """Return entries with ``start <= timestamp < end`` in no particular order."""

    stmt = select(ActionLogEntry).where(
        ActionLogEntry.timestamp >= ensure_utc(start),
        ActionLogEntry.timestamp < ensure_utc(end),
    )
    try:
        return list(db.scalars(stmt).all())
    except SQLAlchemyError as exc:
        raise StoreUnavailable("could not read the action log") from exc


__all__ = ["append_action", "record_action", "query_range"]
