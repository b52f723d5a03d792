"""DB-backed lease electing the one replica that runs the activity monitor."""
from __future__ import annotations

import os
import socket
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from petshelter import db
from petshelter.models.scheduler_lock import SchedulerLock
from petshelter.utils.time import ensure_utc, utcnow

LOCK_NAME = "activity-monitor"
LOCK_TTL_SECONDS = 300


@contextmanager
def _session_scope(db_session: Session | None) -> Iterator[Session]:
    if db_session is not None:
        yield db_session
        return
    session = db.get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


def _owner_id() -> str:
    return f"{socket.gethostname()}-{os.getpid()}"


def _load(session: Session, name: str, *, for_update: bool = False) -> SchedulerLock | None:
    stmt = select(SchedulerLock).where(SchedulerLock.name == name)
    if for_update:
        stmt = stmt.with_for_update()
    return session.execute(stmt).scalar_one_or_none()


def _is_expired(lock: SchedulerLock, now: datetime) -> bool:
    return lock.expires_at is None or ensure_utc(lock.expires_at) <= now


def try_acquire_scheduler_lock(
    name: str = LOCK_NAME,
    *,
    ttl_seconds: int = LOCK_TTL_SECONDS,
    db_session: Session | None = None,
) -> bool:
    """Take the lease if free, expired or already ours; return whether we hold it."""

    owner = _owner_id()
    now = utcnow()
    expires = now + timedelta(seconds=ttl_seconds)

    with _session_scope(db_session) as session:
        lock = _load(session, name, for_update=True)
        if lock is None:
            try:
                with session.begin_nested():
                    session.add(SchedulerLock(name=name, owner=owner, acquired_at=now, expires_at=expires))
            except IntegrityError:
                session.commit()
                return False
            session.commit()
            return True

        if lock.owner != owner and not _is_expired(lock, now):
            session.commit()
            return False

        if lock.owner != owner:
            lock.owner = owner
            lock.acquired_at = now
        lock.expires_at = expires
        session.commit()
        return True


def refresh_scheduler_lock(
    name: str = LOCK_NAME, *, ttl_seconds: int = LOCK_TTL_SECONDS, db_session: Session | None = None
) -> bool:
    """Extend the lease when this runner owns it; return whether it still does."""

    with _session_scope(db_session) as session:
        lock = _load(session, name, for_update=True)
        held = lock is not None and lock.owner == _owner_id()
        if held:
            lock.expires_at = utcnow() + timedelta(seconds=ttl_seconds)
        session.commit()
        return held


def release_scheduler_lock(name: str = LOCK_NAME, *, db_session: Session | None = None) -> None:
    """Drop the lease if held by this runner."""

    with _session_scope(db_session) as session:
        lock = _load(session, name, for_update=True)
        if lock is not None and lock.owner == _owner_id():
            session.delete(lock)
        session.commit()


def describe_scheduler_lock(name: str = LOCK_NAME, *, db_session: Session | None = None) -> dict[str, object]:
    """Return a lightweight description of the current lease for health checks."""

    with _session_scope(db_session) as session:
        lock = _load(session, name)
        if lock is None:
            return {"status": "none", "owner": None, "present": False}

        now = utcnow()
        expires_in = (ensure_utc(lock.expires_at) - now).total_seconds() if lock.expires_at else None
        return {
            "status": "owned_by_self" if lock.owner == _owner_id() else "owned_by_other",
            "owner": lock.owner,
            "present": True,
            "age_seconds": (now - ensure_utc(lock.acquired_at)).total_seconds(),
            "expires_in_seconds": expires_in,
            "stale": expires_in is not None and expires_in < -60,
        }
