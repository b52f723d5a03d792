"""Append-only action log written by every mutating request."""
from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from petshelter.utils.time import utcnow

from .base import Base


class ActionLogEntry(Base):
    """One write performed by ``user_id``; never updated or deleted."""

    __tablename__ = "action_logs"
    __table_args__ = (
        Index("ix_action_logs_timestamp", "timestamp"),
        Index("ix_action_logs_user_id", "user_id"),
    )

    # No foreign key: history must outlive deleted users.
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    action: Mapped[str] = mapped_column(String(255), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
