"""Monitored user model."""
from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class MonitoredUser(Base):
    """A user flagged for suspicious write activity. At most one row per user."""

    __tablename__ = "monitored_users"
    __table_args__ = (UniqueConstraint("user_id", name="uq_monitored_users_user_id"),)

    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(255), nullable=False)
