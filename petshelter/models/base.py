"""Declarative base and shared columns for the shelter tables.

Every table gets an integer ``id`` and a ``created_at`` stamp. Only rows that
the API edits in place (users, pets, the scheduler lease) mix in
``updated_at``; action log entries and monitored-user flags are written once.
"""
from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from petshelter.utils.time import utcnow


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class UpdatedAtMixin:
    """Adds an ``updated_at`` column refreshed on every UPDATE."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
