"""Errors raised inside the suspicious-activity monitor.

None of these ever reach an end user: request handlers swallow
``StoreUnavailable`` after logging it and the monitor worker logs and moves on
to the next tick.
"""
from __future__ import annotations


class MonitorError(Exception):
    """Base class for activity monitor failures."""


class StoreUnavailable(MonitorError):
    """The action log could not be written or read."""


class DuplicatePromotion(MonitorError):
    """Another cycle inserted the monitored-user row first."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"user {user_id} is already monitored")
        self.user_id = user_id


__all__ = ["MonitorError", "StoreUnavailable", "DuplicatePromotion"]
