"""ORM models package."""
from .action_log import ActionLogEntry
from .base import Base, UpdatedAtMixin
from .monitored_user import MonitoredUser
from .pet import Pet, PetSpecies, PetStatus
from .scheduler_lock import SchedulerLock
from .user import User, UserRole

__all__ = [
    "ActionLogEntry",
    "Base",
    "UpdatedAtMixin",
    "MonitoredUser",
    "Pet",
    "PetSpecies",
    "PetStatus",
    "SchedulerLock",
    "User",
    "UserRole",
]
