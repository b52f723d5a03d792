"""Schema package exports."""
from .auth import LoginRequest, MessageRead, TokenRead
from .monitored_user import MonitoredUserRead
from .pet import PetCreate, PetDeleted, PetDetail, PetRead, PetUpdate
from .statistics import AdoptedByCity
from .user import AdminUserCreate, OwnerSummary, UserCreate, UserRead, UserUpdate

__all__ = [
    "AdminUserCreate",
    "AdoptedByCity",
    "LoginRequest",
    "MessageRead",
    "MonitoredUserRead",
    "OwnerSummary",
    "PetCreate",
    "PetDeleted",
    "PetDetail",
    "PetRead",
    "PetUpdate",
    "TokenRead",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]
