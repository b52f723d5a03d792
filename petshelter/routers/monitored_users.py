"""Monitored users endpoint (admin only)."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from petshelter.db import get_db
from petshelter.models.monitored_user import MonitoredUser
from petshelter.schemas.monitored_user import MonitoredUserRead
from petshelter.security import require_admin
from petshelter.services.activity_monitor import list_monitored_users

router = APIRouter(prefix="/monitored-users", tags=["monitoring"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[MonitoredUserRead])
def get_monitored_users(db: Session = Depends(get_db)) -> list[MonitoredUser]:
    return list_monitored_users(db)
