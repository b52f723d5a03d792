"""Monitored user schemas."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class MonitoredUserRead(BaseModel):
    user_id: int
    reason: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
