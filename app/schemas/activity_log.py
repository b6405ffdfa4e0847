"""Esquemas de la bitácora de actividad."""
from datetime import datetime

from pydantic import BaseModel


class ActivityLogItem(BaseModel):
    id: int
    user_id: int | None
    user_name: str | None = None
    action: str
    details: dict
    created_at: datetime


class ActivityLogListResponse(BaseModel):
    total: int
    activity_logs: list[ActivityLogItem]
