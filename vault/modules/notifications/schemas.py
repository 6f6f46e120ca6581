from pydantic import BaseModel
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime

NotificationType = Literal["invite", "team", "project", "share"]


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    team_id: Optional[str] = None
    type: NotificationType
    title: str
    message: str
    read: bool = False
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotificationPage(BaseModel):
    page: List[NotificationResponse]
    is_done: bool
    continue_cursor: Optional[str] = None


class MarkAllReadResponse(BaseModel):
    updated: int
