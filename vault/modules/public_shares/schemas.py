from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from datetime import datetime

from vault.modules.profiles.schemas import PublicProfile
from vault.modules.projects.schemas import ProjectPriority, ProjectStatus, UpdateType


class ShareCreate(BaseModel):
    expires_at: Optional[datetime] = None


class ShareUpdate(BaseModel):
    enabled: Optional[bool] = None
    expires_at: Optional[datetime] = None


class ShareResponse(BaseModel):
    id: str
    project_id: str
    team_id: Optional[str] = None
    token: str
    enabled: bool
    expires_at: Optional[datetime] = None
    created_by: str
    created_at: Optional[datetime] = None
    url: str

    class Config:
        from_attributes = True


class AccessLogResponse(BaseModel):
    id: str
    share_id: str
    accessed_at: datetime
    viewer_label: Optional[str] = None
    referrer: Optional[str] = None


class ShareAnalyticsResponse(BaseModel):
    total: int
    recent: List[AccessLogResponse]


class AccessLogRequest(BaseModel):
    viewer_label: Optional[str] = None
    referrer: Optional[str] = None


class AccessLoggedResponse(BaseModel):
    share_id: str


class PublicShareSummary(BaseModel):
    token: str
    expires_at: Optional[datetime] = None


class PublicProject(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    status: ProjectStatus
    progress: int = 0
    due_date: Optional[str] = None
    priority: ProjectPriority
    color: Optional[str] = None
    notes: Optional[str] = None
    note_updated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PublicProjectUpdate(BaseModel):
    id: str
    project_id: str
    author_id: str
    type: UpdateType
    summary: str
    changes: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None


class PublicShareResponse(BaseModel):
    share: PublicShareSummary
    project: PublicProject
    updates: List[PublicProjectUpdate]
    authors: List[PublicProfile]
