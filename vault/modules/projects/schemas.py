from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime

ProjectStatus = Literal["ideation", "planning", "in_progress", "completed"]
ProjectPriority = Literal["low", "medium", "high"]
UpdateType = Literal["created", "updated", "deleted", "note"]


class ProjectBase(BaseModel):
    title: str
    description: Optional[str] = None
    status: ProjectStatus = "ideation"
    progress: int = Field(0, ge=0, le=100)
    due_date: Optional[str] = None
    priority: ProjectPriority = "medium"
    color: str = "#6366f1"
    is_archived: bool = False
    notes: Optional[str] = None


class ProjectCreate(ProjectBase):
    team_id: Optional[str] = None


class ProjectUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    due_date: Optional[str] = None
    priority: Optional[ProjectPriority] = None
    color: Optional[str] = None
    is_archived: Optional[bool] = None
    notes: Optional[str] = None


class ProjectResponse(ProjectBase):
    id: str
    user_id: str
    team_id: Optional[str] = None
    note_updated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProjectPage(BaseModel):
    page: List[ProjectResponse]
    is_done: bool
    continue_cursor: Optional[str] = None


class ProjectUpdateEntry(BaseModel):
    id: str
    team_id: Optional[str] = None
    project_id: str
    author_id: str
    type: UpdateType
    summary: str
    changes: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
