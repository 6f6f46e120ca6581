from pydantic import BaseModel
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime

ItemType = Literal["code", "prompt", "file"]


class ItemBase(BaseModel):
    type: ItemType
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    language: Optional[str] = None
    category: Optional[str] = None
    file_url: Optional[str] = None
    storage_id: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None
    is_favorite: bool = False


class ItemCreate(ItemBase):
    team_id: Optional[str] = None


class ItemUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    language: Optional[str] = None
    category: Optional[str] = None
    file_url: Optional[str] = None
    storage_id: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None
    is_favorite: Optional[bool] = None


class ItemResponse(ItemBase):
    id: str
    user_id: str
    team_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ItemPage(BaseModel):
    page: List[ItemResponse]
    is_done: bool
    continue_cursor: Optional[str] = None


class RecentItem(BaseModel):
    id: str
    title: str
    type: ItemType
    created_at: Optional[datetime] = None


class StatsResponse(BaseModel):
    snippets: int = 0
    prompts: int = 0
    files: int = 0
    projects: int = 0


class MigrationResponse(BaseModel):
    migrated: int
