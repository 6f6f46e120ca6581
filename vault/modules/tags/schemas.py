from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class TagCreate(BaseModel):
    name: str = Field(..., max_length=50)
    color: str = "#6366f1"
    team_id: Optional[str] = None


class TagResponse(BaseModel):
    id: str
    user_id: str
    team_id: Optional[str] = None
    name: str
    color: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
