from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from vault.modules.public_shares.schemas import PublicShareSummary, PublicProject


class BoardShareCreate(BaseModel):
    team_id: Optional[str] = None
    expires_at: Optional[datetime] = None


class BoardShareUpdate(BaseModel):
    enabled: Optional[bool] = None
    expires_at: Optional[datetime] = None


class BoardShareResponse(BaseModel):
    id: str
    team_id: Optional[str] = None
    user_id: str
    token: str
    enabled: bool
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    url: str

    class Config:
        from_attributes = True


class PublicBoardResponse(BaseModel):
    share: PublicShareSummary
    projects: List[PublicProject]
