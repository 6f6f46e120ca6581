from pydantic import BaseModel
from typing import Literal, Optional
from datetime import datetime

from vault.modules.teams.schemas import Role

InviteStatus = Literal["pending", "accepted", "revoked"]


class InviteCreate(BaseModel):
    email: str
    role: Role = "member"
    expires_at: Optional[datetime] = None


class InviteCreatedResponse(BaseModel):
    invite_id: str
    code: str
    token: str


class InviteResponse(BaseModel):
    id: str
    team_id: str
    email: str
    code: str
    token: str
    role: Role
    status: InviteStatus
    invited_by: str
    expires_at: Optional[datetime] = None
    accepted_by: Optional[str] = None
    accepted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AcceptInviteByTokenRequest(BaseModel):
    token: str


class AcceptInviteByCodeRequest(BaseModel):
    code: str


class AcceptInviteResponse(BaseModel):
    team_id: str


class InviteCodeResponse(BaseModel):
    team_id: str
    invite_code: str
