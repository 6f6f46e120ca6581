from pydantic import BaseModel
from typing import Literal, List, Optional
from datetime import datetime

Role = Literal["admin", "member", "viewer"]


class TeamCreate(BaseModel):
    name: str
    description: Optional[str] = None
    cover_storage_id: Optional[str] = None


class PersonalTeamRequest(BaseModel):
    name: Optional[str] = None


class TeamUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    cover_storage_id: Optional[str] = None


class TeamResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_by: str
    is_personal: bool = False
    cover_storage_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MemberSummary(BaseModel):
    user_id: str
    role: Role
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class TeamWithMembershipResponse(TeamResponse):
    role: Role
    member_count: int
    members: List[MemberSummary]
    cover_url: Optional[str] = None


class TeamMemberResponse(BaseModel):
    id: str
    team_id: str
    user_id: str
    role: Role
    joined_at: Optional[datetime] = None
    profile: Optional[dict] = None

    class Config:
        from_attributes = True


class MemberRoleUpdate(BaseModel):
    role: Role
