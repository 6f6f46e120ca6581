from fastapi import APIRouter, Depends
from vault.core.context import RequestContext
from vault.core.dependencies import get_request_context
from vault.modules.teams.schemas import (
    TeamCreate, TeamUpdate, TeamResponse, TeamWithMembershipResponse,
    PersonalTeamRequest, TeamMemberResponse, MemberRoleUpdate
)
from vault.modules.teams.service import TeamService
from vault.modules.items.schemas import MigrationResponse
from vault.modules.items.service import ItemService
from typing import List, Optional

router = APIRouter(prefix="/teams", tags=["teams"])


def get_team_service(ctx: RequestContext = Depends(get_request_context)) -> TeamService:
    return TeamService(ctx)


def get_item_service(ctx: RequestContext = Depends(get_request_context)) -> ItemService:
    return ItemService(ctx)


@router.get("", response_model=List[TeamWithMembershipResponse])
async def list_my_teams(service: TeamService = Depends(get_team_service)):
    """List teams the caller belongs to"""
    return service.get_teams_for_user()


@router.post("", response_model=TeamResponse, status_code=201)
async def create_team(
    team_data: TeamCreate,
    service: TeamService = Depends(get_team_service)
):
    """Create a team; the caller becomes its admin"""
    return service.create_team(team_data)


@router.post("/personal", response_model=TeamResponse)
async def ensure_personal_team(
    request: Optional[PersonalTeamRequest] = None,
    service: TeamService = Depends(get_team_service)
):
    """Return the caller's personal team, creating it on first use"""
    return service.ensure_personal_team(request.name if request else None)


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(
    team_id: str,
    service: TeamService = Depends(get_team_service)
):
    return service.get_team(team_id)


@router.put("/{team_id}", response_model=TeamResponse)
async def update_team(
    team_id: str,
    team_data: TeamUpdate,
    service: TeamService = Depends(get_team_service)
):
    """Update team (admin only)"""
    return service.update_team(team_id, team_data)


@router.delete("/{team_id}", status_code=204)
async def delete_team(
    team_id: str,
    service: TeamService = Depends(get_team_service)
):
    """Delete team (admin only, personal teams excluded)"""
    service.delete_team(team_id)
    return None


@router.get("/{team_id}/members", response_model=List[TeamMemberResponse])
async def list_members(
    team_id: str,
    service: TeamService = Depends(get_team_service)
):
    """List all members of a team (members only)"""
    return service.get_team_members(team_id)


@router.put("/{team_id}/members/{member_id}", response_model=TeamMemberResponse)
async def update_member_role(
    team_id: str,
    member_id: str,
    role_update: MemberRoleUpdate,
    service: TeamService = Depends(get_team_service)
):
    """Change a member's role (admin only)"""
    return service.update_member_role(team_id, member_id, role_update.role)


@router.delete("/{team_id}/members/{member_id}", status_code=204)
async def remove_member(
    team_id: str,
    member_id: str,
    service: TeamService = Depends(get_team_service)
):
    """Remove a member from the team (admin only)"""
    service.remove_member(team_id, member_id)
    return None


@router.post("/{team_id}/migrate-legacy-items", response_model=MigrationResponse)
async def migrate_legacy_items(
    team_id: str,
    service: ItemService = Depends(get_item_service)
):
    """Move the team creator's legacy personal items into this team (admin only)"""
    return MigrationResponse(migrated=service.migrate_legacy_items_to_team(team_id))
