from fastapi import APIRouter, Depends
from vault.core.context import RequestContext
from vault.core.dependencies import get_request_context
from vault.modules.invites.schemas import (
    InviteCreate, InviteCreatedResponse, InviteResponse, InviteCodeResponse,
    AcceptInviteByTokenRequest, AcceptInviteByCodeRequest, AcceptInviteResponse
)
from vault.modules.invites.service import InviteService
from typing import List

router = APIRouter(prefix="/invites", tags=["invites"])


def get_invite_service(ctx: RequestContext = Depends(get_request_context)) -> InviteService:
    return InviteService(ctx)


@router.get("/me", response_model=List[InviteResponse])
async def list_my_invites(service: InviteService = Depends(get_invite_service)):
    """Pending invites sent to the caller's email"""
    return service.list_invites_for_email()


@router.post("/accept/token", response_model=AcceptInviteResponse)
async def accept_invite_by_token(
    request: AcceptInviteByTokenRequest,
    service: InviteService = Depends(get_invite_service)
):
    return AcceptInviteResponse(team_id=service.accept_invite_by_token(request.token))


@router.post("/accept/code", response_model=AcceptInviteResponse)
async def accept_invite_by_code(
    request: AcceptInviteByCodeRequest,
    service: InviteService = Depends(get_invite_service)
):
    return AcceptInviteResponse(team_id=service.accept_invite_by_code(request.code))


@router.get("/teams/{team_id}", response_model=List[InviteResponse])
async def list_team_invites(
    team_id: str,
    service: InviteService = Depends(get_invite_service)
):
    return service.list_team_invites(team_id)


@router.post("/teams/{team_id}", response_model=InviteCreatedResponse, status_code=201)
async def invite_member(
    team_id: str,
    invite_data: InviteCreate,
    service: InviteService = Depends(get_invite_service)
):
    """Invite an email address to the team (admin only)"""
    return service.invite_member(team_id, invite_data)


@router.post("/teams/{team_id}/code", response_model=InviteCodeResponse)
async def get_or_create_invite_code(
    team_id: str,
    service: InviteService = Depends(get_invite_service)
):
    return InviteCodeResponse(team_id=team_id, invite_code=service.get_or_create_invite_code(team_id))


@router.post("/{invite_id}/revoke", response_model=InviteResponse)
async def revoke_invite(
    invite_id: str,
    service: InviteService = Depends(get_invite_service)
):
    return service.revoke_invite(invite_id)
