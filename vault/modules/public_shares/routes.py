from fastapi import APIRouter, Depends, Request
from vault.config import settings
from vault.core.context import RequestContext
from vault.core.dependencies import get_anonymous_context, get_request_context
from vault.core.errors import NotFoundOrUnauthorized
from vault.core.limiter import limiter
from vault.modules.public_shares.schemas import (
    ShareCreate, ShareUpdate, ShareResponse, ShareAnalyticsResponse,
    AccessLogRequest, AccessLoggedResponse, PublicShareResponse
)
from vault.modules.public_shares.service import PublicShareService
from typing import Optional

SHARE_UNAVAILABLE = "This link is not available"

router = APIRouter(prefix="/shares", tags=["shares"])
public_router = APIRouter(prefix="/public/shares", tags=["public"])


def get_share_service(ctx: RequestContext = Depends(get_request_context)) -> PublicShareService:
    return PublicShareService(ctx)


def get_public_share_service(ctx: RequestContext = Depends(get_anonymous_context)) -> PublicShareService:
    return PublicShareService(ctx)


@router.get("/projects/{project_id}", response_model=Optional[ShareResponse])
async def get_share_for_project(
    project_id: str,
    service: PublicShareService = Depends(get_share_service)
):
    """The project's public link, or null when none was ever created"""
    return service.get_share_for_project(project_id)


@router.post("/projects/{project_id}", response_model=ShareResponse)
async def create_share(
    project_id: str,
    share_data: Optional[ShareCreate] = None,
    service: PublicShareService = Depends(get_share_service)
):
    return service.create_share(project_id, share_data or ShareCreate())


@router.patch("/{share_id}", response_model=ShareResponse)
async def update_share(
    share_id: str,
    share_data: ShareUpdate,
    service: PublicShareService = Depends(get_share_service)
):
    """Toggle a link or change its expiry; an explicit null expiry removes it"""
    return service.update_share(share_id, share_data)


@router.get("/{share_id}/analytics", response_model=ShareAnalyticsResponse)
async def get_share_analytics(
    share_id: str,
    service: PublicShareService = Depends(get_share_service)
):
    return service.get_share_analytics(share_id)


@public_router.get("/{token}", response_model=PublicShareResponse)
@limiter.limit(settings.public_rate_limit)
async def get_public_share(
    request: Request,
    token: str,
    service: PublicShareService = Depends(get_public_share_service)
):
    share = service.get_public_share_by_token(token)
    if share is None:
        raise NotFoundOrUnauthorized(SHARE_UNAVAILABLE)
    return share


@public_router.post("/{token}/access", response_model=AccessLoggedResponse)
@limiter.limit(settings.public_rate_limit)
async def log_public_share_access(
    request: Request,
    token: str,
    access: Optional[AccessLogRequest] = None,
    service: PublicShareService = Depends(get_public_share_service)
):
    access = access or AccessLogRequest()
    share_id = service.log_public_share_access(
        token, viewer_label=access.viewer_label, referrer=access.referrer
    )
    if share_id is None:
        raise NotFoundOrUnauthorized(SHARE_UNAVAILABLE)
    return AccessLoggedResponse(share_id=share_id)
