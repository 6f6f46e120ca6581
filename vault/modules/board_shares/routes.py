from fastapi import APIRouter, Depends, Request
from vault.config import settings
from vault.core.context import RequestContext
from vault.core.dependencies import get_anonymous_context, get_request_context
from vault.core.errors import NotFoundOrUnauthorized
from vault.core.limiter import limiter
from vault.modules.board_shares.schemas import (
    BoardShareCreate, BoardShareUpdate, BoardShareResponse, PublicBoardResponse
)
from vault.modules.board_shares.service import BoardShareService
from vault.modules.public_shares.routes import SHARE_UNAVAILABLE
from vault.modules.public_shares.schemas import PublicProjectUpdate
from typing import List, Optional

router = APIRouter(prefix="/board-shares", tags=["board-shares"])
public_router = APIRouter(prefix="/public/boards", tags=["public"])


def get_board_share_service(ctx: RequestContext = Depends(get_request_context)) -> BoardShareService:
    return BoardShareService(ctx)


def get_public_board_share_service(ctx: RequestContext = Depends(get_anonymous_context)) -> BoardShareService:
    return BoardShareService(ctx)


@router.get("", response_model=Optional[BoardShareResponse])
async def get_board_share(
    team_id: Optional[str] = None,
    service: BoardShareService = Depends(get_board_share_service)
):
    """The board link of a team, or of the caller's personal board when no team is given"""
    return service.get_board_share(team_id)


@router.post("", response_model=BoardShareResponse)
async def create_board_share(
    share_data: BoardShareCreate,
    service: BoardShareService = Depends(get_board_share_service)
):
    return service.create_board_share(share_data)


@router.patch("/{share_id}", response_model=BoardShareResponse)
async def update_board_share(
    share_id: str,
    share_data: BoardShareUpdate,
    service: BoardShareService = Depends(get_board_share_service)
):
    return service.update_board_share(share_id, share_data)


@public_router.get("/{token}", response_model=PublicBoardResponse)
@limiter.limit(settings.public_rate_limit)
async def get_public_board(
    request: Request,
    token: str,
    service: BoardShareService = Depends(get_public_board_share_service)
):
    board = service.get_public_board_by_token(token)
    if board is None:
        raise NotFoundOrUnauthorized(SHARE_UNAVAILABLE)
    return board


@public_router.get("/{token}/updates", response_model=List[PublicProjectUpdate])
@limiter.limit(settings.public_rate_limit)
async def get_public_board_updates(
    request: Request,
    token: str,
    service: BoardShareService = Depends(get_public_board_share_service)
):
    updates = service.get_public_board_updates(token)
    if updates is None:
        raise NotFoundOrUnauthorized(SHARE_UNAVAILABLE)
    return updates
