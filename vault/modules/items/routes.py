from fastapi import APIRouter, Depends, Query
from vault.core.context import RequestContext
from vault.core.dependencies import get_request_context
from vault.core.errors import NotFoundOrUnauthorized
from vault.modules.items.schemas import (
    ItemCreate, ItemUpdate, ItemResponse, ItemPage, RecentItem, StatsResponse, ItemType
)
from vault.modules.items.service import ItemService
from typing import List, Optional

router = APIRouter(prefix="/items", tags=["items"])


def get_item_service(ctx: RequestContext = Depends(get_request_context)) -> ItemService:
    return ItemService(ctx)


@router.get("", response_model=ItemPage)
async def list_items(
    team_id: Optional[str] = None,
    type: Optional[ItemType] = None,
    cursor: Optional[str] = None,
    page_size: Optional[int] = None,
    service: ItemService = Depends(get_item_service)
):
    """List items in a team, or the caller's personal items when no team is given"""
    return service.list_items(team_id=team_id, type=type, cursor=cursor, page_size=page_size)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    team_id: Optional[str] = None,
    service: ItemService = Depends(get_item_service)
):
    return service.get_stats(team_id)


@router.get("/recent", response_model=List[RecentItem])
async def get_recent_items(
    team_id: Optional[str] = None,
    limit: int = Query(5, ge=1, le=50),
    service: ItemService = Depends(get_item_service)
):
    return service.get_recent_items(team_id, limit)


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(
    item_id: str,
    service: ItemService = Depends(get_item_service)
):
    item = service.get_item(item_id)
    if item is None:
        raise NotFoundOrUnauthorized("Item not found")
    return item


@router.post("", response_model=ItemResponse, status_code=201)
async def create_item(
    item_data: ItemCreate,
    service: ItemService = Depends(get_item_service)
):
    return service.create_item(item_data)


@router.put("/{item_id}", response_model=ItemResponse)
async def update_item(
    item_id: str,
    item_data: ItemUpdate,
    service: ItemService = Depends(get_item_service)
):
    return service.update_item(item_id, item_data)


@router.delete("/{item_id}")
async def delete_item(
    item_id: str,
    service: ItemService = Depends(get_item_service)
):
    service.delete_item(item_id)
    return {"message": "Item deleted successfully"}
