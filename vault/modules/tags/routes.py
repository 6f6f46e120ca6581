from fastapi import APIRouter, Depends
from vault.core.context import RequestContext
from vault.core.dependencies import get_request_context
from vault.modules.tags.schemas import TagCreate, TagResponse
from vault.modules.tags.service import TagService
from typing import List, Optional

router = APIRouter(prefix="/tags", tags=["tags"])


def get_tag_service(ctx: RequestContext = Depends(get_request_context)) -> TagService:
    return TagService(ctx)


@router.get("", response_model=List[TagResponse])
async def list_tags(
    team_id: Optional[str] = None,
    service: TagService = Depends(get_tag_service)
):
    """Tags of a team, or the caller's personal tags when no team is given"""
    return service.list_tags(team_id)


@router.post("", response_model=TagResponse, status_code=201)
async def create_tag(
    tag_data: TagCreate,
    service: TagService = Depends(get_tag_service)
):
    return service.create_tag(tag_data)


@router.delete("/{tag_id}")
async def delete_tag(
    tag_id: str,
    service: TagService = Depends(get_tag_service)
):
    service.delete_tag(tag_id)
    return {"message": "Tag deleted successfully"}


@router.get("/items/{item_id}", response_model=List[TagResponse])
async def list_item_tags(
    item_id: str,
    service: TagService = Depends(get_tag_service)
):
    return service.list_item_tags(item_id)


@router.put("/items/{item_id}/{tag_id}", response_model=List[TagResponse])
async def tag_item(
    item_id: str,
    tag_id: str,
    service: TagService = Depends(get_tag_service)
):
    return service.tag_item(item_id, tag_id)


@router.delete("/items/{item_id}/{tag_id}", response_model=List[TagResponse])
async def untag_item(
    item_id: str,
    tag_id: str,
    service: TagService = Depends(get_tag_service)
):
    return service.untag_item(item_id, tag_id)
