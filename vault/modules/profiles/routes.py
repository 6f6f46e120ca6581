from fastapi import APIRouter, Depends, Query
from typing import List
from vault.core.context import RequestContext
from vault.core.dependencies import get_request_context
from vault.modules.profiles.schemas import ProfileUpdate, ProfileResponse, SyncUserRequest, UserSearchResult
from vault.modules.profiles.service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(ctx: RequestContext = Depends(get_request_context)) -> ProfileService:
    return ProfileService(ctx)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(service: ProfileService = Depends(get_profile_service)):
    """Get the caller's profile"""
    return service.get_profile()


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    service: ProfileService = Depends(get_profile_service)
):
    """Update (or create) the caller's profile"""
    return service.update_profile(profile_data)


@router.post("/sync", response_model=ProfileResponse)
async def sync_user(
    sync_data: SyncUserRequest,
    service: ProfileService = Depends(get_profile_service)
):
    """Sync identity provider details into the caller's profile"""
    return service.sync_user(sync_data)


@router.get("/search", response_model=List[UserSearchResult])
async def search_users(
    q: str = Query("", max_length=100),
    service: ProfileService = Depends(get_profile_service)
):
    """Find users by email"""
    return service.search_users(q)
