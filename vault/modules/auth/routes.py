from fastapi import APIRouter, Depends
from vault.core.dependencies import get_current_user_id
from vault.database.supabase_client import get_supabase
from vault.modules.auth.schemas import CurrentUserResponse
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase),
):
    """Get the authenticated user and the id of their personal team, if it exists yet"""
    personal = supabase.table("teams")\
        .select("id")\
        .eq("created_by", current_user["id"])\
        .eq("is_personal", True)\
        .limit(1)\
        .execute()
    return CurrentUserResponse(
        **current_user,
        personal_team_id=personal.data[0]["id"] if personal.data else None,
    )
