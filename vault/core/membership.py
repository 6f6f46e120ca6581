"""
Membership resolver: the single authorization primitive for team-scoped work.

Roles are admin, member and viewer with no hierarchy between them. Rows are
read from team_members on every call; nothing is cached.
"""
import logging
from typing import Any, Dict, Optional

from postgrest.exceptions import APIError
from supabase import Client

from vault.core.errors import Unauthorized
from vault.core.ownership import utc_now_iso

logger = logging.getLogger(__name__)

ROLES = ("admin", "member", "viewer")
UNIQUE_VIOLATION = "23505"


def get_membership(supabase: Client, team_id: str, user_id: Optional[str]) -> Optional[Dict[str, Any]]:
    if not team_id or not user_id:
        return None
    result = supabase.table("team_members")\
        .select("*")\
        .eq("team_id", team_id)\
        .eq("user_id", user_id)\
        .limit(1)\
        .execute()
    return result.data[0] if result.data else None


def resolve_role(supabase: Client, team_id: str, user_id: Optional[str]) -> Optional[str]:
    membership = get_membership(supabase, team_id, user_id)
    return membership["role"] if membership else None


def require_member(supabase: Client, team_id: str, user_id: Optional[str]) -> str:
    role = resolve_role(supabase, team_id, user_id)
    if role is None:
        raise Unauthorized("Not a member of this team")
    return role


def require_admin(supabase: Client, team_id: str, user_id: Optional[str]) -> None:
    if resolve_role(supabase, team_id, user_id) != "admin":
        raise Unauthorized("Unauthorized")


def list_member_user_ids(supabase: Client, team_id: str) -> list:
    result = supabase.table("team_members")\
        .select("user_id")\
        .eq("team_id", team_id)\
        .execute()
    return [m["user_id"] for m in (result.data or [])]


def add_membership(supabase: Client, team_id: str, user_id: str, role: str) -> bool:
    """Insert a membership unless one exists. Returns True when a row was created."""
    if get_membership(supabase, team_id, user_id):
        return False
    try:
        supabase.table("team_members").insert({
            "team_id": team_id,
            "user_id": user_id,
            "role": role,
            "joined_at": utc_now_iso(),
        }).execute()
    except APIError as e:
        # Concurrent join of the same user; the unique (team_id, user_id) index kept one row.
        if e.code == UNIQUE_VIOLATION:
            return False
        raise
    logger.info(f"Added {user_id} to team {team_id} as {role}")
    return True


def require_share_manager(supabase: Client, team_id: str, user_id: Optional[str]) -> str:
    """Any member except a viewer may manage public links of team resources."""
    role = require_member(supabase, team_id, user_id)
    if role == "viewer":
        raise Unauthorized("Viewers cannot manage shares")
    return role
