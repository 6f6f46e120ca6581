from vault.core.context import RequestContext
from vault.core.errors import NotFoundOrUnauthorized, ValidationError
from vault.core.membership import UNIQUE_VIOLATION, add_membership, get_membership, require_admin
from vault.core.ownership import utc_now_iso
from vault.core.tokens import normalize_text
from vault.database.storage import BlobStore
from vault.modules.profiles.service import ProfileService
from vault.modules.teams.schemas import (
    TeamCreate, TeamUpdate, TeamResponse, TeamWithMembershipResponse,
    MemberSummary, TeamMemberResponse
)
from supabase import Client
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from postgrest.exceptions import APIError
import logging

logger = logging.getLogger(__name__)

PERSONAL_TEAM_NAME = "Personal Team"
PERSONAL_TEAM_DESCRIPTION = "Personal workspace"
AVATAR_STACK_SIZE = 5


def purge_team(supabase: Client, team: Dict[str, Any]) -> int:
    """Delete a team with its links, invites and memberships. Items and projects are left alone."""
    team_id = team["id"]
    shares = supabase.table("public_shares")\
        .select("id")\
        .eq("team_id", team_id)\
        .execute()
    share_ids = [s["id"] for s in (shares.data or [])]
    if share_ids:
        supabase.table("access_logs").delete().in_("share_id", share_ids).execute()
        supabase.table("public_shares").delete().in_("id", share_ids).execute()

    supabase.table("board_shares").delete().eq("team_id", team_id).execute()
    supabase.table("team_invites").delete().eq("team_id", team_id).execute()
    supabase.table("team_members").delete().eq("team_id", team_id).execute()
    result = supabase.table("teams").delete().eq("id", team_id).execute()
    BlobStore(supabase).remove(team.get("cover_storage_id"))
    return len(result.data or [])


class TeamService:
    def __init__(self, ctx: RequestContext):
        self.ctx = ctx
        self.supabase = ctx.supabase

    def _get_team(self, team_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("teams")\
            .select("*")\
            .eq("id", team_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _create_team_with_admin(self, team_row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a team and its creator's admin membership; the team is removed again if the membership fails."""
        result = self.supabase.table("teams").insert(team_row).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create team")
        team = result.data[0]
        try:
            add_membership(self.supabase, team["id"], self.ctx.user_id, "admin")
        except Exception:
            logger.warning(f"Admin membership insert failed, removing team {team['id']}")
            self.supabase.table("teams").delete().eq("id", team["id"]).execute()
            raise
        logger.info(f"Created team {team['id']} for {self.ctx.user_id} (personal={team_row['is_personal']})")
        return team

    def _find_personal_team(self) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("teams")\
            .select("*")\
            .eq("created_by", self.ctx.user_id)\
            .eq("is_personal", True)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def ensure_personal_team(self, name: Optional[str] = None) -> TeamResponse:
        """Return the caller's personal team, creating it on first use"""
        try:
            team = self._find_personal_team()
            if team:
                # Repair a personal team that lost its owner membership
                add_membership(self.supabase, team["id"], self.ctx.user_id, "admin")
                return TeamResponse(**team)

            try:
                team = self._create_team_with_admin({
                    "name": normalize_text(name or "") or PERSONAL_TEAM_NAME,
                    "description": PERSONAL_TEAM_DESCRIPTION,
                    "created_by": self.ctx.user_id,
                    "is_personal": True,
                })
            except APIError as e:
                # Another request created it first; the partial unique index kept theirs
                if e.code != UNIQUE_VIOLATION:
                    raise
                team = self._find_personal_team()
                if not team:
                    raise
                add_membership(self.supabase, team["id"], self.ctx.user_id, "admin")
            return TeamResponse(**team)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error ensuring personal team for {self.ctx.user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def create_team(self, team_data: TeamCreate) -> TeamResponse:
        """Create a regular team with the caller as admin"""
        name = normalize_text(team_data.name)
        if not name:
            raise ValidationError("Team name is required")
        try:
            team = self._create_team_with_admin({
                "name": name,
                "description": normalize_text(team_data.description) if team_data.description else None,
                "created_by": self.ctx.user_id,
                "is_personal": False,
                "cover_storage_id": team_data.cover_storage_id,
            })
            return TeamResponse(**team)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating team for {self.ctx.user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_team(self, team_id: str) -> TeamResponse:
        """Get a team the caller belongs to"""
        team = self._get_team(team_id)
        if not team or not get_membership(self.supabase, team_id, self.ctx.user_id):
            raise NotFoundOrUnauthorized("Team not found")
        return TeamResponse(**team)

    def get_teams_for_user(self) -> List[TeamWithMembershipResponse]:
        """Teams the caller belongs to, with their role, member count and a short member list"""
        memberships = self.supabase.table("team_members")\
            .select("team_id, role")\
            .eq("user_id", self.ctx.user_id)\
            .execute()
        if not memberships.data:
            return []

        role_by_team = {m["team_id"]: m["role"] for m in memberships.data}
        teams_result = self.supabase.table("teams")\
            .select("*")\
            .in_("id", list(role_by_team))\
            .order("created_at")\
            .execute()
        members_result = self.supabase.table("team_members")\
            .select("team_id, user_id, role, joined_at")\
            .in_("team_id", list(role_by_team))\
            .order("joined_at")\
            .execute()

        members_by_team: Dict[str, List[Dict[str, Any]]] = {}
        for member in members_result.data or []:
            members_by_team.setdefault(member["team_id"], []).append(member)

        shown_ids = {
            m["user_id"]
            for members in members_by_team.values()
            for m in members[:AVATAR_STACK_SIZE]
        }
        profiles = ProfileService(self.ctx).get_profiles_by_user_ids(list(shown_ids))
        storage = BlobStore(self.supabase)

        teams = []
        for team in teams_result.data or []:
            members = members_by_team.get(team["id"], [])
            summaries = []
            for m in members[:AVATAR_STACK_SIZE]:
                profile = profiles.get(m["user_id"]) or {}
                summaries.append(MemberSummary(
                    user_id=m["user_id"],
                    role=m["role"],
                    username=profile.get("username"),
                    full_name=profile.get("full_name"),
                    avatar_url=profile.get("avatar_url"),
                ))
            teams.append(TeamWithMembershipResponse(
                **team,
                role=role_by_team[team["id"]],
                member_count=len(members),
                members=summaries,
                cover_url=storage.get_url(team.get("cover_storage_id")),
            ))
        return teams

    def update_team(self, team_id: str, team_data: TeamUpdate) -> TeamResponse:
        """Update team details (admin only)"""
        require_admin(self.supabase, team_id, self.ctx.user_id)
        update_data: Dict[str, Any] = {}
        if team_data.name is not None:
            name = normalize_text(team_data.name)
            if not name:
                raise ValidationError("Team name is required")
            update_data["name"] = name
        if team_data.description is not None:
            update_data["description"] = normalize_text(team_data.description) or None
        if team_data.cover_storage_id is not None:
            update_data["cover_storage_id"] = team_data.cover_storage_id

        if not update_data:
            return self.get_team(team_id)

        update_data["updated_at"] = utc_now_iso()
        result = self.supabase.table("teams")\
            .update(update_data)\
            .eq("id", team_id)\
            .execute()
        if not result.data:
            raise NotFoundOrUnauthorized("Team not found")
        return TeamResponse(**result.data[0])

    def delete_team(self, team_id: str) -> bool:
        """Delete a team and everything hanging off it except items and projects (admin only)"""
        require_admin(self.supabase, team_id, self.ctx.user_id)
        team = self._get_team(team_id)
        if not team:
            raise NotFoundOrUnauthorized("Team not found")
        if team.get("is_personal"):
            raise ValidationError("Personal teams cannot be deleted")

        try:
            deleted = purge_team(self.supabase, team)
        except Exception as e:
            logger.error(f"Error deleting team {team_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        logger.info(f"Deleted team {team_id}")
        return deleted > 0

    def get_team_members(self, team_id: str) -> List[TeamMemberResponse]:
        """List members with their profiles (members only)"""
        if not get_membership(self.supabase, team_id, self.ctx.user_id):
            raise NotFoundOrUnauthorized("Team not found")
        result = self.supabase.table("team_members")\
            .select("*")\
            .eq("team_id", team_id)\
            .order("joined_at")\
            .execute()
        members = result.data or []
        profiles = ProfileService(self.ctx).get_profiles_by_user_ids([m["user_id"] for m in members])
        return [TeamMemberResponse(**m, profile=profiles.get(m["user_id"])) for m in members]

    def _get_member_of_team(self, team_id: str, member_id: str) -> Dict[str, Any]:
        result = self.supabase.table("team_members")\
            .select("*")\
            .eq("id", member_id)\
            .limit(1)\
            .execute()
        member = result.data[0] if result.data else None
        # A membership id from another team must not be touched through this team's admin rights
        if not member or member["team_id"] != team_id:
            raise NotFoundOrUnauthorized("Member not found")
        return member

    def update_member_role(self, team_id: str, member_id: str, role: str) -> TeamMemberResponse:
        require_admin(self.supabase, team_id, self.ctx.user_id)
        self._get_member_of_team(team_id, member_id)
        result = self.supabase.table("team_members")\
            .update({"role": role})\
            .eq("id", member_id)\
            .eq("team_id", team_id)\
            .execute()
        if not result.data:
            raise NotFoundOrUnauthorized("Member not found")
        logger.info(f"Member {member_id} of team {team_id} is now {role}")
        return TeamMemberResponse(**result.data[0])

    def remove_member(self, team_id: str, member_id: str) -> bool:
        require_admin(self.supabase, team_id, self.ctx.user_id)
        self._get_member_of_team(team_id, member_id)
        result = self.supabase.table("team_members")\
            .delete()\
            .eq("id", member_id)\
            .eq("team_id", team_id)\
            .execute()
        logger.info(f"Removed member {member_id} from team {team_id}")
        return len(result.data or []) > 0
