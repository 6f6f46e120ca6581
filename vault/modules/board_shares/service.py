"""
Public read-only links to a whole project board.

A team board shows the team's active projects; a personal board shows the
creator's untethered active projects. Like project links, a board link is
created once and then only toggled.
"""
from vault.config import settings
from vault.core.context import RequestContext
from vault.core.errors import NotFoundOrUnauthorized
from vault.core.membership import require_share_manager
from vault.core.ownership import is_expired, to_iso
from vault.core.tokens import create_share_token
from vault.modules.board_shares.schemas import (
    BoardShareCreate, BoardShareUpdate, BoardShareResponse, PublicBoardResponse
)
from vault.modules.public_shares.schemas import PublicShareSummary, PublicProject, PublicProjectUpdate
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

BOARD_UPDATE_TYPES = ["updated", "note"]


def to_board_share_response(share: Dict[str, Any]) -> BoardShareResponse:
    return BoardShareResponse(**share, url=settings.board_share_url(share["token"]))


class BoardShareService:
    def __init__(self, ctx: RequestContext):
        self.ctx = ctx
        self.supabase = ctx.supabase

    def _find_board_share(self, team_id: Optional[str]) -> Optional[Dict[str, Any]]:
        query = self.supabase.table("board_shares").select("*")
        if team_id:
            query = query.eq("team_id", team_id)
        else:
            query = query.eq("user_id", self.ctx.user_id).is_("team_id", "null")
        result = query.limit(1).execute()
        return result.data[0] if result.data else None

    def _ensure_board_access(self, team_id: Optional[str], owner_id: Optional[str] = None) -> None:
        if team_id:
            require_share_manager(self.supabase, team_id, self.ctx.user_id)
        elif owner_id is not None and owner_id != self.ctx.user_id:
            raise NotFoundOrUnauthorized("Share not found")

    def _active_share_by_token(self, token: str) -> Optional[Dict[str, Any]]:
        if not token:
            return None
        result = self.supabase.table("board_shares")\
            .select("*")\
            .eq("token", token)\
            .limit(1)\
            .execute()
        share = result.data[0] if result.data else None
        if not share or not share.get("enabled") or is_expired(share.get("expires_at")):
            return None
        return share

    def _board_projects(self, share: Dict[str, Any]) -> List[Dict[str, Any]]:
        query = self.supabase.table("projects").select("*").eq("is_archived", False)
        if share.get("team_id"):
            query = query.eq("team_id", share["team_id"])
        else:
            query = query.eq("user_id", share["user_id"]).is_("team_id", "null")
        return query.order("created_at", desc=True).execute().data or []

    def get_board_share(self, team_id: Optional[str] = None) -> Optional[BoardShareResponse]:
        self._ensure_board_access(team_id)
        share = self._find_board_share(team_id)
        return to_board_share_response(share) if share else None

    def create_board_share(self, share_data: BoardShareCreate) -> BoardShareResponse:
        """Enable the board link for a team, or for the caller's personal board"""
        self._ensure_board_access(share_data.team_id)
        expires_at = to_iso(share_data.expires_at)

        existing = self._find_board_share(share_data.team_id)
        if existing:
            result = self.supabase.table("board_shares")\
                .update({"enabled": True, "expires_at": expires_at})\
                .eq("id", existing["id"])\
                .execute()
        else:
            result = self.supabase.table("board_shares").insert({
                "team_id": share_data.team_id,
                "user_id": self.ctx.user_id,
                "token": create_share_token(),
                "enabled": True,
                "expires_at": expires_at,
            }).execute()
        share = result.data[0]
        logger.info(f"Enabled board share {share['id']} (team={share_data.team_id})")
        return to_board_share_response(share)

    def update_board_share(self, share_id: str, share_data: BoardShareUpdate) -> BoardShareResponse:
        result = self.supabase.table("board_shares")\
            .select("*")\
            .eq("id", share_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise NotFoundOrUnauthorized("Share not found")
        share = result.data[0]
        self._ensure_board_access(share.get("team_id"), share["user_id"])

        update_data = share_data.model_dump(exclude_unset=True)
        if "expires_at" in update_data:
            update_data["expires_at"] = to_iso(update_data["expires_at"])
        if update_data.get("enabled") is None:
            update_data.pop("enabled", None)
        if not update_data:
            return to_board_share_response(share)

        result = self.supabase.table("board_shares")\
            .update(update_data)\
            .eq("id", share_id)\
            .execute()
        return to_board_share_response(result.data[0])

    def get_public_board_by_token(self, token: str) -> Optional[PublicBoardResponse]:
        share = self._active_share_by_token(token)
        if not share:
            return None
        return PublicBoardResponse(
            share=PublicShareSummary(token=share["token"], expires_at=share.get("expires_at")),
            projects=[PublicProject(**p) for p in self._board_projects(share)],
        )

    def get_public_board_updates(self, token: str) -> Optional[List[PublicProjectUpdate]]:
        """Progress history of the board's active projects, newest first"""
        share = self._active_share_by_token(token)
        if not share:
            return None
        project_ids = [p["id"] for p in self._board_projects(share)]
        if not project_ids:
            return []
        result = self.supabase.table("project_updates")\
            .select("*")\
            .in_("project_id", project_ids)\
            .in_("type", BOARD_UPDATE_TYPES)\
            .order("created_at", desc=True)\
            .execute()
        return [PublicProjectUpdate(**u) for u in (result.data or [])]
