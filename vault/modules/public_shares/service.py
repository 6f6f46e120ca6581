"""
Public read-only links to a single project.

A project has at most one share row. It is created on first use and then only
toggled between enabled and disabled; the token never changes. Anonymous
lookups by token return None for every failure so that callers cannot tell a
disabled link from an expired or unknown one.
"""
from vault.config import settings
from vault.core.context import RequestContext
from vault.core.errors import NotFoundOrUnauthorized
from vault.core.membership import UNIQUE_VIOLATION, get_membership, require_share_manager
from vault.core.ownership import TeamOwner, PersonalOwner, is_expired, owner_of, to_iso, utc_now_iso
from vault.core.tokens import create_share_token
from vault.modules.profiles.service import ProfileService
from vault.modules.public_shares.schemas import (
    ShareCreate, ShareUpdate, ShareResponse, ShareAnalyticsResponse, AccessLogResponse,
    PublicShareResponse, PublicShareSummary, PublicProject, PublicProjectUpdate
)
from typing import Any, Dict, Optional
from postgrest.exceptions import APIError
import logging

logger = logging.getLogger(__name__)

RECENT_ACCESS_LIMIT = 10


def to_share_response(share: Dict[str, Any]) -> ShareResponse:
    return ShareResponse(**share, url=settings.project_share_url(share["token"]))


class PublicShareService:
    def __init__(self, ctx: RequestContext):
        self.ctx = ctx
        self.supabase = ctx.supabase

    def _get_project(self, project_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("projects")\
            .select("*")\
            .eq("id", project_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _ensure_project_owner(self, project_id: str) -> Dict[str, Any]:
        """The project, if the caller may manage its public link"""
        project = self._get_project(project_id)
        if not project:
            raise NotFoundOrUnauthorized("Project not found")
        owner = owner_of(project)
        if isinstance(owner, TeamOwner):
            if not get_membership(self.supabase, owner.team_id, self.ctx.user_id):
                raise NotFoundOrUnauthorized("Project not found")
            require_share_manager(self.supabase, owner.team_id, self.ctx.user_id)
        elif isinstance(owner, PersonalOwner):
            if owner.user_id != self.ctx.user_id:
                raise NotFoundOrUnauthorized("Project not found")
        else:
            raise TypeError(f"Unknown owner {owner!r}")
        return project

    def _share_for_project(self, project_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("public_shares")\
            .select("*")\
            .eq("project_id", project_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _get_share(self, share_id: str) -> Dict[str, Any]:
        result = self.supabase.table("public_shares")\
            .select("*")\
            .eq("id", share_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise NotFoundOrUnauthorized("Share not found")
        return result.data[0]

    def _active_share_by_token(self, token: str) -> Optional[Dict[str, Any]]:
        if not token:
            return None
        result = self.supabase.table("public_shares")\
            .select("*")\
            .eq("token", token)\
            .limit(1)\
            .execute()
        share = result.data[0] if result.data else None
        if not share or not share.get("enabled") or is_expired(share.get("expires_at")):
            return None
        return share

    def get_share_for_project(self, project_id: str) -> Optional[ShareResponse]:
        self._ensure_project_owner(project_id)
        share = self._share_for_project(project_id)
        return to_share_response(share) if share else None

    def create_share(self, project_id: str, share_data: ShareCreate) -> ShareResponse:
        """Enable the project's public link, reusing the existing token when there is one"""
        project = self._ensure_project_owner(project_id)
        expires_at = to_iso(share_data.expires_at)

        existing = self._share_for_project(project_id)
        if not existing:
            try:
                result = self.supabase.table("public_shares").insert({
                    "project_id": project_id,
                    "team_id": project.get("team_id"),
                    "token": create_share_token(),
                    "enabled": True,
                    "expires_at": expires_at,
                    "created_by": self.ctx.user_id,
                }).execute()
                logger.info(f"Created public share for project {project_id}")
                return to_share_response(result.data[0])
            except APIError as e:
                # Created concurrently; fall through and enable that row
                if e.code != UNIQUE_VIOLATION:
                    raise
                existing = self._share_for_project(project_id)

        result = self.supabase.table("public_shares")\
            .update({"enabled": True, "expires_at": expires_at})\
            .eq("id", existing["id"])\
            .execute()
        logger.info(f"Enabled public share {existing['id']} for project {project_id}")
        return to_share_response(result.data[0])

    def update_share(self, share_id: str, share_data: ShareUpdate) -> ShareResponse:
        share = self._get_share(share_id)
        self._ensure_project_owner(share["project_id"])
        update_data = share_data.model_dump(exclude_unset=True)
        if "expires_at" in update_data:
            update_data["expires_at"] = to_iso(update_data["expires_at"])
        if update_data.get("enabled") is None:
            update_data.pop("enabled", None)
        if not update_data:
            return to_share_response(share)

        result = self.supabase.table("public_shares")\
            .update(update_data)\
            .eq("id", share_id)\
            .execute()
        if not result.data:
            raise NotFoundOrUnauthorized("Share not found")
        return to_share_response(result.data[0])

    def get_share_analytics(self, share_id: str) -> ShareAnalyticsResponse:
        share = self._get_share(share_id)
        self._ensure_project_owner(share["project_id"])
        total = self.supabase.table("access_logs")\
            .select("id", count="exact")\
            .eq("share_id", share_id)\
            .execute()
        recent = self.supabase.table("access_logs")\
            .select("*")\
            .eq("share_id", share_id)\
            .order("accessed_at", desc=True)\
            .limit(RECENT_ACCESS_LIMIT)\
            .execute()
        return ShareAnalyticsResponse(
            total=total.count or 0,
            recent=[AccessLogResponse(**log) for log in (recent.data or [])],
        )

    def get_public_share_by_token(self, token: str) -> Optional[PublicShareResponse]:
        """Everything an anonymous viewer of a project link may see, or None"""
        share = self._active_share_by_token(token)
        if not share:
            return None
        project = self._get_project(share["project_id"])
        if not project:
            return None

        updates = self.supabase.table("project_updates")\
            .select("*")\
            .eq("project_id", project["id"])\
            .order("created_at", desc=True)\
            .execute()
        updates = updates.data or []

        author_ids = list(dict.fromkeys(u["author_id"] for u in updates))
        authors = ProfileService(self.ctx).get_public_profiles(author_ids)
        return PublicShareResponse(
            share=PublicShareSummary(token=share["token"], expires_at=share.get("expires_at")),
            project=PublicProject(**project),
            updates=[PublicProjectUpdate(**u) for u in updates],
            authors=authors,
        )

    def log_public_share_access(
        self,
        token: str,
        viewer_label: Optional[str] = None,
        referrer: Optional[str] = None
    ) -> Optional[str]:
        """Record one anonymous view. Returns the share id, or None when the link is not active."""
        share = self._active_share_by_token(token)
        if not share:
            return None
        self.supabase.table("access_logs").insert({
            "share_id": share["id"],
            "accessed_at": utc_now_iso(),
            "viewer_label": viewer_label,
            "referrer": referrer,
        }).execute()
        return share["id"]
