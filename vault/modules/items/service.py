from vault.core.context import RequestContext
from vault.core.errors import NotFoundOrUnauthorized
from vault.core.membership import require_admin, require_member
from vault.core.ownership import utc_now_iso
from vault.core.resources import ScopedResources
from vault.database.storage import BlobStore
from vault.modules.items.schemas import (
    ItemCreate, ItemUpdate, ItemResponse, ItemPage, RecentItem, StatsResponse, ItemType
)
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# item type -> stats field
STAT_FIELDS = {"code": "snippets", "prompt": "prompts", "file": "files"}

# NOT NULL columns; an explicit null in an update leaves them as stored
REQUIRED_FIELDS = ("title", "is_favorite")


class ItemService:
    def __init__(self, ctx: RequestContext):
        self.ctx = ctx
        self.supabase = ctx.supabase
        self.items = ScopedResources(self.supabase, "items", "Item not found or unauthorized")

    def _to_response(self, row: Dict[str, Any], storage: Optional[BlobStore] = None) -> ItemResponse:
        if row.get("storage_id"):
            storage = storage or BlobStore(self.supabase)
            row = {**row, "file_url": storage.get_url(row["storage_id"]) or row.get("file_url")}
        return ItemResponse(**row)

    def list_items(
        self,
        team_id: Optional[str] = None,
        type: Optional[ItemType] = None,
        cursor: Optional[str] = None,
        page_size: Optional[int] = None
    ) -> ItemPage:
        """List items visible to the caller, newest first"""
        scope = self.items.resolve_scope(self.ctx.user_id, team_id)
        filters = {"type": type} if type else {}
        result = self.items.list_page(scope, filters, cursor, page_size)
        storage = BlobStore(self.supabase)
        result["page"] = [self._to_response(row, storage) for row in result["page"]]
        return ItemPage(**result)

    def get_item(self, item_id: str) -> Optional[ItemResponse]:
        row = self.items.load_readable(item_id, self.ctx.user_id)
        return self._to_response(row) if row else None

    def create_item(self, item_data: ItemCreate) -> ItemResponse:
        """Create an item in a team the caller belongs to, or as a personal item"""
        if item_data.team_id:
            require_member(self.supabase, item_data.team_id, self.ctx.user_id)
        try:
            row = item_data.model_dump()
            row["user_id"] = self.ctx.user_id
            result = self.supabase.table("items").insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create item")
            return self._to_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating item for {self.ctx.user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_item(self, item_id: str, item_data: ItemUpdate) -> ItemResponse:
        existing = self.items.load_writable(item_id, self.ctx.user_id)
        update_data = item_data.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                del update_data[field]
        if not update_data:
            return self._to_response(existing)
        update_data["updated_at"] = utc_now_iso()
        result = self.supabase.table("items")\
            .update(update_data)\
            .eq("id", item_id)\
            .execute()
        if not result.data:
            raise NotFoundOrUnauthorized(self.items.not_found_message)
        return self._to_response(result.data[0])

    def delete_item(self, item_id: str) -> bool:
        existing = self.items.load_writable(item_id, self.ctx.user_id)
        self.supabase.table("item_tags").delete().eq("item_id", item_id).execute()
        result = self.supabase.table("items").delete().eq("id", item_id).execute()
        if existing.get("storage_id"):
            BlobStore(self.supabase).remove(existing["storage_id"])
        return len(result.data or []) > 0

    def get_stats(self, team_id: Optional[str] = None) -> StatsResponse:
        """Item counts by type and the number of active projects"""
        scope = self.items.resolve_scope(self.ctx.user_id, team_id)
        stats = StatsResponse()
        if scope is None:
            return stats
        for item_type, field in STAT_FIELDS.items():
            setattr(stats, field, self.items.count(scope, {"type": item_type}))
        projects = ScopedResources(self.supabase, "projects", "Project not found or unauthorized")
        stats.projects = projects.count(scope, {"is_archived": False})
        return stats

    def get_recent_items(self, team_id: Optional[str] = None, limit: int = 5) -> List[RecentItem]:
        scope = self.items.resolve_scope(self.ctx.user_id, team_id)
        result = self.items.list_page(scope, page_size=limit)
        return [RecentItem(**row) for row in result["page"]]

    def migrate_legacy_items_to_team(self, team_id: str) -> int:
        """Move the team creator's legacy items into the team (admin only). Personal teams are left alone."""
        require_admin(self.supabase, team_id, self.ctx.user_id)
        team = self.supabase.table("teams")\
            .select("id, is_personal, created_by")\
            .eq("id", team_id)\
            .limit(1)\
            .execute()
        if not team.data:
            raise NotFoundOrUnauthorized("Team not found")
        team = team.data[0]
        if team.get("is_personal"):
            return 0

        result = self.supabase.table("items")\
            .update({"team_id": team_id})\
            .eq("user_id", team["created_by"])\
            .is_("team_id", "null")\
            .execute()
        migrated = len(result.data or [])
        logger.info(f"Migrated {migrated} legacy item(s) of {team['created_by']} into team {team_id}")
        return migrated
