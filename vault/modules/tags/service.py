"""
Tags and their attachment to items.

Tags are owned the same way items are: a tag with a team_id belongs to the
team, one without is the creator's personal tag. A tag can only be attached
to an item with the same owner.
"""
from vault.core.context import RequestContext
from vault.core.errors import NotFoundOrUnauthorized, ValidationError
from vault.core.membership import UNIQUE_VIOLATION, require_member
from vault.core.ownership import owner_of
from vault.core.resources import ScopedResources
from vault.core.tokens import normalize_text
from vault.modules.tags.schemas import TagCreate, TagResponse
from typing import List, Optional
from postgrest.exceptions import APIError
import logging

logger = logging.getLogger(__name__)


class TagService:
    def __init__(self, ctx: RequestContext):
        self.ctx = ctx
        self.supabase = ctx.supabase
        self.tags = ScopedResources(self.supabase, "tags", "Tag not found or unauthorized")
        self.items = ScopedResources(self.supabase, "items", "Item not found or unauthorized")

    def list_tags(self, team_id: Optional[str] = None) -> List[TagResponse]:
        scope = self.tags.resolve_scope(self.ctx.user_id, team_id)
        rows = self.tags.list_all(scope)
        return [TagResponse(**row) for row in sorted(rows, key=lambda r: r["name"].lower())]

    def create_tag(self, tag_data: TagCreate) -> TagResponse:
        name = normalize_text(tag_data.name)
        if not name:
            raise ValidationError("Tag name is required")
        if tag_data.team_id:
            require_member(self.supabase, tag_data.team_id, self.ctx.user_id)
        result = self.supabase.table("tags").insert({
            "user_id": self.ctx.user_id,
            "team_id": tag_data.team_id,
            "name": name,
            "color": tag_data.color,
        }).execute()
        return TagResponse(**result.data[0])

    def delete_tag(self, tag_id: str) -> str:
        """Delete a tag and detach it from every item. Returns the tag id."""
        self.tags.load_writable(tag_id, self.ctx.user_id)
        self.supabase.table("item_tags").delete().eq("tag_id", tag_id).execute()
        self.supabase.table("tags").delete().eq("id", tag_id).execute()
        logger.info(f"Deleted tag {tag_id}")
        return tag_id

    def list_item_tags(self, item_id: str) -> List[TagResponse]:
        if self.items.load_readable(item_id, self.ctx.user_id) is None:
            raise NotFoundOrUnauthorized(self.items.not_found_message)
        links = self.supabase.table("item_tags")\
            .select("tag_id")\
            .eq("item_id", item_id)\
            .execute()
        tag_ids = [link["tag_id"] for link in (links.data or [])]
        if not tag_ids:
            return []
        result = self.supabase.table("tags")\
            .select("*")\
            .in_("id", tag_ids)\
            .order("name")\
            .execute()
        return [TagResponse(**row) for row in (result.data or [])]

    def tag_item(self, item_id: str, tag_id: str) -> List[TagResponse]:
        """Attach a tag to an item; attaching twice is a no-op"""
        item = self.items.load_writable(item_id, self.ctx.user_id)
        tag = self.tags.load_writable(tag_id, self.ctx.user_id)
        if owner_of(item) != owner_of(tag):
            raise ValidationError("Tag and item belong to different workspaces")
        try:
            self.supabase.table("item_tags").insert({"item_id": item_id, "tag_id": tag_id}).execute()
        except APIError as e:
            if e.code != UNIQUE_VIOLATION:
                raise
        return self.list_item_tags(item_id)

    def untag_item(self, item_id: str, tag_id: str) -> List[TagResponse]:
        self.items.load_writable(item_id, self.ctx.user_id)
        self.supabase.table("item_tags")\
            .delete()\
            .eq("item_id", item_id)\
            .eq("tag_id", tag_id)\
            .execute()
        return self.list_item_tags(item_id)
