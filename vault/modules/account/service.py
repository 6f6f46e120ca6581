"""
Account erasure.

Removes what the user created or received: items (with their tags and stored
files), tags, projects with their public links, authored project history,
notifications, board links, memberships and sent invites. Teams the user
created go too, together with the items and projects filed under them,
through the same cascade as team deletion. The profile row is removed last.

There is no transaction across these statements; a failure part way leaves
the remainder in place and the call can be repeated.
"""
from vault.core.context import RequestContext
from vault.database.storage import BlobStore
from vault.modules.account.schemas import AccountDeletionResponse
from vault.modules.teams.service import purge_team
from typing import Any, Dict, List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, ctx: RequestContext):
        self.ctx = ctx
        self.supabase = ctx.supabase

    def _rows(self, table: str, column: str, value: Any, columns: str = "id") -> List[Dict[str, Any]]:
        result = self.supabase.table(table)\
            .select(columns)\
            .eq(column, value)\
            .execute()
        return result.data or []

    def _delete_items(self, items: List[Dict[str, Any]]) -> None:
        item_ids = [i["id"] for i in items]
        if not item_ids:
            return
        self.supabase.table("item_tags").delete().in_("item_id", item_ids).execute()
        self.supabase.table("items").delete().in_("id", item_ids).execute()
        storage = BlobStore(self.supabase)
        for item in items:
            storage.remove(item.get("storage_id"))

    def _delete_tags(self, tags: List[Dict[str, Any]]) -> None:
        tag_ids = [t["id"] for t in tags]
        if not tag_ids:
            return
        self.supabase.table("item_tags").delete().in_("tag_id", tag_ids).execute()
        self.supabase.table("tags").delete().in_("id", tag_ids).execute()

    def _delete_shares(self, shares: List[Dict[str, Any]]) -> None:
        share_ids = [s["id"] for s in shares]
        if not share_ids:
            return
        self.supabase.table("access_logs").delete().in_("share_id", share_ids).execute()
        self.supabase.table("public_shares").delete().in_("id", share_ids).execute()

    def _delete_projects(self, projects: List[Dict[str, Any]]) -> None:
        project_ids = [p["id"] for p in projects]
        if not project_ids:
            return
        shares = self.supabase.table("public_shares")\
            .select("id")\
            .in_("project_id", project_ids)\
            .execute()
        self._delete_shares(shares.data or [])
        self.supabase.table("projects").delete().in_("id", project_ids).execute()

    def delete_account_data(self) -> AccountDeletionResponse:
        user_id = self.ctx.user_id
        try:
            self._delete_items(self._rows("items", "user_id", user_id, "id, storage_id"))
            self._delete_tags(self._rows("tags", "user_id", user_id))
            self._delete_projects(self._rows("projects", "user_id", user_id))
            self._delete_shares(self._rows("public_shares", "created_by", user_id))

            self.supabase.table("project_updates").delete().eq("author_id", user_id).execute()
            self.supabase.table("notifications").delete().eq("user_id", user_id).execute()
            self.supabase.table("board_shares").delete().eq("user_id", user_id).execute()
            self.supabase.table("team_members").delete().eq("user_id", user_id).execute()
            self.supabase.table("team_invites").delete().eq("invited_by", user_id).execute()

            for team in self._rows("teams", "created_by", user_id, "*"):
                self._delete_items(self._rows("items", "team_id", team["id"], "id, storage_id"))
                self._delete_tags(self._rows("tags", "team_id", team["id"]))
                self._delete_projects(self._rows("projects", "team_id", team["id"]))
                purge_team(self.supabase, team)
                logger.info(f"Deleted team {team['id']} with account {user_id}")

            self.supabase.table("profiles").delete().eq("user_id", user_id).execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting account data for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        logger.info(f"Deleted account data for {user_id}")
        return AccountDeletionResponse(deleted=True)
