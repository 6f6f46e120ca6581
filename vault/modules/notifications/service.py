"""
Notification fan-out and the recipient's inbox.

Fan-out writes one row per current team member as a single batch insert in
the calling request. There is no queue and no retry: a failure surfaces to
the caller of the operation that triggered it.
"""
from vault.core.context import RequestContext
from vault.modules.notifications.schemas import NotificationResponse, NotificationPage
from vault.core.errors import NotFoundOrUnauthorized
from vault.core.membership import list_member_user_ids
from vault.core.pagination import paginate_query
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, ctx: RequestContext):
        self.ctx = ctx
        self.supabase = ctx.supabase

    def fan_out_to_team(
        self,
        team_id: str,
        type: str,
        title: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> int:
        """Write a notification for every current member of the team. Returns the number written."""
        member_ids = list_member_user_ids(self.supabase, team_id)
        if not member_ids:
            return 0
        rows = [
            {
                "user_id": user_id,
                "team_id": team_id,
                "type": type,
                "title": title,
                "message": message,
                "read": False,
                "metadata": metadata or {},
            }
            for user_id in member_ids
        ]
        self.supabase.table("notifications").insert(rows).execute()
        logger.info(f"Fanned out '{type}' notification to {len(rows)} member(s) of team {team_id}")
        return len(rows)

    def list_notifications(self, cursor: Optional[str] = None, page_size: Optional[int] = None) -> NotificationPage:
        query = self.supabase.table("notifications")\
            .select("*")\
            .eq("user_id", self.ctx.user_id)\
            .order("created_at", desc=True)
        return NotificationPage(**paginate_query(query, cursor, page_size))

    def mark_notification_read(self, notification_id: str) -> NotificationResponse:
        result = self.supabase.table("notifications")\
            .update({"read": True})\
            .eq("id", notification_id)\
            .eq("user_id", self.ctx.user_id)\
            .execute()
        if not result.data:
            raise NotFoundOrUnauthorized("Notification not found")
        return NotificationResponse(**result.data[0])

    def mark_all_notifications_read(self) -> int:
        result = self.supabase.table("notifications")\
            .update({"read": True})\
            .eq("user_id", self.ctx.user_id)\
            .eq("read", False)\
            .execute()
        return len(result.data or [])
