"""
Team invitations.

Two credentials get a user into a team:

* the team invite code, a short reusable code stored on the team itself and
  generated the first time an admin asks for it. Joining with it grants the
  member role.
* a per-invite token (and its short per-invite code), created for one email
  address and redeemable exactly once before it expires or is revoked.

Redemption flips the invite from pending to accepted with a conditional
update, so of two concurrent redemptions only one gets a row back.
"""
from vault.config import settings
from vault.core.context import RequestContext
from vault.core.errors import InviteNotValid, NotFoundOrUnauthorized, ValidationError
from vault.core.membership import UNIQUE_VIOLATION, add_membership, require_admin
from vault.core.ownership import is_expired, to_iso, utc_now_iso
from vault.core.tokens import create_invite_code, create_invite_token, normalize_code, normalize_text
from vault.modules.invites.schemas import InviteCreate, InviteCreatedResponse, InviteResponse
from vault.modules.notifications.service import NotificationService
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from postgrest.exceptions import APIError
import logging

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return normalize_text(email).lower()


class InviteService:
    def __init__(self, ctx: RequestContext):
        self.ctx = ctx
        self.supabase = ctx.supabase

    def _get_invite(self, column: str, value: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("team_invites")\
            .select("*")\
            .eq(column, value)\
            .order("created_at", desc=True)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _team_by_code(self, code: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("teams")\
            .select("id, invite_code")\
            .eq("invite_code", code)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def get_or_create_invite_code(self, team_id: str) -> str:
        """Return the team's invite code, generating it on first request (admin only)"""
        require_admin(self.supabase, team_id, self.ctx.user_id)
        result = self.supabase.table("teams")\
            .select("id, invite_code")\
            .eq("id", team_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise NotFoundOrUnauthorized("Team not found")
        team = result.data[0]
        if team.get("invite_code"):
            return team["invite_code"]

        for _ in range(settings.invite_code_max_attempts):
            code = create_invite_code()
            if self._team_by_code(code):
                continue
            try:
                # Only set when still empty; a concurrent request may have won
                updated = self.supabase.table("teams")\
                    .update({"invite_code": code})\
                    .eq("id", team_id)\
                    .is_("invite_code", "null")\
                    .execute()
            except APIError as e:
                if e.code != UNIQUE_VIOLATION:
                    raise
                continue
            if updated.data:
                logger.info(f"Generated invite code for team {team_id}")
                return code
            current = self.supabase.table("teams")\
                .select("invite_code")\
                .eq("id", team_id)\
                .limit(1)\
                .execute()
            if current.data and current.data[0].get("invite_code"):
                return current.data[0]["invite_code"]

        logger.error(f"Could not allocate a unique invite code for team {team_id}")
        raise HTTPException(status_code=500, detail="Could not generate invite code")

    def invite_member(self, team_id: str, invite_data: InviteCreate) -> InviteCreatedResponse:
        """Create a pending invite for an email address and tell the team about it (admin only)"""
        require_admin(self.supabase, team_id, self.ctx.user_id)
        email = normalize_email(invite_data.email)
        if "@" not in email:
            raise ValidationError("Invalid email")

        try:
            result = self.supabase.table("team_invites").insert({
                "team_id": team_id,
                "email": email,
                "code": create_invite_code(),
                "token": create_invite_token(),
                "role": invite_data.role,
                "status": "pending",
                "invited_by": self.ctx.user_id,
                "expires_at": to_iso(invite_data.expires_at),
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create invite")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating invite for team {team_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        invite = result.data[0]
        NotificationService(self.ctx).fan_out_to_team(
            team_id,
            "invite",
            "New team invite",
            f"{email} was invited to the team.",
            {"invite_id": invite["id"], "email": email},
        )
        logger.info(f"Invited {email} to team {team_id} as {invite_data.role}")
        return InviteCreatedResponse(invite_id=invite["id"], code=invite["code"], token=invite["token"])

    def list_team_invites(self, team_id: str) -> List[InviteResponse]:
        require_admin(self.supabase, team_id, self.ctx.user_id)
        result = self.supabase.table("team_invites")\
            .select("*")\
            .eq("team_id", team_id)\
            .order("created_at", desc=True)\
            .execute()
        return [InviteResponse(**invite) for invite in (result.data or [])]

    def list_invites_for_email(self) -> List[InviteResponse]:
        """Pending invites addressed to the caller's own email"""
        if not self.ctx.email:
            return []
        result = self.supabase.table("team_invites")\
            .select("*")\
            .eq("email", normalize_email(self.ctx.email))\
            .eq("status", "pending")\
            .order("created_at", desc=True)\
            .execute()
        return [InviteResponse(**invite) for invite in (result.data or [])]

    def _redeem(self, invite: Optional[Dict[str, Any]]) -> str:
        if not invite or invite["status"] != "pending" or is_expired(invite.get("expires_at")):
            raise InviteNotValid()

        claimed = self.supabase.table("team_invites")\
            .update({"status": "accepted", "accepted_by": self.ctx.user_id, "accepted_at": utc_now_iso()})\
            .eq("id", invite["id"])\
            .eq("status", "pending")\
            .execute()
        if not claimed.data:
            raise InviteNotValid()

        team_id = invite["team_id"]
        try:
            add_membership(self.supabase, team_id, self.ctx.user_id, invite["role"])
        except Exception:
            logger.warning(f"Membership insert failed, returning invite {invite['id']} to pending")
            self.supabase.table("team_invites")\
                .update({"status": "pending", "accepted_by": None, "accepted_at": None})\
                .eq("id", invite["id"])\
                .execute()
            raise

        NotificationService(self.ctx).fan_out_to_team(
            team_id,
            "team",
            "New team member",
            "A new member joined the team.",
            {"invite_id": invite["id"], "user_id": self.ctx.user_id},
        )
        logger.info(f"{self.ctx.user_id} accepted invite {invite['id']} to team {team_id}")
        return team_id

    def accept_invite_by_token(self, token: str) -> str:
        """Redeem a single-use invite token. Returns the team id."""
        return self._redeem(self._get_invite("token", (token or "").strip()))

    def accept_invite_by_code(self, code: str) -> str:
        """Join with a team invite code, or redeem a per-invite code. Returns the team id."""
        code = normalize_code(code)
        if not code:
            raise InviteNotValid()

        team = self._team_by_code(code)
        if team:
            add_membership(self.supabase, team["id"], self.ctx.user_id, "member")
            return team["id"]

        result = self.supabase.table("team_invites")\
            .select("*")\
            .eq("code", code)\
            .eq("status", "pending")\
            .order("created_at", desc=True)\
            .limit(1)\
            .execute()
        return self._redeem(result.data[0] if result.data else None)

    def revoke_invite(self, invite_id: str) -> InviteResponse:
        """Revoke a pending invite (admin only)"""
        invite = self._get_invite("id", invite_id)
        if not invite:
            raise NotFoundOrUnauthorized("Invite not found")
        require_admin(self.supabase, invite["team_id"], self.ctx.user_id)
        if invite["status"] == "revoked":
            return InviteResponse(**invite)
        if invite["status"] != "pending":
            raise ValidationError("Only pending invites can be revoked")

        result = self.supabase.table("team_invites")\
            .update({"status": "revoked"})\
            .eq("id", invite_id)\
            .eq("status", "pending")\
            .execute()
        if not result.data:
            raise ValidationError("Only pending invites can be revoked")
        logger.info(f"Revoked invite {invite_id} of team {invite['team_id']}")
        return InviteResponse(**result.data[0])
