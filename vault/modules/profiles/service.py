from vault.core.context import RequestContext
from vault.modules.profiles.schemas import (
    ProfileUpdate, ProfileResponse, PublicProfile, SyncUserRequest, UserSearchResult
)
from vault.core.errors import NotFoundOrUnauthorized
from vault.core.ownership import utc_now_iso
from vault.core.tokens import normalize_text
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

SEARCH_LIMIT = 5


def to_public_profile(user_id: str, profile: Optional[Dict[str, Any]]) -> PublicProfile:
    """Strip a profile down to what anonymous viewers may see."""
    if not profile:
        return PublicProfile(user_id=user_id)
    return PublicProfile(
        user_id=user_id,
        name=profile.get("full_name") or profile.get("username"),
        avatar_url=profile.get("avatar_url"),
    )


class ProfileService:
    def __init__(self, ctx: RequestContext):
        self.ctx = ctx
        self.supabase = ctx.supabase

    def _find(self, user_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("profiles")\
            .select("*")\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def get_profile(self) -> ProfileResponse:
        """Get the caller's profile"""
        profile = self._find(self.ctx.user_id)
        if not profile:
            raise NotFoundOrUnauthorized("Profile not found")
        return ProfileResponse(**profile)

    def update_profile(self, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update profile fields, creating the profile when missing"""
        try:
            update_data = profile_data.model_dump(exclude_unset=True)
            existing = self._find(self.ctx.user_id)
            if existing:
                if not update_data:
                    return ProfileResponse(**existing)
                update_data["updated_at"] = utc_now_iso()
                result = self.supabase.table("profiles")\
                    .update(update_data)\
                    .eq("id", existing["id"])\
                    .execute()
            else:
                result = self.supabase.table("profiles").insert({"user_id": self.ctx.user_id, **update_data}).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save profile")
            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def sync_user(self, sync_data: SyncUserRequest) -> ProfileResponse:
        """Mirror identity provider data into the profile; blank incoming names keep the stored ones"""
        try:
            existing = self._find(self.ctx.user_id)
            if existing:
                update_data = {
                    "email": sync_data.email,
                    "full_name": sync_data.full_name or existing.get("full_name"),
                    "avatar_url": sync_data.avatar_url or existing.get("avatar_url"),
                }
                if all(existing.get(k) == v for k, v in update_data.items()):
                    return ProfileResponse(**existing)
                update_data["updated_at"] = utc_now_iso()
                result = self.supabase.table("profiles")\
                    .update(update_data)\
                    .eq("id", existing["id"])\
                    .execute()
            else:
                result = self.supabase.table("profiles").insert({
                    "user_id": self.ctx.user_id,
                    "email": sync_data.email,
                    "full_name": sync_data.full_name,
                    "avatar_url": sync_data.avatar_url,
                }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to sync profile")
            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_profiles_by_user_ids(self, user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        if not user_ids:
            return {}
        result = self.supabase.table("profiles")\
            .select("*")\
            .in_("user_id", list(user_ids))\
            .execute()
        return {p["user_id"]: p for p in (result.data or [])}

    def get_public_profiles(self, user_ids: List[str]) -> List[PublicProfile]:
        profiles = self.get_profiles_by_user_ids(user_ids)
        return [to_public_profile(uid, profiles.get(uid)) for uid in user_ids]

    def search_users(self, query: str, limit: int = SEARCH_LIMIT) -> List[UserSearchResult]:
        """Look up people by email for the invite dialog. Blank queries match nobody."""
        term = normalize_text(query or "").lower().replace("%", "").replace("*", "")
        if not term:
            return []
        result = self.supabase.table("profiles")\
            .select("user_id, email, full_name, avatar_url, username")\
            .ilike("email", f"%{term}%")\
            .order("email")\
            .limit(limit)\
            .execute()
        return [UserSearchResult(**p) for p in (result.data or [])]
