"""
Read/write scoping for team-or-personal resources (items, projects).

Without a team_id the caller sees only their untethered personal rows. With a
team_id the caller must be a member; non-members get an empty result rather
than an error. The caller's own personal team additionally shows their legacy
rows, merged newest first.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from supabase import Client

from vault.core.errors import NotFoundOrUnauthorized
from vault.core.membership import get_membership
from vault.core.ownership import PersonalOwner, TeamOwner, owner_of
from vault.core.pagination import build_page, paginate_query, paginate_rows, page_window


@dataclass(frozen=True)
class Scope:
    user_id: str
    team_id: Optional[str] = None
    include_legacy: bool = True


class ScopedResources:
    def __init__(self, supabase: Client, table: str, not_found_message: str):
        self.supabase = supabase
        self.table = table
        self.not_found_message = not_found_message

    # -- authorization -------------------------------------------------

    def resolve_scope(self, user_id: str, team_id: Optional[str]) -> Optional[Scope]:
        """Scope for a read request, or None when the caller may see nothing."""
        if not team_id:
            return Scope(user_id=user_id)
        if not get_membership(self.supabase, team_id, user_id):
            return None
        team = self.supabase.table("teams")\
            .select("id, is_personal, created_by")\
            .eq("id", team_id)\
            .limit(1)\
            .execute()
        team_row = team.data[0] if team.data else None
        personal = bool(team_row and team_row.get("is_personal") and team_row.get("created_by") == user_id)
        return Scope(user_id=user_id, team_id=team_id, include_legacy=personal)

    def can_access(self, row: Dict[str, Any], user_id: Optional[str]) -> bool:
        owner = owner_of(row)
        if isinstance(owner, TeamOwner):
            return get_membership(self.supabase, owner.team_id, user_id) is not None
        if isinstance(owner, PersonalOwner):
            return owner.user_id == user_id
        raise TypeError(f"Unknown owner {owner!r}")

    def load(self, resource_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(self.table)\
            .select("*")\
            .eq("id", resource_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def load_readable(self, resource_id: str, user_id: Optional[str]) -> Optional[Dict[str, Any]]:
        row = self.load(resource_id)
        if row is None or not self.can_access(row, user_id):
            return None
        return row

    def load_writable(self, resource_id: str, user_id: Optional[str]) -> Dict[str, Any]:
        row = self.load_readable(resource_id, user_id)
        if row is None:
            raise NotFoundOrUnauthorized(self.not_found_message)
        return row

    # -- queries -------------------------------------------------------

    def _team_query(self, scope: Scope, columns: str, filters: Dict[str, Any], count: Optional[str] = None):
        query = self.supabase.table(self.table).select(columns, count=count).eq("team_id", scope.team_id)
        for column, value in filters.items():
            query = query.eq(column, value)
        return query

    def _legacy_query(self, scope: Scope, columns: str, filters: Dict[str, Any], count: Optional[str] = None):
        query = self.supabase.table(self.table)\
            .select(columns, count=count)\
            .eq("user_id", scope.user_id)\
            .is_("team_id", "null")
        for column, value in filters.items():
            query = query.eq(column, value)
        return query

    def list_page(
        self,
        scope: Optional[Scope],
        filters: Optional[Dict[str, Any]] = None,
        cursor: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> Dict[str, Any]:
        filters = filters or {}
        if scope is None:
            offset, size = page_window(cursor, page_size)
            return build_page([], offset, size)
        if scope.team_id and scope.include_legacy:
            return paginate_rows(self.list_all(scope, filters), cursor, page_size)
        if scope.team_id:
            query = self._team_query(scope, "*", filters)
        else:
            query = self._legacy_query(scope, "*", filters)
        return paginate_query(query.order("created_at", desc=True), cursor, page_size)

    def list_all(self, scope: Optional[Scope], filters: Optional[Dict[str, Any]] = None, columns: str = "*") -> List[Dict[str, Any]]:
        """Every row visible in scope, newest first, without duplicates."""
        filters = filters or {}
        if scope is None:
            return []
        rows: List[Dict[str, Any]] = []
        if scope.team_id:
            rows.extend(self._team_query(scope, columns, filters).order("created_at", desc=True).execute().data or [])
        if scope.include_legacy:
            rows.extend(self._legacy_query(scope, columns, filters).order("created_at", desc=True).execute().data or [])
        seen = set()
        merged = []
        for row in sorted(rows, key=lambda r: r.get("created_at") or "", reverse=True):
            if row["id"] in seen:
                continue
            seen.add(row["id"])
            merged.append(row)
        return merged

    def count(self, scope: Optional[Scope], filters: Optional[Dict[str, Any]] = None) -> int:
        filters = filters or {}
        if scope is None:
            return 0
        total = 0
        if scope.team_id:
            total += self._team_query(scope, "id", filters, count="exact").execute().count or 0
        if scope.include_legacy:
            total += self._legacy_query(scope, "id", filters, count="exact").execute().count or 0
        return total
