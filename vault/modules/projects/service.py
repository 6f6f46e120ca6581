"""
Projects and their update history.

Every create, update and delete leaves one project_updates row so that team
activity feeds and public share pages can show what happened. A change to
notes is recorded as a note entry instead of a plain update.
"""
from vault.core.context import RequestContext
from vault.core.errors import NotFoundOrUnauthorized
from vault.core.membership import require_member
from vault.core.ownership import utc_now_iso
from vault.core.resources import Scope, ScopedResources
from vault.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectPage, ProjectUpdateEntry, UpdateType
)
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# NOT NULL columns; an explicit null in an update leaves them as stored
REQUIRED_FIELDS = ("title", "status", "progress", "priority", "color", "is_archived")


def diff_changes(current: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """{field: {from, to}} for every field whose value actually changes"""
    changes = {}
    for key, value in updates.items():
        previous = current.get(key)
        if previous != value:
            changes[key] = {"from": previous, "to": value}
    return changes


class ProjectService:
    def __init__(self, ctx: RequestContext):
        self.ctx = ctx
        self.supabase = ctx.supabase
        self.projects = ScopedResources(self.supabase, "projects", "Project not found or unauthorized")

    def _record_update(
        self,
        project: Dict[str, Any],
        type: UpdateType,
        summary: str,
        changes: Optional[Dict[str, Any]] = None
    ) -> None:
        self.supabase.table("project_updates").insert({
            "team_id": project.get("team_id"),
            "project_id": project["id"],
            "author_id": self.ctx.user_id,
            "type": type,
            "summary": summary,
            "changes": changes,
        }).execute()

    def list_projects(
        self,
        team_id: Optional[str] = None,
        cursor: Optional[str] = None,
        page_size: Optional[int] = None
    ) -> ProjectPage:
        scope = self.projects.resolve_scope(self.ctx.user_id, team_id)
        return ProjectPage(**self.projects.list_page(scope, cursor=cursor, page_size=page_size))

    def get_project(self, project_id: str) -> Optional[ProjectResponse]:
        row = self.projects.load_readable(project_id, self.ctx.user_id)
        return ProjectResponse(**row) if row else None

    def create_project(self, project_data: ProjectCreate) -> ProjectResponse:
        if project_data.team_id:
            require_member(self.supabase, project_data.team_id, self.ctx.user_id)
        try:
            row = project_data.model_dump()
            row["user_id"] = self.ctx.user_id
            if row.get("notes"):
                row["note_updated_at"] = utc_now_iso()
            result = self.supabase.table("projects").insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create project")
            project = result.data[0]
            self._record_update(
                project, "created", f'Created project "{project["title"]}"', {"title": project["title"]}
            )
            return ProjectResponse(**project)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating project for {self.ctx.user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_project(self, project_id: str, project_data: ProjectUpdate) -> ProjectResponse:
        project = self.projects.load_writable(project_id, self.ctx.user_id)
        update_data = project_data.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                del update_data[field]
        changes = diff_changes(project, update_data)
        if not changes:
            return ProjectResponse(**project)

        update_data["updated_at"] = utc_now_iso()
        if "notes" in changes:
            update_data["note_updated_at"] = update_data["updated_at"]
        result = self.supabase.table("projects")\
            .update(update_data)\
            .eq("id", project_id)\
            .execute()
        if not result.data:
            raise NotFoundOrUnauthorized(self.projects.not_found_message)

        if "notes" in changes:
            self._record_update(project, "note", f'Updated progress note for "{project["title"]}"', changes)
        else:
            self._record_update(project, "updated", f'Updated project "{project["title"]}"', changes)
        return ProjectResponse(**result.data[0])

    def delete_project(self, project_id: str) -> bool:
        project = self.projects.load_writable(project_id, self.ctx.user_id)
        self._record_update(project, "deleted", f'Deleted project "{project["title"]}"')
        result = self.supabase.table("projects").delete().eq("id", project_id).execute()
        logger.info(f"Deleted project {project_id}")
        return len(result.data or []) > 0

    def _personal_updates(self, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Untethered history of the caller's own projects plus anything the caller authored"""
        own = self.supabase.table("projects")\
            .select("id")\
            .eq("user_id", self.ctx.user_id)\
            .execute()
        project_ids = [p["id"] for p in (own.data or [])]

        def base():
            query = self.supabase.table("project_updates").select("*").is_("team_id", "null")
            for column, value in filters.items():
                query = query.eq(column, value)
            return query

        rows = base().eq("author_id", self.ctx.user_id).execute().data or []
        if project_ids:
            rows += base().in_("project_id", project_ids).execute().data or []
        return rows

    def get_project_updates(
        self,
        project_id: Optional[str] = None,
        team_id: Optional[str] = None,
        author_id: Optional[str] = None,
        type: Optional[UpdateType] = None,
        limit: Optional[int] = None
    ) -> List[ProjectUpdateEntry]:
        """Update history newest first, scoped like project reads"""
        filters: Dict[str, Any] = {}
        if author_id:
            filters["author_id"] = author_id
        if type:
            filters["type"] = type

        rows: List[Dict[str, Any]] = []
        if project_id:
            if self.projects.load_readable(project_id, self.ctx.user_id) is None:
                raise NotFoundOrUnauthorized(self.projects.not_found_message)
            query = self.supabase.table("project_updates").select("*").eq("project_id", project_id)
            if team_id:
                query = query.eq("team_id", team_id)
            for column, value in filters.items():
                query = query.eq(column, value)
            rows = query.execute().data or []
        else:
            scope: Optional[Scope] = self.projects.resolve_scope(self.ctx.user_id, team_id)
            if scope is None:
                return []
            if scope.team_id:
                query = self.supabase.table("project_updates").select("*").eq("team_id", scope.team_id)
                for column, value in filters.items():
                    query = query.eq(column, value)
                rows.extend(query.execute().data or [])
            if scope.include_legacy:
                rows.extend(self._personal_updates(filters))

        seen = set()
        ordered = []
        for row in sorted(rows, key=lambda r: r.get("created_at") or "", reverse=True):
            if row["id"] in seen:
                continue
            seen.add(row["id"])
            ordered.append(row)
        if limit:
            ordered = ordered[:limit]
        return [ProjectUpdateEntry(**row) for row in ordered]
