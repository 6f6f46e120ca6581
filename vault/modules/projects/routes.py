from fastapi import APIRouter, Depends, Query
from vault.core.context import RequestContext
from vault.core.dependencies import get_request_context
from vault.core.errors import NotFoundOrUnauthorized
from vault.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectPage, ProjectUpdateEntry, UpdateType
)
from vault.modules.projects.service import ProjectService
from typing import List, Optional

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(ctx: RequestContext = Depends(get_request_context)) -> ProjectService:
    return ProjectService(ctx)


@router.get("", response_model=ProjectPage)
async def list_projects(
    team_id: Optional[str] = None,
    cursor: Optional[str] = None,
    page_size: Optional[int] = None,
    service: ProjectService = Depends(get_project_service)
):
    return service.list_projects(team_id=team_id, cursor=cursor, page_size=page_size)


@router.get("/updates", response_model=List[ProjectUpdateEntry])
async def get_project_updates(
    project_id: Optional[str] = None,
    team_id: Optional[str] = None,
    author_id: Optional[str] = None,
    type: Optional[UpdateType] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    service: ProjectService = Depends(get_project_service)
):
    """Project activity feed, newest first"""
    return service.get_project_updates(
        project_id=project_id, team_id=team_id, author_id=author_id, type=type, limit=limit
    )


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service)
):
    project = service.get_project(project_id)
    if project is None:
        raise NotFoundOrUnauthorized("Project not found")
    return project


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    project_data: ProjectCreate,
    service: ProjectService = Depends(get_project_service)
):
    return service.create_project(project_data)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    service: ProjectService = Depends(get_project_service)
):
    return service.update_project(project_id, project_data)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service)
):
    service.delete_project(project_id)
    return {"message": "Project deleted successfully"}
