"""Routes handling project operations."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query, Response, status

from ...deps import CurrentIdentityDependency, ProjectManagerDependency
from ...errors import NotFoundError, unwrap
from ...models import ProjectStatus
from ...schemas import ProjectCreate, ProjectFilters, ProjectRead, ProjectReport, ProjectUpdate

router = APIRouter(prefix="/projects", tags=["projects"])

StatusQuery = Annotated[
    ProjectStatus | None,
    Query(alias="status", description="Only projects in this status."),
]
ClientQuery = Annotated[
    str | None,
    Query(description="Only projects for this client id."),
]
SearchQuery = Annotated[
    str | None,
    Query(max_length=200, description="Case-insensitive text matched against name and description."),
]


@router.get("/", response_model=list[ProjectRead], summary="List visible projects")
async def list_projects(
    identity: CurrentIdentityDependency,
    manager: ProjectManagerDependency,
    status_filter: StatusQuery = None,
    client_id: ClientQuery = None,
    search: SearchQuery = None,
) -> list[ProjectRead]:
    filters = ProjectFilters(status=status_filter, client_id=client_id, search=search)
    projects = await manager.list(identity, filters)
    return [ProjectRead.model_validate(project) for project in projects]


@router.get(
    "/statistics",
    response_model=list[ProjectReport],
    summary="Task distribution per visible project",
)
async def get_project_statistics(
    identity: CurrentIdentityDependency,
    manager: ProjectManagerDependency,
) -> list[ProjectReport]:
    return await manager.statistics(identity)


@router.get("/{project_id}", response_model=ProjectRead, summary="Retrieve a project by id")
async def get_project(
    project_id: str,
    identity: CurrentIdentityDependency,
    manager: ProjectManagerDependency,
) -> ProjectRead:
    project = await manager.get_by_id(identity, project_id)
    if project is None:
        raise NotFoundError("Project not found.")
    return ProjectRead.model_validate(project)


@router.post(
    "/",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new project",
)
async def create_project(
    payload: ProjectCreate,
    identity: CurrentIdentityDependency,
    manager: ProjectManagerDependency,
) -> ProjectRead:
    project = unwrap(await manager.create(identity, payload))
    return ProjectRead.model_validate(project)


@router.patch("/{project_id}", response_model=dict[str, Any], summary="Update an existing project")
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    identity: CurrentIdentityDependency,
    manager: ProjectManagerDependency,
) -> dict[str, Any]:
    return unwrap(await manager.update(identity, project_id, payload))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a project")
async def delete_project(
    project_id: str,
    identity: CurrentIdentityDependency,
    manager: ProjectManagerDependency,
) -> Response:
    unwrap(await manager.delete(identity, project_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
