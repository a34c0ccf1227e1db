"""Routes handling task operations."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query, Response, status

from ...deps import CurrentIdentityDependency, TaskManagerDependency
from ...errors import NotFoundError, unwrap
from ...models import TaskStatus
from ...schemas import AssigneesPayload, TaskCreate, TaskFilters, TaskRead, TaskStatistics, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])

StatusQuery = Annotated[
    TaskStatus | None,
    Query(alias="status", description="Only tasks in this status."),
]
PriorityQuery = Annotated[
    str | None,
    Query(description="Only tasks with this priority id."),
]
ProjectQuery = Annotated[
    str | None,
    Query(description="Only tasks attached to this project id."),
]
AssigneeQuery = Annotated[
    str | None,
    Query(description='A user id, "me" for the caller, or "unassigned".'),
]
SearchQuery = Annotated[
    str | None,
    Query(max_length=200, description="Case-insensitive text matched against title and description."),
]


def _filters(
    status_filter: TaskStatus | None,
    priority_id: str | None,
    project_id: str | None,
    assignee: str | None,
    search: str | None,
) -> TaskFilters:
    return TaskFilters(
        status=status_filter,
        priority_id=priority_id,
        project_id=project_id,
        assignee=assignee,
        search=search,
    )


@router.get("/", response_model=list[TaskRead], summary="List visible tasks")
async def list_tasks(
    identity: CurrentIdentityDependency,
    manager: TaskManagerDependency,
    status_filter: StatusQuery = None,
    priority_id: PriorityQuery = None,
    project_id: ProjectQuery = None,
    assignee: AssigneeQuery = None,
    search: SearchQuery = None,
) -> list[TaskRead]:
    tasks = await manager.list(
        identity,
        _filters(status_filter, priority_id, project_id, assignee, search),
    )
    return [TaskRead.model_validate(task) for task in tasks]


@router.get("/statistics", response_model=TaskStatistics, summary="Count visible tasks per status")
async def get_task_statistics(
    identity: CurrentIdentityDependency,
    manager: TaskManagerDependency,
    project_id: ProjectQuery = None,
    assignee: AssigneeQuery = None,
) -> TaskStatistics:
    return await manager.statistics(identity, _filters(None, None, project_id, assignee, None))


@router.get("/{task_id}", response_model=TaskRead, summary="Retrieve a task by id")
async def get_task(
    task_id: str,
    identity: CurrentIdentityDependency,
    manager: TaskManagerDependency,
) -> TaskRead:
    task = await manager.get_by_id(identity, task_id)
    if task is None:
        raise NotFoundError("Task not found.")
    return TaskRead.model_validate(task)


@router.post(
    "/",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
)
async def create_task(
    payload: TaskCreate,
    identity: CurrentIdentityDependency,
    manager: TaskManagerDependency,
) -> TaskRead:
    task = unwrap(await manager.create(identity, payload))
    return TaskRead.model_validate(task)


@router.patch("/{task_id}", response_model=dict[str, Any], summary="Update an existing task")
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    identity: CurrentIdentityDependency,
    manager: TaskManagerDependency,
) -> dict[str, Any]:
    """Return the fields that were written, including the new ``updated_at``."""
    return unwrap(await manager.update(identity, task_id, payload))


@router.post("/{task_id}/assign", response_model=dict[str, Any], summary="Add assignees to a task")
async def assign_task(
    task_id: str,
    payload: AssigneesPayload,
    identity: CurrentIdentityDependency,
    manager: TaskManagerDependency,
) -> dict[str, Any]:
    return unwrap(await manager.assign(identity, task_id, payload.user_ids))


@router.post("/{task_id}/unassign", response_model=dict[str, Any], summary="Remove assignees from a task")
async def unassign_task(
    task_id: str,
    payload: AssigneesPayload,
    identity: CurrentIdentityDependency,
    manager: TaskManagerDependency,
) -> dict[str, Any]:
    return unwrap(await manager.unassign(identity, task_id, payload.user_ids))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a task")
async def delete_task(
    task_id: str,
    identity: CurrentIdentityDependency,
    manager: TaskManagerDependency,
) -> Response:
    unwrap(await manager.delete(identity, task_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
