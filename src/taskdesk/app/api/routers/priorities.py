"""Routes for the shared priority levels."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Response, status

from ...deps import CurrentIdentityDependency, PriorityRegistryDependency
from ...errors import NotFoundError, unwrap
from ...schemas import PriorityCreate, PriorityRead, PriorityUpdate

router = APIRouter(prefix="/priorities", tags=["priorities"])


@router.get("/", response_model=list[PriorityRead], summary="List priorities, most urgent first")
async def list_priorities(
    identity: CurrentIdentityDependency,
    registry: PriorityRegistryDependency,
) -> list[PriorityRead]:
    return [PriorityRead.model_validate(item) for item in await registry.list(identity)]


@router.get("/{priority_id}", response_model=PriorityRead, summary="Retrieve a priority by id")
async def get_priority(
    priority_id: str,
    identity: CurrentIdentityDependency,
    registry: PriorityRegistryDependency,
) -> PriorityRead:
    priority = await registry.get_by_id(identity, priority_id)
    if priority is None:
        raise NotFoundError("Priority not found.")
    return PriorityRead.model_validate(priority)


@router.post(
    "/",
    response_model=PriorityRead,
    status_code=status.HTTP_201_CREATED,
    summary="Define a priority level",
)
async def create_priority(
    payload: PriorityCreate,
    identity: CurrentIdentityDependency,
    registry: PriorityRegistryDependency,
) -> PriorityRead:
    return PriorityRead.model_validate(unwrap(await registry.create(identity, payload)))


@router.patch("/{priority_id}", response_model=dict[str, Any], summary="Update a priority level")
async def update_priority(
    priority_id: str,
    payload: PriorityUpdate,
    identity: CurrentIdentityDependency,
    registry: PriorityRegistryDependency,
) -> dict[str, Any]:
    return unwrap(await registry.update(identity, priority_id, payload))


@router.delete("/{priority_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a priority level")
async def delete_priority(
    priority_id: str,
    identity: CurrentIdentityDependency,
    registry: PriorityRegistryDependency,
) -> Response:
    unwrap(await registry.delete(identity, priority_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
