"""Routes for the caller's notification inbox."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from ...deps import CurrentIdentityDependency, NotificationManagerDependency
from ...errors import unwrap
from ...schemas import MarkAllReadResponse, NotificationRead, UnreadCountResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])

LimitQuery = Annotated[
    int | None,
    Query(ge=1, le=200, description="Maximum number of notifications to return."),
]


@router.get("/", response_model=list[NotificationRead], summary="List own notifications, newest first")
async def list_notifications(
    identity: CurrentIdentityDependency,
    manager: NotificationManagerDependency,
    limit: LimitQuery = None,
) -> list[NotificationRead]:
    return [NotificationRead.model_validate(item) for item in await manager.list(identity, limit)]


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Count unread notifications")
async def count_unread(
    identity: CurrentIdentityDependency,
    manager: NotificationManagerDependency,
) -> UnreadCountResponse:
    return UnreadCountResponse(unread=await manager.unread_count(identity))


@router.post("/read-all", response_model=MarkAllReadResponse, summary="Mark every notification as read")
async def mark_all_read(
    identity: CurrentIdentityDependency,
    manager: NotificationManagerDependency,
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=unwrap(await manager.mark_all_read(identity)))


@router.post("/{notification_id}/read", response_model=NotificationRead, summary="Mark a notification as read")
async def mark_read(
    notification_id: str,
    identity: CurrentIdentityDependency,
    manager: NotificationManagerDependency,
) -> NotificationRead:
    return NotificationRead.model_validate(unwrap(await manager.mark_read(identity, notification_id)))


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a notification",
)
async def delete_notification(
    notification_id: str,
    identity: CurrentIdentityDependency,
    manager: NotificationManagerDependency,
) -> Response:
    unwrap(await manager.delete(identity, notification_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
