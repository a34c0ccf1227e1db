"""Liveness and readiness endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...deps import StoreDependency
from ...schemas.system import HealthCheckResponse, ReadinessResponse

router = APIRouter(tags=["system"])


@router.get(
    "/healthz",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def read_health() -> HealthCheckResponse:
    return HealthCheckResponse(status="ok")


@router.get(
    "/readyz",
    response_model=ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
)
async def read_readiness(store: StoreDependency) -> ReadinessResponse:
    """Confirm the entity store answers; a ``StoreError`` renders as 503."""

    await store.ping()
    return ReadinessResponse(database=True, live_subscriptions=store.feed.listener_count())
