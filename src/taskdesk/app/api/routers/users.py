"""Routes handling user profiles and client self-registration."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query, Response, status

from ...deps import CurrentIdentityDependency, TokenClaimsDependency, UserManagerDependency
from ...errors import NotFoundError, unwrap
from ...models import UserRole
from ...schemas import UserCreate, UserRead, UserRegistration, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])

RoleQuery = Annotated[
    UserRole | None,
    Query(description="Only profiles holding this role."),
]


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create the caller's client profile",
)
async def register_profile(
    payload: UserRegistration,
    claims: TokenClaimsDependency,
    manager: UserManagerDependency,
) -> UserRead:
    """Sign-up for an authenticated subject that has no profile yet."""
    profile = unwrap(await manager.register(claims.sub, payload))
    return UserRead.model_validate(profile)


@router.get("/me", response_model=UserRead, summary="Return the caller's profile")
async def read_own_profile(
    identity: CurrentIdentityDependency,
    manager: UserManagerDependency,
) -> UserRead:
    profile = await manager.get_by_id(identity, identity.user_id)
    if profile is None:
        raise NotFoundError("User not found.")
    return UserRead.model_validate(profile)


@router.get("/", response_model=list[UserRead], summary="List user profiles")
async def list_users(
    identity: CurrentIdentityDependency,
    manager: UserManagerDependency,
    role: RoleQuery = None,
) -> list[UserRead]:
    profiles = await manager.list(identity, role)
    return [UserRead.model_validate(profile) for profile in profiles]


@router.get("/clients", response_model=list[UserRead], summary="List client profiles")
async def list_clients(
    identity: CurrentIdentityDependency,
    manager: UserManagerDependency,
) -> list[UserRead]:
    return [UserRead.model_validate(profile) for profile in await manager.list_clients(identity)]


@router.get("/staff", response_model=list[UserRead], summary="List employees and administrators")
async def list_staff(
    identity: CurrentIdentityDependency,
    manager: UserManagerDependency,
) -> list[UserRead]:
    return [UserRead.model_validate(profile) for profile in await manager.list_staff(identity)]


@router.get("/{user_id}", response_model=UserRead, summary="Retrieve a profile by id")
async def get_user(
    user_id: str,
    identity: CurrentIdentityDependency,
    manager: UserManagerDependency,
) -> UserRead:
    profile = await manager.get_by_id(identity, user_id)
    if profile is None:
        raise NotFoundError("User not found.")
    return UserRead.model_validate(profile)


@router.post(
    "/",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a profile (administrators only)",
)
async def create_user(
    payload: UserCreate,
    identity: CurrentIdentityDependency,
    manager: UserManagerDependency,
) -> UserRead:
    profile = unwrap(await manager.create(identity, payload))
    return UserRead.model_validate(profile)


@router.patch("/{user_id}", response_model=dict[str, Any], summary="Update a profile")
async def update_user(
    user_id: str,
    payload: UserUpdate,
    identity: CurrentIdentityDependency,
    manager: UserManagerDependency,
) -> dict[str, Any]:
    return unwrap(await manager.update(identity, user_id, payload))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a profile")
async def delete_user(
    user_id: str,
    identity: CurrentIdentityDependency,
    manager: UserManagerDependency,
) -> Response:
    unwrap(await manager.delete(identity, user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
