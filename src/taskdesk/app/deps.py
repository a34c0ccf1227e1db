"""Reusable FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from .core.config import Settings, get_settings
from .core.context import bind_actor_id
from .core.security import InvalidTokenError, TokenClaims, decode_access_token
from .db.session import get_session
from .db.store import SQLModelEntityStore
from .errors import StoreUnavailableError, UnauthorizedError
from .policy import Identity
from .results import STORE_ERROR
from .services import NotificationManager, PriorityRegistry, ProjectManager, TaskManager, UserManager

SettingsDependency = Annotated[Settings, Depends(get_settings)]

_bearer_scheme = HTTPBearer(auto_error=False, description="Token issued by the identity provider")


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields a database session."""

    async for session in get_session():
        yield session


DatabaseSessionDependency = Annotated[AsyncSession, Depends(get_db_session)]


def get_store(session: DatabaseSessionDependency) -> SQLModelEntityStore:
    return SQLModelEntityStore(session)


StoreDependency = Annotated[SQLModelEntityStore, Depends(get_store)]


def get_token_claims(
    settings: SettingsDependency,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> TokenClaims:
    """Return the verified claims of the request's bearer token."""

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("Not authenticated.")
    try:
        return decode_access_token(credentials.credentials, settings)
    except InvalidTokenError as exc:
        raise UnauthorizedError() from exc


TokenClaimsDependency = Annotated[TokenClaims, Depends(get_token_claims)]


def get_user_manager(store: StoreDependency) -> UserManager:
    return UserManager(store)


UserManagerDependency = Annotated[UserManager, Depends(get_user_manager)]


async def get_current_identity(
    claims: TokenClaimsDependency,
    users: UserManagerDependency,
) -> Identity:
    """Resolve the caller's identity from its stored profile and role."""

    resolved = await users.resolve_identity(claims.sub)
    if resolved.success and resolved.data is not None:
        bind_actor_id(resolved.data.user_id)
        return resolved.data
    if resolved.code == STORE_ERROR:
        raise StoreUnavailableError()
    raise UnauthorizedError("No profile is registered for this account.")


CurrentIdentityDependency = Annotated[Identity, Depends(get_current_identity)]


def get_notification_manager(store: StoreDependency, settings: SettingsDependency) -> NotificationManager:
    return NotificationManager(store, page_size=settings.notification_page_size)


NotificationManagerDependency = Annotated[NotificationManager, Depends(get_notification_manager)]


def get_task_manager(store: StoreDependency, notifier: NotificationManagerDependency) -> TaskManager:
    return TaskManager(store, notifier)


def get_project_manager(store: StoreDependency) -> ProjectManager:
    return ProjectManager(store)


def get_priority_registry(store: StoreDependency) -> PriorityRegistry:
    return PriorityRegistry(store)


TaskManagerDependency = Annotated[TaskManager, Depends(get_task_manager)]
ProjectManagerDependency = Annotated[ProjectManager, Depends(get_project_manager)]
PriorityRegistryDependency = Annotated[PriorityRegistry, Depends(get_priority_registry)]


__all__ = [
    "CurrentIdentityDependency",
    "DatabaseSessionDependency",
    "NotificationManagerDependency",
    "PriorityRegistryDependency",
    "ProjectManagerDependency",
    "SettingsDependency",
    "StoreDependency",
    "TaskManagerDependency",
    "TokenClaimsDependency",
    "UserManagerDependency",
    "get_current_identity",
    "get_db_session",
    "get_store",
    "get_token_claims",
]
