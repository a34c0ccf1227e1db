"""User profile operations, including client self-registration."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ..db.store import RecordNotFoundError, StoreError
from ..models import EntityKind, UserProfile, UserRole, new_id, utcnow
from ..policy import Action, Identity, can_perform, has_full_visibility, visible_users
from ..results import NOT_FOUND, VALIDATION_ERROR, Result
from ..schemas import UserCreate, UserRegistration, UserUpdate
from .base import BaseManager, parse_payload

logger = logging.getLogger(__name__)

_STAFF_ROLES = (UserRole.ADMIN, UserRole.EMPLOYEE)


class UserManager(BaseManager):
    """High-level operations on ``UserProfile`` records."""

    kind = EntityKind.USER
    label = "User"

    async def _email_taken(self, email: str, *, exclude_id: str | None = None) -> bool:
        lowered = email.casefold()
        for profile in await self._store.query_all(self.kind):
            if profile.id != exclude_id and profile.email.casefold() == lowered:
                return True
        return False

    async def _insert_profile(
        self,
        identity: Identity | None,
        profile: UserProfile,
    ) -> Result[UserProfile]:
        try:
            if await self._store.get(self.kind, profile.id) is not None:
                return Result.fail(f"User profile {profile.id} already exists", VALIDATION_ERROR)
            if await self._email_taken(profile.email):
                return Result.fail(f"Email {profile.email} is already registered", VALIDATION_ERROR)
            created = await self._store.insert(self.kind, profile)
        except StoreError as exc:
            return self._store_failure("create", exc)
        self._log_mutation("created", identity, created.id)
        return Result.ok(created)

    async def create(
        self,
        identity: Identity,
        data: UserCreate | Mapping[str, Any],
    ) -> Result[UserProfile]:
        """Create a profile of any role; administrators only."""

        try:
            payload = parse_payload(UserCreate, data)
        except ValidationError as exc:
            return self._invalid(exc)
        if not can_perform(identity, Action.CREATE, self.kind):
            return self._deny(identity, Action.CREATE)

        now = utcnow()
        values = payload.model_dump(exclude={"id"})
        profile = UserProfile(id=payload.id or new_id(), **values, created_at=now, updated_at=now)
        return await self._insert_profile(identity, profile)

    async def register(
        self,
        user_id: str,
        data: UserRegistration | Mapping[str, Any],
    ) -> Result[UserProfile]:
        """Create the ``client`` profile for a freshly authenticated subject.

        This is the only path that creates a profile without an acting
        identity, and it can never grant a staff role.
        """

        try:
            payload = parse_payload(UserRegistration, data)
        except ValidationError as exc:
            return self._invalid(exc)
        if not user_id or not user_id.strip():
            return Result.fail("A subject identifier is required to register", VALIDATION_ERROR)

        now = utcnow()
        profile = UserProfile(
            id=user_id.strip(),
            **payload.model_dump(),
            role=UserRole.CLIENT,
            created_at=now,
            updated_at=now,
        )
        return await self._insert_profile(None, profile)

    async def update(
        self,
        identity: Identity,
        user_id: str,
        patch: UserUpdate | Mapping[str, Any],
    ) -> Result[dict[str, Any]]:
        """Update a profile; role changes always require an administrator."""

        try:
            payload = parse_payload(UserUpdate, patch)
        except ValidationError as exc:
            return self._invalid(exc)
        changes = payload.changes()

        try:
            target = await self._store.get(self.kind, user_id)
            if target is None or not can_perform(identity, Action.VIEW, self.kind, target):
                return self._missing(user_id)
            if not can_perform(identity, Action.UPDATE, self.kind, target, changes=changes):
                return self._deny(identity, Action.UPDATE)
            email = changes.get("email")
            if email is not None and await self._email_taken(str(email), exclude_id=user_id):
                return Result.fail(f"Email {email} is already registered", VALIDATION_ERROR)
            changes["updated_at"] = utcnow()
            await self._store.patch(self.kind, user_id, changes)
        except RecordNotFoundError:
            return self._missing(user_id)
        except StoreError as exc:
            return self._store_failure("update", exc)
        self._log_mutation("updated", identity, user_id)
        return Result.ok(changes)

    async def delete(self, identity: Identity, user_id: str) -> Result[None]:
        if not can_perform(identity, Action.DELETE, self.kind):
            return self._deny(identity, Action.DELETE)
        try:
            if await self._store.get(self.kind, user_id) is None:
                return self._missing(user_id)
            await self._store.remove(self.kind, user_id)
        except RecordNotFoundError:
            return self._missing(user_id)
        except StoreError as exc:
            return self._store_failure("delete", exc)
        self._log_mutation("deleted", identity, user_id)
        return Result.ok(None)

    async def get_by_id(self, identity: Identity, user_id: str) -> UserProfile | None:
        """Staff may look up anyone; everybody may look up themselves."""

        try:
            profile = await self._store.get(self.kind, user_id)
        except StoreError as exc:
            self._log_read_failure("get_by_id", exc)
            return None
        if profile is None or not can_perform(identity, Action.VIEW, self.kind, profile):
            return None
        return profile

    async def list(self, identity: Identity, role: UserRole | str | None = None) -> list[UserProfile]:
        """Return every profile for staff, optionally one role only; clients get nothing."""

        if not has_full_visibility(identity):
            return []
        try:
            profiles = visible_users(identity, await self._store.query_all(self.kind))
        except StoreError as exc:
            self._log_read_failure("list", exc)
            return []
        if role is None:
            return profiles
        try:
            wanted = UserRole(role)
        except ValueError:
            logger.info("Rejected unknown role filter", extra={"entity_kind": self.kind.value, "reason": str(role)})
            return []
        return [profile for profile in profiles if UserRole(profile.role) is wanted]

    async def list_by_role(self, identity: Identity, role: UserRole | str) -> list[UserProfile]:
        return await self.list(identity, role)

    async def list_clients(self, identity: Identity) -> list[UserProfile]:
        return await self.list(identity, UserRole.CLIENT)

    async def list_staff(self, identity: Identity) -> list[UserProfile]:
        """Employees and administrators, e.g. for assignee pickers."""

        profiles = await self.list(identity)
        return [profile for profile in profiles if UserRole(profile.role) in _STAFF_ROLES]

    async def resolve_identity(self, user_id: str) -> Result[Identity]:
        """Turn an authenticated subject into an ``Identity`` using its stored role."""

        try:
            profile = await self._store.get(self.kind, user_id)
        except StoreError as exc:
            return self._store_failure("resolve_identity", exc)
        if profile is None:
            return Result.fail(f"No profile registered for {user_id}", NOT_FOUND)
        return Result.ok(Identity.of(profile.id, profile.role))


__all__ = ["UserManager"]
