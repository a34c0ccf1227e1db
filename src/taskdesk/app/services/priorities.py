"""Registry of the globally shared task priority levels."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import ValidationError

from ..db.changes import ChangeEvent, Subscription
from ..db.store import RecordNotFoundError, StoreError
from ..models import EntityKind, Priority, utcnow
from ..policy import Action, Identity, can_perform
from ..results import Result
from ..schemas import PriorityCreate, PriorityUpdate
from .base import BaseManager, parse_payload

PriorityListener = Callable[[list[Priority]], Awaitable[None]]


class PriorityRegistry(BaseManager):
    """Admin-maintained priority levels, readable by every identity.

    Lower ``order`` means more urgent. Duplicate or sparse ``order`` values
    are accepted; listing sorts by ``order`` and then by name.
    """

    kind = EntityKind.PRIORITY
    label = "Priority"

    async def create(
        self,
        identity: Identity,
        data: PriorityCreate | Mapping[str, Any],
    ) -> Result[Priority]:
        try:
            payload = parse_payload(PriorityCreate, data)
        except ValidationError as exc:
            return self._invalid(exc)
        if not can_perform(identity, Action.CREATE, self.kind):
            return self._deny(identity, Action.CREATE)

        now = utcnow()
        priority = Priority(**payload.model_dump(), created_at=now, updated_at=now)
        try:
            created = await self._store.insert(self.kind, priority)
        except StoreError as exc:
            return self._store_failure("create", exc)
        self._log_mutation("created", identity, created.id)
        return Result.ok(created)

    async def update(
        self,
        identity: Identity,
        priority_id: str,
        patch: PriorityUpdate | Mapping[str, Any],
    ) -> Result[dict[str, Any]]:
        try:
            payload = parse_payload(PriorityUpdate, patch)
        except ValidationError as exc:
            return self._invalid(exc)
        changes = payload.changes()
        if not can_perform(identity, Action.UPDATE, self.kind):
            return self._deny(identity, Action.UPDATE)

        try:
            if await self._store.get(self.kind, priority_id) is None:
                return self._missing(priority_id)
            changes["updated_at"] = utcnow()
            await self._store.patch(self.kind, priority_id, changes)
        except RecordNotFoundError:
            return self._missing(priority_id)
        except StoreError as exc:
            return self._store_failure("update", exc)
        self._log_mutation("updated", identity, priority_id)
        return Result.ok(changes)

    async def delete(self, identity: Identity, priority_id: str) -> Result[None]:
        if not can_perform(identity, Action.DELETE, self.kind):
            return self._deny(identity, Action.DELETE)
        try:
            if await self._store.get(self.kind, priority_id) is None:
                return self._missing(priority_id)
            await self._store.remove(self.kind, priority_id)
        except RecordNotFoundError:
            return self._missing(priority_id)
        except StoreError as exc:
            return self._store_failure("delete", exc)
        self._log_mutation("deleted", identity, priority_id)
        return Result.ok(None)

    async def get_by_id(self, identity: Identity, priority_id: str) -> Priority | None:
        if not can_perform(identity, Action.VIEW, self.kind):
            return None
        try:
            return await self._store.get(self.kind, priority_id)
        except StoreError as exc:
            self._log_read_failure("get_by_id", exc)
            return None

    async def list(self, identity: Identity) -> list[Priority]:
        if not can_perform(identity, Action.VIEW, self.kind):
            return []
        try:
            return await self._store.query_all(self.kind)
        except StoreError as exc:
            self._log_read_failure("list", exc)
            return []

    async def subscribe(self, identity: Identity, callback: PriorityListener) -> Subscription:
        async def _recompute(_: ChangeEvent | None = None) -> None:
            await callback(await self.list(identity))

        return await self._watch((self.kind,), _recompute)


__all__ = ["PriorityListener", "PriorityRegistry"]
