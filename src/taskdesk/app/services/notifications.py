"""Per-recipient notifications and the notifier used by other managers."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from ..db.changes import ChangeEvent, Subscription
from ..db.store import EntityStore, RecordNotFoundError, StoreError
from ..models import EntityKind, Notification, as_utc, utcnow
from ..policy import Action, Identity, can_perform, visible_notifications
from ..results import Result
from ..schemas import NotificationCreate
from .base import BaseManager, parse_payload

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50

NotificationListener = Callable[[list[Notification]], Awaitable[None]]


@runtime_checkable
class Notifier(Protocol):
    """Anything able to deliver a message to a single user."""

    async def notify(
        self,
        user_id: str,
        title: str,
        content: str,
        link: str | None = None,
    ) -> Result[Notification]:  # pragma: no cover - interface
        ...


class NotificationManager(BaseManager):
    """Delivers notifications and lets recipients manage their own inbox."""

    kind = EntityKind.NOTIFICATION
    label = "Notification"

    def __init__(self, store: EntityStore, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        super().__init__(store)
        self._page_size = page_size

    async def notify(
        self,
        user_id: str,
        title: str,
        content: str,
        link: str | None = None,
    ) -> Result[Notification]:
        """Create an unread notification for ``user_id``."""

        try:
            payload = parse_payload(
                NotificationCreate,
                {"user_id": user_id, "title": title, "content": content, "link": link},
            )
        except ValidationError as exc:
            return self._invalid(exc)

        notification = Notification(**payload.model_dump(), created_at=utcnow())
        try:
            created = await self._store.insert(self.kind, notification)
        except StoreError as exc:
            return self._store_failure("notify", exc)
        self._log_mutation("delivered", None, created.id)
        return Result.ok(created)

    async def _own_notifications(self, identity: Identity) -> list[Notification]:
        records = await self._store.query_all(self.kind)
        mine = visible_notifications(identity, records)
        return sorted(mine, key=lambda item: (as_utc(item.created_at), item.id), reverse=True)

    async def list(self, identity: Identity, limit: int | None = None) -> list[Notification]:
        """Return the identity's notifications, newest first."""

        size = self._page_size if limit is None else max(limit, 0)
        try:
            mine = await self._own_notifications(identity)
        except StoreError as exc:
            self._log_read_failure("list", exc)
            return []
        return mine[:size]

    async def unread_count(self, identity: Identity) -> int:
        try:
            mine = await self._own_notifications(identity)
        except StoreError as exc:
            self._log_read_failure("unread_count", exc)
            return 0
        return sum(1 for item in mine if not item.read)

    async def _owned(self, identity: Identity, action: Action, notification_id: str) -> Notification | None:
        record = await self._store.get(self.kind, notification_id)
        if record is None or not can_perform(identity, action, self.kind, record):
            return None
        return record

    async def get_by_id(self, identity: Identity, notification_id: str) -> Notification | None:
        try:
            return await self._owned(identity, Action.VIEW, notification_id)
        except StoreError as exc:
            self._log_read_failure("get_by_id", exc)
            return None

    async def mark_read(self, identity: Identity, notification_id: str) -> Result[Notification]:
        try:
            record = await self._owned(identity, Action.UPDATE, notification_id)
            if record is None:
                return self._missing(notification_id)
            if record.read:
                return Result.ok(record)
            updated = await self._store.patch(
                self.kind,
                notification_id,
                {"read": True, "read_at": utcnow()},
            )
        except RecordNotFoundError:
            return self._missing(notification_id)
        except StoreError as exc:
            return self._store_failure("mark_read", exc)
        self._log_mutation("marked read", identity, notification_id)
        return Result.ok(updated)

    async def mark_all_read(self, identity: Identity) -> Result[int]:
        """Mark every unread notification of the identity as read."""

        marked = 0
        try:
            unread = [item for item in await self._own_notifications(identity) if not item.read]
            read_at = utcnow()
            for item in unread:
                await self._store.patch(self.kind, item.id, {"read": True, "read_at": read_at})
                marked += 1
        except StoreError as exc:
            return self._store_failure("mark_all_read", exc)
        if marked:
            logger.info(
                "Notifications marked read",
                extra={"entity_kind": self.kind.value, "actor_id": identity.user_id, "count": marked},
            )
        return Result.ok(marked)

    async def delete(self, identity: Identity, notification_id: str) -> Result[None]:
        try:
            record = await self._owned(identity, Action.DELETE, notification_id)
            if record is None:
                return self._missing(notification_id)
            await self._store.remove(self.kind, notification_id)
        except RecordNotFoundError:
            return self._missing(notification_id)
        except StoreError as exc:
            return self._store_failure("delete", exc)
        self._log_mutation("deleted", identity, notification_id)
        return Result.ok(None)

    async def subscribe(
        self,
        identity: Identity,
        callback: NotificationListener,
        limit: int | None = None,
    ) -> Subscription:
        """Push the identity's inbox now and again after every notification change."""

        async def _recompute(_: ChangeEvent | None = None) -> None:
            await callback(await self.list(identity, limit))

        return await self._watch((self.kind,), _recompute)


__all__ = ["DEFAULT_PAGE_SIZE", "NotificationManager", "Notifier"]
