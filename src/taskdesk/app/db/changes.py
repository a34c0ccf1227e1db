"""Change notifications fanned out to live collection subscribers."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum

from ..models import EntityKind

logger = logging.getLogger(__name__)


class ChangeType(str, Enum):
    INSERTED = "inserted"
    UPDATED = "updated"
    REMOVED = "removed"


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A committed mutation of a single record."""

    kind: EntityKind
    change: ChangeType
    record_id: str


ChangeListener = Callable[[ChangeEvent], Awaitable[None]]


@dataclass(eq=False, slots=True)
class Subscription:
    """Handle returned to subscribers; ``unsubscribe`` is idempotent."""

    feed: "ChangeFeed"
    kinds: tuple[EntityKind, ...]
    listener: ChangeListener
    active: bool = field(default=True)

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self.feed._discard(self)


class ChangeFeed:
    """Tracks listeners per entity kind and delivers change events to them.

    Registration and removal never await, so they are safe to call from any
    coroutine on the loop without a lock.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[EntityKind, list[Subscription]] = defaultdict(list)

    def subscribe(self, kinds: Iterable[EntityKind], listener: ChangeListener) -> Subscription:
        subscription = Subscription(feed=self, kinds=tuple(dict.fromkeys(kinds)), listener=listener)
        for kind in subscription.kinds:
            self._subscriptions[kind].append(subscription)
        return subscription

    def _discard(self, subscription: Subscription) -> None:
        for kind in subscription.kinds:
            listeners = self._subscriptions.get(kind)
            if not listeners:
                continue
            if subscription in listeners:
                listeners.remove(subscription)
            if not listeners:
                self._subscriptions.pop(kind, None)

    def listener_count(self, kind: EntityKind | None = None) -> int:
        if kind is not None:
            return len(self._subscriptions.get(kind, ()))
        return len({id(sub) for subs in self._subscriptions.values() for sub in subs})

    async def publish(self, event: ChangeEvent) -> None:
        """Deliver ``event`` to every active listener of its kind."""

        for subscription in list(self._subscriptions.get(event.kind, ())):
            if not subscription.active:
                continue
            try:
                await subscription.listener(event)
            except Exception:
                logger.exception(
                    "Change listener failed",
                    extra={"entity_kind": event.kind.value, "record_id": event.record_id},
                )

    def reset(self) -> None:
        """Drop every subscription (used by tests)."""

        for subscriptions in list(self._subscriptions.values()):
            for subscription in subscriptions:
                subscription.active = False
        self._subscriptions.clear()


change_feed = ChangeFeed()

__all__ = [
    "ChangeEvent",
    "ChangeFeed",
    "ChangeListener",
    "ChangeType",
    "Subscription",
    "change_feed",
]
