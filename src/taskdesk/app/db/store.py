"""Entity store: the persistence collaborator used by every manager."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import EntityKind
from ..repositories import (
    BaseRepository,
    NotificationRepository,
    PriorityRepository,
    ProjectRepository,
    TaskRepository,
    UserRepository,
)
from .changes import ChangeEvent, ChangeFeed, ChangeListener, ChangeType, Subscription, change_feed

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[list[Any]], Awaitable[None]]


class StoreError(RuntimeError):
    """Raised when the underlying storage fails to complete an operation."""


class RecordNotFoundError(StoreError):
    """Raised when a patch or removal targets a record that does not exist."""

    def __init__(self, kind: EntityKind, record_id: str) -> None:
        super().__init__(f"{kind.value} {record_id} does not exist")
        self.kind = kind
        self.record_id = record_id


@runtime_checkable
class EntityStore(Protocol):
    """Minimal persistence surface the managers rely on."""

    async def insert(self, kind: EntityKind, record: Any) -> Any:  # pragma: no cover - interface
        ...

    async def get(self, kind: EntityKind, record_id: str) -> Any | None:  # pragma: no cover - interface
        ...

    async def patch(
        self, kind: EntityKind, record_id: str, partial: Mapping[str, Any]
    ) -> Any:  # pragma: no cover - interface
        ...

    async def remove(self, kind: EntityKind, record_id: str) -> None:  # pragma: no cover - interface
        ...

    async def query_all(self, kind: EntityKind) -> list[Any]:  # pragma: no cover - interface
        ...

    def watch(
        self, kinds: Iterable[EntityKind], listener: ChangeListener
    ) -> Subscription:  # pragma: no cover - interface
        ...

    def subscribe(
        self, kind: EntityKind, listener: SnapshotListener
    ) -> Subscription:  # pragma: no cover - interface
        ...


_REPOSITORIES: dict[EntityKind, Callable[[AsyncSession], BaseRepository[Any]]] = {
    EntityKind.PROJECT: ProjectRepository,
    EntityKind.TASK: TaskRepository,
    EntityKind.USER: UserRepository,
    EntityKind.PRIORITY: PriorityRepository,
    EntityKind.NOTIFICATION: NotificationRepository,
}


class SQLModelEntityStore:
    """``EntityStore`` backed by an async SQLModel session.

    Each mutation commits on its own. SQLAlchemy faults roll the session back
    and surface as :class:`StoreError`. Committed mutations are published to
    the shared :class:`ChangeFeed`.
    """

    def __init__(self, session: AsyncSession, *, feed: ChangeFeed | None = None) -> None:
        self._session = session
        self._feed = feed if feed is not None else change_feed
        self._repositories: dict[EntityKind, BaseRepository[Any]] = {}

    @property
    def session(self) -> AsyncSession:
        return self._session

    @property
    def feed(self) -> ChangeFeed:
        return self._feed

    def repository(self, kind: EntityKind) -> BaseRepository[Any]:
        """Return the repository serving ``kind``, creating it on first use."""
        repository = self._repositories.get(kind)
        if repository is None:
            repository = _REPOSITORIES[kind](self._session)
            self._repositories[kind] = repository
        return repository

    async def _rollback_quietly(self) -> None:
        try:
            await self._session.rollback()
        except SQLAlchemyError:  # pragma: no cover - connection already gone
            logger.warning("Rollback after store failure did not complete.", exc_info=True)

    async def _fail(self, action: str, kind: EntityKind, exc: SQLAlchemyError) -> StoreError:
        await self._rollback_quietly()
        logger.error(
            "Store operation failed",
            extra={"action": action, "entity_kind": kind.value},
            exc_info=exc,
        )
        return StoreError(f"Failed to {action} {kind.value}: {exc.__class__.__name__}")

    async def ping(self) -> None:
        """Run a trivial round trip; raises :class:`StoreError` when storage is unreachable."""
        try:
            await self._session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            await self._rollback_quietly()
            raise StoreError(f"Storage ping failed: {exc.__class__.__name__}") from exc

    async def insert(self, kind: EntityKind, record: SQLModel) -> Any:
        repository = self.repository(kind)
        try:
            await repository.add(record)
            await self._session.commit()
            await repository.refresh(record)
        except SQLAlchemyError as exc:
            raise await self._fail("insert", kind, exc) from exc
        await self._feed.publish(ChangeEvent(kind, ChangeType.INSERTED, str(record.id)))  # type: ignore[attr-defined]
        return record

    async def get(self, kind: EntityKind, record_id: str) -> Any | None:
        try:
            return await self.repository(kind).get(record_id)
        except SQLAlchemyError as exc:
            raise await self._fail("read", kind, exc) from exc

    async def patch(self, kind: EntityKind, record_id: str, partial: Mapping[str, Any]) -> Any:
        repository = self.repository(kind)
        try:
            record = await repository.get(record_id)
            if record is None:
                raise RecordNotFoundError(kind, record_id)
            await repository.apply(record, partial)
            await self._session.commit()
            await repository.refresh(record)
        except SQLAlchemyError as exc:
            raise await self._fail("update", kind, exc) from exc
        await self._feed.publish(ChangeEvent(kind, ChangeType.UPDATED, record_id))
        return record

    async def remove(self, kind: EntityKind, record_id: str) -> None:
        repository = self.repository(kind)
        try:
            record = await repository.get(record_id)
            if record is None:
                raise RecordNotFoundError(kind, record_id)
            await repository.delete(record)
            await self._session.commit()
        except SQLAlchemyError as exc:
            raise await self._fail("delete", kind, exc) from exc
        await self._feed.publish(ChangeEvent(kind, ChangeType.REMOVED, record_id))

    async def query_all(self, kind: EntityKind) -> list[Any]:
        try:
            return await self.repository(kind).list()
        except SQLAlchemyError as exc:
            raise await self._fail("list", kind, exc) from exc

    def watch(self, kinds: Iterable[EntityKind], listener: ChangeListener) -> Subscription:
        """Call ``listener`` after every committed change to any of ``kinds``."""
        return self._feed.subscribe(kinds, listener)

    def subscribe(self, kind: EntityKind, listener: SnapshotListener) -> Subscription:
        """Push a fresh ``query_all(kind)`` snapshot to ``listener`` after each change."""

        async def _push_snapshot(_: ChangeEvent) -> None:
            await listener(await self.query_all(kind))

        return self._feed.subscribe((kind,), _push_snapshot)


__all__ = [
    "EntityStore",
    "RecordNotFoundError",
    "SQLModelEntityStore",
    "SnapshotListener",
    "StoreError",
]
