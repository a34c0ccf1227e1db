"""Task operations with policy checks, visibility and assignment notices."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from ..db.changes import ChangeEvent, Subscription
from ..db.store import EntityStore, RecordNotFoundError, StoreError
from ..models import EntityKind, Project, Task, TaskStatus, utcnow
from ..policy import (
    Action,
    Identity,
    can_perform,
    has_full_visibility,
    owned_project_ids,
    task_visible,
    visible_tasks,
)
from ..results import Result
from ..schemas import AssigneesPayload, TaskCreate, TaskFilters, TaskStatistics, TaskUpdate
from .base import BaseManager, parse_payload
from .filters import apply_task_filters
from .notifications import Notifier

logger = logging.getLogger(__name__)

TaskListener = Callable[[list[Task]], Awaitable[None]]


class TaskManager(BaseManager):
    """High-level operations on ``Task`` records for a given identity."""

    kind = EntityKind.TASK
    label = "Task"

    def __init__(self, store: EntityStore, notifier: Notifier | None = None) -> None:
        super().__init__(store)
        self._notifier = notifier

    async def _visible_task(self, identity: Identity, task_id: str) -> Task | None:
        task = await self._store.get(self.kind, task_id)
        if task is None or has_full_visibility(identity):
            return task
        parents: list[Project] = []
        if task.project_id is not None:
            project = await self._store.get(EntityKind.PROJECT, task.project_id)
            if project is not None:
                parents.append(project)
        owned = owned_project_ids(identity, parents)
        return task if task_visible(identity, task, owned) else None

    async def _visible_tasks(self, identity: Identity) -> list[Task]:
        tasks = await self._store.query_all(self.kind)
        if has_full_visibility(identity):
            return list(tasks)
        projects = await self._store.query_all(EntityKind.PROJECT)
        return visible_tasks(identity, tasks, projects)

    async def _notify_assignees(self, identity: Identity, task: Task, user_ids: Iterable[str]) -> None:
        if self._notifier is None:
            return
        for user_id in user_ids:
            if user_id == identity.user_id:
                continue
            outcome = await self._notifier.notify(
                user_id,
                "New task assignment",
                f'You have been assigned to "{task.title}".',
                link=f"/tasks/{task.id}",
            )
            if not outcome.success:
                logger.warning(
                    "Assignment notification was not delivered",
                    extra={"entity_id": task.id, "recipient_id": user_id, "reason": outcome.error},
                )

    async def create(
        self,
        identity: Identity,
        data: TaskCreate | Mapping[str, Any],
    ) -> Result[Task]:
        """Create a task owned by ``identity``; any role may create tasks."""

        try:
            payload = parse_payload(TaskCreate, data)
        except ValidationError as exc:
            return self._invalid(exc)
        if not can_perform(identity, Action.CREATE, self.kind):
            return self._deny(identity, Action.CREATE)

        now = utcnow()
        task = Task(**payload.model_dump(), created_by=identity.user_id, created_at=now, updated_at=now)
        try:
            created = await self._store.insert(self.kind, task)
        except StoreError as exc:
            return self._store_failure("create", exc)

        self._log_mutation("created", identity, created.id)
        await self._notify_assignees(identity, created, created.assignees)
        return Result.ok(created)

    async def update(
        self,
        identity: Identity,
        task_id: str,
        patch: TaskUpdate | Mapping[str, Any],
    ) -> Result[dict[str, Any]]:
        """Apply ``patch`` to a visible task and return the changes written."""

        try:
            payload = parse_payload(TaskUpdate, patch)
        except ValidationError as exc:
            return self._invalid(exc)
        changes = payload.changes()

        try:
            task = await self._visible_task(identity, task_id)
            if task is None:
                return self._missing(task_id)
            if not can_perform(identity, Action.UPDATE, self.kind, task, changes=changes):
                return self._deny(identity, Action.UPDATE)
            previous = set(task.assignees or ())
            changes["updated_at"] = utcnow()
            updated = await self._store.patch(self.kind, task_id, changes)
        except RecordNotFoundError:
            return self._missing(task_id)
        except StoreError as exc:
            return self._store_failure("update", exc)

        self._log_mutation("updated", identity, task_id)
        if "assignees" in changes:
            added = [user_id for user_id in changes["assignees"] if user_id not in previous]
            await self._notify_assignees(identity, updated, added)
        return Result.ok(changes)

    async def delete(self, identity: Identity, task_id: str) -> Result[None]:
        if not can_perform(identity, Action.DELETE, self.kind):
            return self._deny(identity, Action.DELETE)
        try:
            if await self._store.get(self.kind, task_id) is None:
                return self._missing(task_id)
            await self._store.remove(self.kind, task_id)
        except RecordNotFoundError:
            return self._missing(task_id)
        except StoreError as exc:
            return self._store_failure("delete", exc)
        self._log_mutation("deleted", identity, task_id)
        return Result.ok(None)

    async def get_by_id(self, identity: Identity, task_id: str) -> Task | None:
        """Return the task, or ``None`` when it is absent or hidden from ``identity``."""

        try:
            return await self._visible_task(identity, task_id)
        except StoreError as exc:
            self._log_read_failure("get_by_id", exc)
            return None

    async def set_active(self, identity: Identity, task_id: str) -> Task | None:
        return await self.get_by_id(identity, task_id)

    async def list(
        self,
        identity: Identity,
        filters: TaskFilters | Mapping[str, Any] | None = None,
    ) -> list[Task]:
        """Return the visible tasks narrowed by ``filters``, in store order."""

        try:
            criteria = parse_payload(TaskFilters, filters) if filters is not None else None
        except ValidationError as exc:
            self._invalid(exc)
            return []
        try:
            tasks = await self._visible_tasks(identity)
        except StoreError as exc:
            self._log_read_failure("list", exc)
            return []
        return apply_task_filters(identity, tasks, criteria)

    async def _change_assignees(
        self,
        identity: Identity,
        task_id: str,
        user_ids: Iterable[str],
        *,
        add: bool,
    ) -> Result[dict[str, Any]]:
        try:
            payload = AssigneesPayload.model_validate({"user_ids": list(user_ids)})
        except ValidationError as exc:
            return self._invalid(exc)
        try:
            task = await self._visible_task(identity, task_id)
        except StoreError as exc:
            return self._store_failure("update", exc)
        if task is None:
            return self._missing(task_id)
        current = set(task.assignees or ())
        requested = set(payload.user_ids)
        assignees = current | requested if add else current - requested
        return await self.update(identity, task_id, {"assignees": sorted(assignees)})

    async def assign(self, identity: Identity, task_id: str, user_ids: Iterable[str]) -> Result[dict[str, Any]]:
        return await self._change_assignees(identity, task_id, user_ids, add=True)

    async def unassign(self, identity: Identity, task_id: str, user_ids: Iterable[str]) -> Result[dict[str, Any]]:
        return await self._change_assignees(identity, task_id, user_ids, add=False)

    async def statistics(
        self,
        identity: Identity,
        filters: TaskFilters | Mapping[str, Any] | None = None,
    ) -> TaskStatistics:
        """Count the identity's visible tasks per status."""

        tasks = await self.list(identity, filters)
        counts = Counter(TaskStatus(task.status).value for task in tasks)
        by_status = {status.value: counts.get(status.value, 0) for status in TaskStatus}
        return TaskStatistics(total=len(tasks), by_status=by_status)

    async def subscribe(
        self,
        identity: Identity,
        callback: TaskListener,
        filters: TaskFilters | Mapping[str, Any] | None = None,
    ) -> Subscription:
        """Keep ``callback`` supplied with the visible, filtered task list.

        The current list is pushed before returning; afterwards every task or
        project change triggers a recomputation. Project changes matter
        because client visibility depends on project ownership.
        """

        async def _recompute(_: ChangeEvent | None = None) -> None:
            await callback(await self.list(identity, filters))

        return await self._watch((self.kind, EntityKind.PROJECT), _recompute)


__all__ = ["TaskListener", "TaskManager"]
