"""Project operations with policy checks and client ownership visibility."""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import ValidationError

from ..db.changes import ChangeEvent, Subscription
from ..db.store import RecordNotFoundError, StoreError
from ..models import EntityKind, Project, TaskStatus, utcnow
from ..policy import Action, Identity, can_perform, project_visible, visible_projects, visible_tasks
from ..results import Result
from ..schemas import ProjectCreate, ProjectFilters, ProjectReport, ProjectUpdate
from .base import BaseManager, parse_payload
from .filters import apply_project_filters

ProjectListener = Callable[[list[Project]], Awaitable[None]]


class ProjectManager(BaseManager):
    """High-level operations on ``Project`` records for a given identity."""

    kind = EntityKind.PROJECT
    label = "Project"

    async def _visible_project(self, identity: Identity, project_id: str) -> Project | None:
        project = await self._store.get(self.kind, project_id)
        if project is None or not project_visible(identity, project):
            return None
        return project

    async def create(
        self,
        identity: Identity,
        data: ProjectCreate | Mapping[str, Any],
    ) -> Result[Project]:
        try:
            payload = parse_payload(ProjectCreate, data)
        except ValidationError as exc:
            return self._invalid(exc)
        if not can_perform(identity, Action.CREATE, self.kind):
            return self._deny(identity, Action.CREATE)

        now = utcnow()
        project = Project(**payload.model_dump(), created_by=identity.user_id, created_at=now, updated_at=now)
        try:
            created = await self._store.insert(self.kind, project)
        except StoreError as exc:
            return self._store_failure("create", exc)
        self._log_mutation("created", identity, created.id)
        return Result.ok(created)

    async def update(
        self,
        identity: Identity,
        project_id: str,
        patch: ProjectUpdate | Mapping[str, Any],
    ) -> Result[dict[str, Any]]:
        """Apply ``patch`` to a visible project and return the changes written."""

        try:
            payload = parse_payload(ProjectUpdate, patch)
        except ValidationError as exc:
            return self._invalid(exc)
        changes = payload.changes()

        try:
            project = await self._visible_project(identity, project_id)
            if project is None:
                return self._missing(project_id)
            if not can_perform(identity, Action.UPDATE, self.kind, project, changes=changes):
                return self._deny(identity, Action.UPDATE)
            changes["updated_at"] = utcnow()
            await self._store.patch(self.kind, project_id, changes)
        except RecordNotFoundError:
            return self._missing(project_id)
        except StoreError as exc:
            return self._store_failure("update", exc)
        self._log_mutation("updated", identity, project_id)
        return Result.ok(changes)

    async def delete(self, identity: Identity, project_id: str) -> Result[None]:
        """Delete a project; tasks referencing it keep their dangling ``project_id``."""

        if not can_perform(identity, Action.DELETE, self.kind):
            return self._deny(identity, Action.DELETE)
        try:
            if await self._store.get(self.kind, project_id) is None:
                return self._missing(project_id)
            await self._store.remove(self.kind, project_id)
        except RecordNotFoundError:
            return self._missing(project_id)
        except StoreError as exc:
            return self._store_failure("delete", exc)
        self._log_mutation("deleted", identity, project_id)
        return Result.ok(None)

    async def get_by_id(self, identity: Identity, project_id: str) -> Project | None:
        try:
            return await self._visible_project(identity, project_id)
        except StoreError as exc:
            self._log_read_failure("get_by_id", exc)
            return None

    async def set_active(self, identity: Identity, project_id: str) -> Project | None:
        return await self.get_by_id(identity, project_id)

    async def list(
        self,
        identity: Identity,
        filters: ProjectFilters | Mapping[str, Any] | None = None,
    ) -> list[Project]:
        try:
            criteria = parse_payload(ProjectFilters, filters) if filters is not None else None
        except ValidationError as exc:
            self._invalid(exc)
            return []
        try:
            projects = await self._store.query_all(self.kind)
        except StoreError as exc:
            self._log_read_failure("list", exc)
            return []
        return apply_project_filters(visible_projects(identity, projects), criteria)

    async def statistics(self, identity: Identity) -> list[ProjectReport]:
        """Report task totals per visible project, counting only visible tasks."""

        try:
            projects = await self._store.query_all(self.kind)
            tasks = await self._store.query_all(EntityKind.TASK)
        except StoreError as exc:
            self._log_read_failure("statistics", exc)
            return []

        per_project: dict[str, Counter[str]] = defaultdict(Counter)
        for task in visible_tasks(identity, tasks, projects):
            if task.project_id is not None:
                per_project[task.project_id][TaskStatus(task.status).value] += 1

        reports: list[ProjectReport] = []
        for project in visible_projects(identity, projects):
            counts = per_project.get(project.id, Counter())
            reports.append(
                ProjectReport(
                    project_id=project.id,
                    name=project.name,
                    status=project.status,
                    total_tasks=sum(counts.values()),
                    by_status={status.value: counts.get(status.value, 0) for status in TaskStatus},
                )
            )
        return reports

    async def subscribe(
        self,
        identity: Identity,
        callback: ProjectListener,
        filters: ProjectFilters | Mapping[str, Any] | None = None,
    ) -> Subscription:
        """Push the visible project list now and after every project change."""

        async def _recompute(_: ChangeEvent | None = None) -> None:
            await callback(await self.list(identity, filters))

        return await self._watch((self.kind,), _recompute)


__all__ = ["ProjectListener", "ProjectManager"]
