"""Pure visibility predicates reducing collections to what an identity may see.

These run on every upstream change of a live collection, so they stay
linear in the size of their input and never touch the store.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar

from .identity import Identity
from .rules import has_full_visibility


class ProjectLike(Protocol):
    id: str
    client_id: str | None


class TaskLike(Protocol):
    project_id: str | None
    assignees: list[str]


class RecipientLike(Protocol):
    user_id: str


P = TypeVar("P", bound=ProjectLike)
T = TypeVar("T", bound=TaskLike)
R = TypeVar("R", bound=RecipientLike)
U = TypeVar("U")


def project_visible(identity: Identity, project: ProjectLike) -> bool:
    if has_full_visibility(identity):
        return True
    return project.client_id is not None and project.client_id == identity.user_id


def owned_project_ids(identity: Identity, projects: Iterable[ProjectLike]) -> frozenset[str]:
    """Return ids of the projects whose client is ``identity``."""

    return frozenset(
        project.id
        for project in projects
        if project.client_id is not None and project.client_id == identity.user_id
    )


def task_visible(identity: Identity, task: TaskLike, owned_projects: frozenset[str]) -> bool:
    """A client sees a task it is assigned to OR whose project it owns."""

    if has_full_visibility(identity):
        return True
    if task.project_id is not None and task.project_id in owned_projects:
        return True
    return identity.user_id in (task.assignees or ())


def visible_projects(identity: Identity, projects: Sequence[P]) -> list[P]:
    return [project for project in projects if project_visible(identity, project)]


def visible_tasks(
    identity: Identity,
    tasks: Sequence[T],
    projects: Iterable[ProjectLike],
) -> list[T]:
    """Return the subset of ``tasks`` visible to ``identity``, order preserved."""

    if has_full_visibility(identity):
        return list(tasks)
    owned = owned_project_ids(identity, projects)
    return [task for task in tasks if task_visible(identity, task, owned)]


def visible_users(identity: Identity, users: Sequence[U]) -> list[U]:
    """Staff see every profile; clients cannot list other users at all."""

    if has_full_visibility(identity):
        return list(users)
    return []


def visible_notifications(identity: Identity, notifications: Sequence[R]) -> list[R]:
    return [item for item in notifications if item.user_id == identity.user_id]


__all__ = [
    "owned_project_ids",
    "project_visible",
    "task_visible",
    "visible_notifications",
    "visible_projects",
    "visible_tasks",
    "visible_users",
]
