"""Post-visibility narrowing of task and project collections.

Each filter becomes an independent predicate and a record is kept only when
every predicate accepts it, so the order filters are listed in never changes
the outcome.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from ..models import Project, Task
from ..policy import Identity
from ..schemas import ASSIGNEE_ME, ASSIGNEE_UNASSIGNED, ProjectFilters, TaskFilters

RecordType = TypeVar("RecordType")


def _contains(needle: str, *haystacks: str | None) -> bool:
    lowered = needle.casefold()
    return any(lowered in text.casefold() for text in haystacks if text)


def task_predicates(identity: Identity, filters: TaskFilters) -> list[Callable[[Task], bool]]:
    predicates: list[Callable[[Task], bool]] = []
    if filters.status is not None:
        predicates.append(lambda task: task.status == filters.status)
    if filters.priority_id is not None:
        predicates.append(lambda task: task.priority_id == filters.priority_id)
    if filters.project_id is not None:
        predicates.append(lambda task: task.project_id == filters.project_id)
    if filters.assignee == ASSIGNEE_UNASSIGNED:
        predicates.append(lambda task: not task.assignees)
    elif filters.assignee is not None:
        assignee = identity.user_id if filters.assignee == ASSIGNEE_ME else filters.assignee
        predicates.append(lambda task: assignee in (task.assignees or ()))
    if filters.search is not None:
        needle = filters.search
        predicates.append(lambda task: _contains(needle, task.title, task.description))
    return predicates


def project_predicates(filters: ProjectFilters) -> list[Callable[[Project], bool]]:
    predicates: list[Callable[[Project], bool]] = []
    if filters.status is not None:
        predicates.append(lambda project: project.status == filters.status)
    if filters.client_id is not None:
        predicates.append(lambda project: project.client_id == filters.client_id)
    if filters.search is not None:
        needle = filters.search
        predicates.append(lambda project: _contains(needle, project.name, project.description))
    return predicates


def _keep_matching(
    records: Sequence[RecordType],
    predicates: Sequence[Callable[[RecordType], bool]],
) -> list[RecordType]:
    if not predicates:
        return list(records)
    return [record for record in records if all(predicate(record) for predicate in predicates)]


def apply_task_filters(
    identity: Identity,
    tasks: Sequence[Task],
    filters: TaskFilters | None,
) -> list[Task]:
    if filters is None:
        return list(tasks)
    return _keep_matching(tasks, task_predicates(identity, filters))


def apply_project_filters(projects: Sequence[Project], filters: ProjectFilters | None) -> list[Project]:
    if filters is None:
        return list(projects)
    return _keep_matching(projects, project_predicates(filters))


__all__ = [
    "apply_project_filters",
    "apply_task_filters",
    "project_predicates",
    "task_predicates",
]
