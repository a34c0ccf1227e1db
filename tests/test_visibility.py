from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from taskdesk.app.models import UserRole
from taskdesk.app.policy import (
    Identity,
    owned_project_ids,
    visible_notifications,
    visible_projects,
    visible_tasks,
    visible_users,
)


@dataclass
class ProjectStub:
    id: str
    client_id: str | None = None


@dataclass
class TaskStub:
    id: str
    project_id: str | None = None
    assignees: list[str] = field(default_factory=list)


@dataclass
class NotificationStub:
    id: str
    user_id: str


PROJECTS = [
    ProjectStub("p1", client_id="u1"),
    ProjectStub("p2", client_id="u2"),
    ProjectStub("p3"),
]
TASKS = [
    TaskStub("t1", project_id="p1"),
    TaskStub("t2", project_id="p2", assignees=["u1"]),
    TaskStub("t3", project_id="p2"),
    TaskStub("t4"),
    TaskStub("t5", project_id="missing", assignees=["u1", "u3"]),
]

U1 = Identity.of("u1", UserRole.CLIENT)
STAFF = [Identity.of("a1", UserRole.ADMIN), Identity.of("e1", UserRole.EMPLOYEE)]


def _ids(records) -> list[str]:
    return [record.id for record in records]


def test_client_sees_owned_project_tasks_or_assigned_tasks() -> None:
    visible = visible_tasks(U1, TASKS[:3], PROJECTS)

    assert _ids(visible) == ["t1", "t2"]


def test_assignment_grants_visibility_even_for_dangling_projects() -> None:
    assert "t5" in _ids(visible_tasks(U1, TASKS, PROJECTS))


def test_client_sees_only_its_own_projects() -> None:
    assert _ids(visible_projects(U1, PROJECTS)) == ["p1"]
    assert owned_project_ids(U1, PROJECTS) == frozenset({"p1"})


@pytest.mark.parametrize("identity", STAFF)
def test_staff_see_everything(identity: Identity) -> None:
    assert _ids(visible_projects(identity, PROJECTS)) == _ids(PROJECTS)
    assert _ids(visible_tasks(identity, TASKS, PROJECTS)) == _ids(TASKS)


@pytest.mark.parametrize("identity", [U1, Identity.of("u2", UserRole.CLIENT), *STAFF])
def test_visible_collections_are_ordered_subsets(identity: Identity) -> None:
    tasks = visible_tasks(identity, TASKS, PROJECTS)
    projects = visible_projects(identity, PROJECTS)

    assert all(task in TASKS for task in tasks)
    assert all(project in PROJECTS for project in projects)
    assert _ids(tasks) == [task.id for task in TASKS if task in tasks]


def test_client_without_projects_or_assignments_sees_nothing() -> None:
    stranger = Identity.of("nobody", UserRole.CLIENT)

    assert visible_tasks(stranger, TASKS, PROJECTS) == []
    assert visible_projects(stranger, PROJECTS) == []


def test_unowned_projects_are_not_visible_to_clients() -> None:
    orphan_task = TaskStub("t6", project_id="p3")

    assert visible_tasks(U1, [orphan_task], PROJECTS) == []


def test_users_are_hidden_from_clients() -> None:
    users = ["u1", "u2", "e1"]

    assert visible_users(U1, users) == []
    assert visible_users(STAFF[1], users) == users


def test_notifications_are_limited_to_the_recipient() -> None:
    notifications = [NotificationStub("n1", "u1"), NotificationStub("n2", "e1"), NotificationStub("n3", "u1")]

    assert _ids(visible_notifications(U1, notifications)) == ["n1", "n3"]
    assert visible_notifications(STAFF[0], notifications) == []
