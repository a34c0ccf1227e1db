from __future__ import annotations

import pytest
import pytest_asyncio

from taskdesk.app.db import StoreError
from taskdesk.app.models import TaskStatus
from taskdesk.app.policy import Identity
from taskdesk.app.results import FORBIDDEN, NOT_FOUND, STORE_ERROR, VALIDATION_ERROR
from taskdesk.app.schemas import TaskFilters
from taskdesk.app.services import NotificationManager, TaskManager, apply_task_filters

from .conftest import CLIENT_ID, EMPLOYEE_ID, OTHER_CLIENT_ID

pytestmark = pytest.mark.asyncio


@pytest.fixture
def notifications(store) -> NotificationManager:
    return NotificationManager(store)


@pytest.fixture
def manager(store, notifications) -> TaskManager:
    return TaskManager(store, notifications)


@pytest_asyncio.fixture
async def scenario(seed_project, seed_task) -> None:
    await seed_project("p1", client_id=CLIENT_ID)
    await seed_project("p2", client_id=OTHER_CLIENT_ID)
    await seed_task("t1", project_id="p1")
    await seed_task("t2", project_id="p2", assignees=[CLIENT_ID])
    await seed_task("t3", project_id="p2")


class FailingStore:
    """Store double whose every call fails like an unreachable backend."""

    async def _fail(self, *args, **kwargs):
        raise StoreError("Failed to read task: OperationalError")

    insert = get = patch = remove = query_all = _fail


async def test_create_task_records_creator_and_defaults(manager, client_identity) -> None:
    result = await manager.create(
        client_identity,
        {"title": "  Fix login page  ", "assignees": ["b", "a", "b"]},
    )

    assert result.success
    task = result.data
    assert task.title == "Fix login page"
    assert task.created_by == CLIENT_ID
    assert TaskStatus(task.status) is TaskStatus.NEW
    assert task.assignees == ["a", "b"]


async def test_create_task_rejects_blank_title(manager, employee) -> None:
    result = await manager.create(employee, {"title": "   "})

    assert not result.success
    assert result.code == VALIDATION_ERROR
    assert "Title" in result.error


async def test_client_list_matches_ownership_and_assignment(manager, client_identity, scenario) -> None:
    tasks = await manager.list(client_identity)

    assert {task.id for task in tasks} == {"t1", "t2"}


async def test_staff_list_every_task(manager, employee, admin, scenario) -> None:
    assert {task.id for task in await manager.list(employee)} == {"t1", "t2", "t3"}
    assert {task.id for task in await manager.list(admin)} == {"t1", "t2", "t3"}


async def test_absent_and_invisible_tasks_are_indistinguishable(manager, client_identity, scenario) -> None:
    assert await manager.get_by_id(client_identity, "t3") is None
    assert await manager.get_by_id(client_identity, "does-not-exist") is None
    assert (await manager.set_active(client_identity, "t1")).id == "t1"

    hidden = await manager.update(client_identity, "t3", {"title": "Peek"})
    absent = await manager.update(client_identity, "does-not-exist", {"title": "Peek"})
    assert hidden.code == absent.code == NOT_FOUND


async def test_update_returns_written_changes(manager, client_identity, scenario) -> None:
    result = await manager.update(client_identity, "t1", {"status": "in_progress"})

    assert result.success
    assert result.data["status"] is TaskStatus.IN_PROGRESS
    assert "updated_at" in result.data
    stored = await manager.get_by_id(client_identity, "t1")
    assert TaskStatus(stored.status) is TaskStatus.IN_PROGRESS


async def test_update_requires_at_least_one_field(manager, employee, scenario) -> None:
    result = await manager.update(employee, "t1", {})

    assert result.code == VALIDATION_ERROR


async def test_clients_cannot_delete_tasks(manager, client_identity, scenario) -> None:
    result = await manager.delete(client_identity, "t1")

    assert not result.success
    assert result.code == FORBIDDEN
    assert result.error == "clients cannot delete tasks"
    assert result.to_dict() == {"success": False, "error": "clients cannot delete tasks"}


async def test_employees_delete_tasks(manager, employee, scenario) -> None:
    result = await manager.delete(employee, "t3")

    assert result.success
    assert await manager.get_by_id(employee, "t3") is None
    assert (await manager.delete(employee, "t3")).code == NOT_FOUND


async def test_assign_notifies_new_assignees_only(manager, notifications, employee, client_identity, scenario) -> None:
    result = await manager.assign(employee, "t3", [CLIENT_ID, EMPLOYEE_ID])

    assert result.success
    assert result.data["assignees"] == [CLIENT_ID, EMPLOYEE_ID]
    assert await manager.get_by_id(client_identity, "t3") is not None

    inbox = await notifications.list(client_identity)
    assert len(inbox) == 1
    assert inbox[0].title == "New task assignment"
    assert inbox[0].link == "/tasks/t3"
    assert await notifications.list(employee) == []

    await manager.assign(employee, "t3", [CLIENT_ID])
    assert len(await notifications.list(client_identity)) == 1


async def test_unassign_removes_visibility(manager, employee, client_identity, scenario) -> None:
    result = await manager.unassign(employee, "t2", [CLIENT_ID])

    assert result.success
    assert result.data["assignees"] == []
    assert await manager.get_by_id(client_identity, "t2") is None


async def test_assign_rejects_empty_user_list(manager, employee, scenario) -> None:
    result = await manager.assign(employee, "t1", [])

    assert result.code == VALIDATION_ERROR


async def test_filters_commute(manager, employee, seed_task) -> None:
    await seed_task("a", status=TaskStatus.NEW, priority_id="high")
    await seed_task("b", status=TaskStatus.NEW, priority_id="low")
    await seed_task("c", status=TaskStatus.COMPLETED, priority_id="high")
    await seed_task("d", status=TaskStatus.COMPLETED, priority_id="low")

    combined = await manager.list(employee, {"status": "new", "priority_id": "high"})
    everything = await manager.list(employee)
    by_status = TaskFilters(status=TaskStatus.NEW)
    by_priority = TaskFilters(priority_id="high")
    status_first = apply_task_filters(employee, apply_task_filters(employee, everything, by_status), by_priority)
    priority_first = apply_task_filters(employee, apply_task_filters(employee, everything, by_priority), by_status)

    assert [task.id for task in combined] == ["a"]
    assert [task.id for task in status_first] == [task.id for task in priority_first] == ["a"]


async def test_assignee_and_search_filters(manager, client_identity, employee, seed_task) -> None:
    await seed_task("mine", assignees=[CLIENT_ID], title="Review invoice", description="Quarterly")
    await seed_task("nobody", title="Archive invoices")
    await seed_task("staff", assignees=[EMPLOYEE_ID], title="Deploy")

    mine = await manager.list(client_identity, {"assignee": "me"})
    unassigned = await manager.list(employee, {"assignee": "unassigned"})
    searched = await manager.list(employee, {"search": "INVOICE"})
    by_user = await manager.list(employee, {"assignee": EMPLOYEE_ID})

    assert [task.id for task in mine] == ["mine"]
    assert [task.id for task in unassigned] == ["nobody"]
    assert {task.id for task in searched} == {"mine", "nobody"}
    assert [task.id for task in by_user] == ["staff"]


async def test_invalid_filters_yield_empty_list(manager, employee, scenario) -> None:
    assert await manager.list(employee, {"status": "someday"}) == []


async def test_statistics_count_visible_tasks(manager, client_identity, scenario) -> None:
    await manager.update(client_identity, "t2", {"status": "completed"})

    stats = await manager.statistics(client_identity)

    assert stats.total == 2
    assert stats.by_status == {
        "new": 1,
        "in_progress": 0,
        "waiting_for_client": 0,
        "completed": 1,
    }


async def test_store_failures_surface_as_results(client_identity: Identity) -> None:
    manager = TaskManager(FailingStore())

    created = await manager.create(client_identity, {"title": "Anything"})
    assert created.code == STORE_ERROR
    assert "OperationalError" in created.error
    assert await manager.list(client_identity) == []
    assert await manager.get_by_id(client_identity, "t1") is None
