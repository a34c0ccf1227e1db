from __future__ import annotations

import pytest

from taskdesk.app.models import ProjectStatus, TaskStatus
from taskdesk.app.results import FORBIDDEN, NOT_FOUND, VALIDATION_ERROR
from taskdesk.app.services import ProjectManager

from .conftest import ADMIN_ID, CLIENT_ID, EMPLOYEE_ID, OTHER_CLIENT_ID

pytestmark = pytest.mark.asyncio


@pytest.fixture
def manager(store) -> ProjectManager:
    return ProjectManager(store)


async def test_employee_creates_project(manager, employee) -> None:
    result = await manager.create(employee, {"name": "Website relaunch", "client_id": CLIENT_ID})

    assert result.success
    project = result.data
    assert project.created_by == EMPLOYEE_ID
    assert project.client_id == CLIENT_ID
    assert ProjectStatus(project.status) is ProjectStatus.ACTIVE


async def test_client_cannot_create_projects(manager, client_identity) -> None:
    result = await manager.create(client_identity, {"name": "My own project"})

    assert not result.success
    assert result.code == FORBIDDEN
    assert result.error == "clients cannot create projects"


async def test_invalid_payload_is_reported_before_policy(manager, client_identity) -> None:
    result = await manager.create(client_identity, {"name": ""})

    assert result.code == VALIDATION_ERROR


async def test_only_admins_delete_projects(manager, employee, admin, seed_project, seed_task) -> None:
    await seed_project("p1")
    await seed_task("t1", project_id="p1")

    denied = await manager.delete(employee, "p1")
    assert denied.code == FORBIDDEN
    assert denied.error == "employees cannot delete projects"

    assert (await manager.delete(admin, "p1")).success
    assert await manager.get_by_id(admin, "p1") is None
    assert (await manager.delete(admin, "p1")).code == NOT_FOUND


async def test_clients_see_only_owned_projects(manager, client_identity, seed_project) -> None:
    await seed_project("p1", client_id=CLIENT_ID)
    await seed_project("p2", client_id=OTHER_CLIENT_ID)

    assert [project.id for project in await manager.list(client_identity)] == ["p1"]
    assert (await manager.get_by_id(client_identity, "p1")).id == "p1"
    assert await manager.get_by_id(client_identity, "p2") is None
    assert await manager.set_active(client_identity, "missing") is None


async def test_client_cannot_update_even_owned_project(manager, client_identity, seed_project) -> None:
    await seed_project("p1", client_id=CLIENT_ID)
    await seed_project("p2", client_id=OTHER_CLIENT_ID)

    assert (await manager.update(client_identity, "p1", {"name": "Renamed"})).code == FORBIDDEN
    assert (await manager.update(client_identity, "p2", {"name": "Renamed"})).code == NOT_FOUND


async def test_update_keeps_creator(manager, employee, seed_project) -> None:
    await seed_project("p1")

    result = await manager.update(employee, "p1", {"name": "Renamed", "created_by": EMPLOYEE_ID})

    assert result.success
    assert "created_by" not in result.data
    project = await manager.get_by_id(employee, "p1")
    assert project.name == "Renamed"
    assert project.created_by == ADMIN_ID


async def test_list_filters(manager, employee, seed_project) -> None:
    await seed_project("p1", name="Mobile app", client_id=CLIENT_ID)
    await seed_project("p2", name="Website", status=ProjectStatus.ON_HOLD)
    await seed_project("p3", name="Mobile backend", status=ProjectStatus.COMPLETED)

    assert {p.id for p in await manager.list(employee, {"search": "mobile"})} == {"p1", "p3"}
    assert [p.id for p in await manager.list(employee, {"status": "on_hold"})] == ["p2"]
    assert [p.id for p in await manager.list(employee, {"client_id": CLIENT_ID})] == ["p1"]
    assert await manager.list(employee, {"search": "mobile", "status": "on_hold"}) == []


async def test_statistics_only_count_visible_tasks(manager, client_identity, employee, seed_project, seed_task) -> None:
    await seed_project("p1", client_id=OTHER_CLIENT_ID)
    await seed_project("p2", client_id=CLIENT_ID)
    await seed_task("t1", project_id="p1", assignees=[CLIENT_ID], status=TaskStatus.COMPLETED)
    await seed_task("t2", project_id="p1")
    await seed_task("t3", project_id="p2")

    staff_reports = {report.project_id: report for report in await manager.statistics(employee)}
    assert staff_reports["p1"].total_tasks == 2
    assert staff_reports["p1"].by_status["completed"] == 1
    assert staff_reports["p2"].total_tasks == 1

    client_reports = await manager.statistics(client_identity)
    assert [report.project_id for report in client_reports] == ["p2"]
    assert client_reports[0].by_status == {
        "new": 1,
        "in_progress": 0,
        "waiting_for_client": 0,
        "completed": 0,
    }
