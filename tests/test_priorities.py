from __future__ import annotations

import pytest

from taskdesk.app.results import FORBIDDEN, NOT_FOUND, VALIDATION_ERROR
from taskdesk.app.services import PriorityRegistry

pytestmark = pytest.mark.asyncio


@pytest.fixture
def registry(store) -> PriorityRegistry:
    return PriorityRegistry(store)


async def test_admin_defines_priorities(registry, admin) -> None:
    result = await registry.create(admin, {"name": "Urgent", "color": "#d32f2f", "order": 1})

    assert result.success
    assert result.data.color == "#D32F2F"
    assert result.data.order == 1


async def test_non_admins_cannot_manage_priorities(registry, employee, client_identity, admin) -> None:
    created = await registry.create(employee, {"name": "Low", "color": "#00FF00"})
    assert created.code == FORBIDDEN
    assert created.error == "employees cannot create priorities"

    urgent = (await registry.create(admin, {"name": "Urgent", "color": "#FF0000"})).data
    assert (await registry.update(client_identity, urgent.id, {"order": 3})).code == FORBIDDEN
    assert (await registry.delete(employee, urgent.id)).code == FORBIDDEN


async def test_invalid_color_is_rejected(registry, admin) -> None:
    result = await registry.create(admin, {"name": "Broken", "color": "red"})

    assert result.code == VALIDATION_ERROR


async def test_everyone_reads_priorities_most_urgent_first(registry, admin, client_identity) -> None:
    await registry.create(admin, {"name": "Low", "color": "#00FF00", "order": 3})
    await registry.create(admin, {"name": "High", "color": "#FF0000", "order": 1})
    await registry.create(admin, {"name": "Blocker", "color": "#000000", "order": 1})
    await registry.create(admin, {"name": "Medium", "color": "#FFFF00", "order": 2})

    names = [priority.name for priority in await registry.list(client_identity)]

    assert names == ["Blocker", "High", "Medium", "Low"]


async def test_update_and_delete_priority(registry, admin) -> None:
    priority = (await registry.create(admin, {"name": "Normal", "color": "#CCCCCC"})).data

    updated = await registry.update(admin, priority.id, {"name": "Routine", "order": 5})
    assert updated.success
    assert updated.data["name"] == "Routine"
    assert (await registry.get_by_id(admin, priority.id)).order == 5

    assert (await registry.delete(admin, priority.id)).success
    assert await registry.get_by_id(admin, priority.id) is None
    assert (await registry.update(admin, priority.id, {"order": 1})).code == NOT_FOUND
