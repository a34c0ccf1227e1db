from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from taskdesk.app.models import EntityKind, Notification
from taskdesk.app.results import NOT_FOUND, VALIDATION_ERROR
from taskdesk.app.services import NotificationManager, Notifier

from .conftest import CLIENT_ID, EMPLOYEE_ID

pytestmark = pytest.mark.asyncio

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def manager(store) -> NotificationManager:
    return NotificationManager(store, page_size=2)


async def _seed_inbox(store, user_id: str, count: int) -> None:
    for index in range(count):
        notification = Notification(
            id=f"{user_id}-n{index}",
            user_id=user_id,
            title=f"Message {index}",
            content="Hello",
            created_at=BASE_TIME + timedelta(minutes=index),
        )
        await store.insert(EntityKind.NOTIFICATION, notification)


async def test_notification_manager_is_a_notifier(manager) -> None:
    assert isinstance(manager, Notifier)


async def test_notify_creates_unread_message(manager, client_identity) -> None:
    result = await manager.notify(CLIENT_ID, "Welcome", "Your account is ready.", link="/profile")

    assert result.success
    assert result.data.read is False
    assert result.data.read_at is None
    assert await manager.unread_count(client_identity) == 1


async def test_notify_rejects_blank_content(manager) -> None:
    result = await manager.notify(CLIENT_ID, "Title", "   ")

    assert result.code == VALIDATION_ERROR


async def test_list_is_newest_first_and_paged(manager, store, client_identity, employee) -> None:
    await _seed_inbox(store, CLIENT_ID, 3)
    await _seed_inbox(store, EMPLOYEE_ID, 1)

    assert [item.id for item in await manager.list(client_identity)] == ["client-1-n2", "client-1-n1"]
    assert [item.id for item in await manager.list(client_identity, limit=5)] == [
        "client-1-n2",
        "client-1-n1",
        "client-1-n0",
    ]
    assert [item.id for item in await manager.list(employee)] == ["employee-1-n0"]


async def test_mark_read_is_limited_to_recipient(manager, store, client_identity, employee) -> None:
    await _seed_inbox(store, CLIENT_ID, 1)

    assert (await manager.mark_read(employee, "client-1-n0")).code == NOT_FOUND
    assert await manager.get_by_id(employee, "client-1-n0") is None

    marked = await manager.mark_read(client_identity, "client-1-n0")
    assert marked.success
    assert marked.data.read is True
    assert marked.data.read_at is not None
    assert await manager.unread_count(client_identity) == 0

    again = await manager.mark_read(client_identity, "client-1-n0")
    assert again.success


async def test_mark_all_read(manager, store, client_identity, employee) -> None:
    await _seed_inbox(store, CLIENT_ID, 3)
    await _seed_inbox(store, EMPLOYEE_ID, 2)
    await manager.mark_read(client_identity, "client-1-n0")

    result = await manager.mark_all_read(client_identity)

    assert result.success
    assert result.data == 2
    assert await manager.unread_count(client_identity) == 0
    assert await manager.unread_count(employee) == 2


async def test_delete_own_notification(manager, store, client_identity, employee) -> None:
    await _seed_inbox(store, CLIENT_ID, 1)

    assert (await manager.delete(employee, "client-1-n0")).code == NOT_FOUND
    assert (await manager.delete(client_identity, "client-1-n0")).success
    assert await manager.list(client_identity) == []
