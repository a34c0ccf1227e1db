from __future__ import annotations

from types import SimpleNamespace

import pytest

from taskdesk.app.models import EntityKind, UserRole
from taskdesk.app.policy import Action, Identity, can_perform, denial_message, has_full_visibility

ADMIN = Identity.of("a1", UserRole.ADMIN)
EMPLOYEE = Identity.of("e1", UserRole.EMPLOYEE)
CLIENT = Identity.of("c1", UserRole.CLIENT)


@pytest.mark.parametrize(
    ("identity", "action", "kind", "expected"),
    [
        (ADMIN, Action.CREATE, EntityKind.PROJECT, True),
        (EMPLOYEE, Action.CREATE, EntityKind.PROJECT, True),
        (CLIENT, Action.CREATE, EntityKind.PROJECT, False),
        (EMPLOYEE, Action.UPDATE, EntityKind.PROJECT, True),
        (CLIENT, Action.UPDATE, EntityKind.PROJECT, False),
        (ADMIN, Action.DELETE, EntityKind.PROJECT, True),
        (EMPLOYEE, Action.DELETE, EntityKind.PROJECT, False),
        (CLIENT, Action.DELETE, EntityKind.PROJECT, False),
        (CLIENT, Action.CREATE, EntityKind.TASK, True),
        (CLIENT, Action.UPDATE, EntityKind.TASK, True),
        (EMPLOYEE, Action.DELETE, EntityKind.TASK, True),
        (CLIENT, Action.DELETE, EntityKind.TASK, False),
        (ADMIN, Action.CREATE, EntityKind.USER, True),
        (EMPLOYEE, Action.CREATE, EntityKind.USER, False),
        (EMPLOYEE, Action.DELETE, EntityKind.USER, False),
        (EMPLOYEE, Action.VIEW, EntityKind.USER, True),
        (CLIENT, Action.VIEW, EntityKind.USER, False),
        (ADMIN, Action.CREATE, EntityKind.PRIORITY, True),
        (EMPLOYEE, Action.UPDATE, EntityKind.PRIORITY, False),
        (CLIENT, Action.VIEW, EntityKind.PRIORITY, True),
    ],
)
def test_role_grants(identity: Identity, action: Action, kind: EntityKind, expected: bool) -> None:
    assert can_perform(identity, action, kind) is expected


def test_client_can_create_tasks_but_not_projects() -> None:
    assert can_perform(CLIENT, Action.CREATE, EntityKind.TASK)
    assert not can_perform(CLIENT, Action.CREATE, EntityKind.PROJECT)


def test_employee_deletes_tasks_only() -> None:
    assert can_perform(EMPLOYEE, Action.DELETE, EntityKind.TASK)
    assert not can_perform(EMPLOYEE, Action.DELETE, EntityKind.PROJECT)
    assert not can_perform(EMPLOYEE, Action.DELETE, EntityKind.USER)


def test_users_may_edit_and_view_their_own_profile() -> None:
    own = SimpleNamespace(id="c1", role=UserRole.CLIENT)
    other = SimpleNamespace(id="c2", role=UserRole.CLIENT)

    assert can_perform(CLIENT, Action.VIEW, EntityKind.USER, own)
    assert not can_perform(CLIENT, Action.VIEW, EntityKind.USER, other)
    assert can_perform(CLIENT, Action.UPDATE, EntityKind.USER, own, changes={"name": "New"})
    assert not can_perform(CLIENT, Action.UPDATE, EntityKind.USER, other, changes={"name": "New"})
    assert not can_perform(EMPLOYEE, Action.UPDATE, EntityKind.USER, other, changes={"name": "New"})


def test_role_changes_require_an_administrator() -> None:
    target = SimpleNamespace(id="u5", role=UserRole.CLIENT)
    own_employee = SimpleNamespace(id="e1", role=UserRole.EMPLOYEE)

    assert can_perform(ADMIN, Action.UPDATE, EntityKind.USER, target, changes={"role": "employee"})
    assert not can_perform(EMPLOYEE, Action.UPDATE, EntityKind.USER, target, changes={"role": "employee"})
    assert not can_perform(EMPLOYEE, Action.UPDATE, EntityKind.USER, own_employee, changes={"role": "admin"})
    # Re-sending the current role is not a change.
    assert can_perform(EMPLOYEE, Action.UPDATE, EntityKind.USER, own_employee, changes={"role": "employee"})


def test_notifications_are_restricted_to_their_recipient() -> None:
    mine = SimpleNamespace(user_id="c1")
    theirs = SimpleNamespace(user_id="e1")

    assert can_perform(CLIENT, Action.UPDATE, EntityKind.NOTIFICATION, mine)
    assert can_perform(CLIENT, Action.DELETE, EntityKind.NOTIFICATION, mine)
    assert not can_perform(CLIENT, Action.VIEW, EntityKind.NOTIFICATION, theirs)
    assert not can_perform(ADMIN, Action.DELETE, EntityKind.NOTIFICATION, theirs)


def test_full_visibility_is_limited_to_staff() -> None:
    assert has_full_visibility(ADMIN)
    assert has_full_visibility(EMPLOYEE)
    assert not has_full_visibility(CLIENT)


def test_denial_message_names_role_action_and_kind() -> None:
    assert denial_message(EMPLOYEE, Action.DELETE, EntityKind.PROJECT) == "employees cannot delete projects"
    assert denial_message(CLIENT, Action.CREATE, EntityKind.PROJECT) == "clients cannot create projects"
    assert denial_message(EMPLOYEE, Action.UPDATE, EntityKind.PRIORITY) == "employees cannot update priorities"


def test_identity_coerces_role_strings() -> None:
    identity = Identity.of("u1", "client")
    assert identity.role is UserRole.CLIENT
    with pytest.raises(ValueError):
        Identity.of("u1", "superuser")
