"""Authorization rules deciding whether an identity may act on a kind of record.

Every role comparison in the service lives in this package. Managers and
routers ask :func:`can_perform` and never branch on roles themselves.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from ..models import EntityKind, UserRole
from .identity import Identity


class Action(str, Enum):
    """Operations subject to authorization."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    VIEW = "view"


_EVERYONE = frozenset(UserRole)
_STAFF = frozenset({UserRole.ADMIN, UserRole.EMPLOYEE})
_ADMIN_ONLY = frozenset({UserRole.ADMIN})

# Kind-level grants. Project and task views are open here and narrowed per
# record by the visibility predicates.
_ROLE_GRANTS: dict[tuple[EntityKind, Action], frozenset[UserRole]] = {
    (EntityKind.PROJECT, Action.CREATE): _STAFF,
    (EntityKind.PROJECT, Action.UPDATE): _STAFF,
    (EntityKind.PROJECT, Action.DELETE): _ADMIN_ONLY,
    (EntityKind.PROJECT, Action.VIEW): _EVERYONE,
    (EntityKind.TASK, Action.CREATE): _EVERYONE,
    (EntityKind.TASK, Action.UPDATE): _EVERYONE,
    (EntityKind.TASK, Action.DELETE): _STAFF,
    (EntityKind.TASK, Action.VIEW): _EVERYONE,
    (EntityKind.USER, Action.CREATE): _ADMIN_ONLY,
    (EntityKind.USER, Action.UPDATE): _ADMIN_ONLY,
    (EntityKind.USER, Action.DELETE): _ADMIN_ONLY,
    (EntityKind.USER, Action.VIEW): _STAFF,
    (EntityKind.PRIORITY, Action.CREATE): _ADMIN_ONLY,
    (EntityKind.PRIORITY, Action.UPDATE): _ADMIN_ONLY,
    (EntityKind.PRIORITY, Action.DELETE): _ADMIN_ONLY,
    (EntityKind.PRIORITY, Action.VIEW): _EVERYONE,
    (EntityKind.NOTIFICATION, Action.CREATE): _EVERYONE,
    (EntityKind.NOTIFICATION, Action.UPDATE): _EVERYONE,
    (EntityKind.NOTIFICATION, Action.DELETE): _EVERYONE,
    (EntityKind.NOTIFICATION, Action.VIEW): _EVERYONE,
}

_KIND_PLURALS: dict[EntityKind, str] = {
    EntityKind.PROJECT: "projects",
    EntityKind.TASK: "tasks",
    EntityKind.USER: "users",
    EntityKind.PRIORITY: "priorities",
    EntityKind.NOTIFICATION: "notifications",
}


def has_full_visibility(identity: Identity) -> bool:
    """Return ``True`` when the identity sees every project and task unfiltered."""

    return identity.role in _STAFF


def is_administrator(identity: Identity) -> bool:
    return identity.role is UserRole.ADMIN


def _is_own_profile(identity: Identity, target: Any | None) -> bool:
    return target is not None and getattr(target, "id", None) == identity.user_id


def _changes_role(target: Any | None, changes: Mapping[str, Any] | None) -> bool:
    if not changes or "role" not in changes:
        return False
    requested = changes["role"]
    if requested is None:
        return False
    if target is None:
        return True
    return UserRole(requested) is not UserRole(getattr(target, "role"))


def _can_update_user(
    identity: Identity,
    target: Any | None,
    changes: Mapping[str, Any] | None,
) -> bool:
    if is_administrator(identity):
        return True
    # Non-admins may edit their own profile but never any role, their own included.
    if _changes_role(target, changes):
        return False
    return _is_own_profile(identity, target)


def _is_recipient(identity: Identity, target: Any | None) -> bool:
    if target is None:
        return True
    return getattr(target, "user_id", None) == identity.user_id


def can_perform(
    identity: Identity,
    action: Action,
    kind: EntityKind,
    target: Any | None = None,
    *,
    changes: Mapping[str, Any] | None = None,
) -> bool:
    """Decide whether ``identity`` may perform ``action`` on ``kind``.

    ``target`` is the record being acted upon when one exists; ``changes`` is
    the requested patch for updates. Both only matter for rules that depend
    on the record (own profile, notification recipient, role changes).
    """

    if kind is EntityKind.USER:
        if action is Action.UPDATE:
            return _can_update_user(identity, target, changes)
        if action is Action.VIEW and _is_own_profile(identity, target):
            return True
    if kind is EntityKind.NOTIFICATION and action is not Action.CREATE:
        return _is_recipient(identity, target)

    allowed = _ROLE_GRANTS.get((kind, action), frozenset())
    return identity.role in allowed


def denial_message(identity: Identity, action: Action, kind: EntityKind) -> str:
    """Render the human readable reason for a denied action."""

    return f"{identity.role.value}s cannot {action.value} {_KIND_PLURALS[kind]}"


__all__ = [
    "Action",
    "can_perform",
    "denial_message",
    "has_full_visibility",
    "is_administrator",
]
