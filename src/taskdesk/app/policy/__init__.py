"""Authorization policy and visibility filtering."""

from __future__ import annotations

from .identity import Identity
from .rules import Action, can_perform, denial_message, has_full_visibility, is_administrator
from .visibility import (
    owned_project_ids,
    project_visible,
    task_visible,
    visible_notifications,
    visible_projects,
    visible_tasks,
    visible_users,
)

__all__ = [
    "Action",
    "Identity",
    "can_perform",
    "denial_message",
    "has_full_visibility",
    "is_administrator",
    "owned_project_ids",
    "project_visible",
    "task_visible",
    "visible_notifications",
    "visible_projects",
    "visible_tasks",
    "visible_users",
]
