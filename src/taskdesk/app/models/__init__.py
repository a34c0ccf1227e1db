"""Domain models exposed for the TaskDesk service."""

from __future__ import annotations

from .common import EntityKind, TimestampMixin, as_utc, new_id, utcnow
from .notification import Notification
from .priority import Priority
from .project import Project, ProjectBase, ProjectStatus
from .task import Task, TaskBase, TaskStatus
from .user import UserProfile, UserProfileBase, UserRole

__all__ = [
    "EntityKind",
    "Notification",
    "Priority",
    "Project",
    "ProjectBase",
    "ProjectStatus",
    "Task",
    "TaskBase",
    "TaskStatus",
    "TimestampMixin",
    "UserProfile",
    "UserProfileBase",
    "UserRole",
    "as_utc",
    "new_id",
    "utcnow",
]
