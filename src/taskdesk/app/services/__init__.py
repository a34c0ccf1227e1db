"""Domain service layer package."""

from __future__ import annotations

from .base import BaseManager
from .filters import apply_project_filters, apply_task_filters
from .notifications import NotificationManager, Notifier
from .priorities import PriorityRegistry
from .projects import ProjectManager
from .tasks import TaskManager
from .users import UserManager

__all__ = [
    "BaseManager",
    "NotificationManager",
    "Notifier",
    "PriorityRegistry",
    "ProjectManager",
    "TaskManager",
    "UserManager",
    "apply_project_filters",
    "apply_task_filters",
]
