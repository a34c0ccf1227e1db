"""Database repositories for encapsulating persistence logic."""

from __future__ import annotations

from .base import BaseRepository
from .notifications import NotificationRepository
from .priorities import PriorityRepository
from .projects import ProjectRepository
from .tasks import TaskRepository
from .users import UserRepository

__all__ = [
    "BaseRepository",
    "NotificationRepository",
    "PriorityRepository",
    "ProjectRepository",
    "TaskRepository",
    "UserRepository",
]
