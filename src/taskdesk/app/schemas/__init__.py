"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .notification import MarkAllReadResponse, NotificationCreate, NotificationRead, UnreadCountResponse
from .priority import PriorityCreate, PriorityRead, PriorityUpdate
from .project import ProjectCreate, ProjectFilters, ProjectRead, ProjectReport, ProjectUpdate
from .system import ErrorResponse, HealthCheckResponse, ReadinessResponse, RootResponse
from .task import (
    ASSIGNEE_ME,
    ASSIGNEE_UNASSIGNED,
    AssigneesPayload,
    TaskCreate,
    TaskFilters,
    TaskRead,
    TaskStatistics,
    TaskUpdate,
)
from .user import UserCreate, UserRead, UserRegistration, UserUpdate

__all__ = [
    "ASSIGNEE_ME",
    "ASSIGNEE_UNASSIGNED",
    "AssigneesPayload",
    "ErrorResponse",
    "HealthCheckResponse",
    "MarkAllReadResponse",
    "NotificationCreate",
    "NotificationRead",
    "PriorityCreate",
    "PriorityRead",
    "PriorityUpdate",
    "ProjectCreate",
    "ProjectFilters",
    "ProjectRead",
    "ProjectReport",
    "ProjectUpdate",
    "ReadinessResponse",
    "RootResponse",
    "TaskCreate",
    "TaskFilters",
    "TaskRead",
    "TaskStatistics",
    "TaskUpdate",
    "UnreadCountResponse",
    "UserCreate",
    "UserRead",
    "UserRegistration",
    "UserUpdate",
]
