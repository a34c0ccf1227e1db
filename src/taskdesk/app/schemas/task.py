"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models import TaskStatus
from .common import normalise_user_ids, optional_text, require_text

ASSIGNEE_ME = "me"
ASSIGNEE_UNASSIGNED = "unassigned"

TASK_READ_EXAMPLE = {
    "id": "5b0f0a3c2a8e4c1c9c7c1d2e3f4a5b6c",
    "title": "Draft product documentation",
    "description": "Outline sections for the public API guide.",
    "project_id": "c1e2d3f4a5b6c7d8e9f0a1b2c3d4e5f6",
    "priority_id": None,
    "status": TaskStatus.NEW.value,
    "assignees": ["u1"],
    "created_by": "u2",
    "created_at": "2024-01-01T12:00:00Z",
    "updated_at": "2024-01-02T08:30:00Z",
}


class TaskCreate(BaseModel):
    """Payload for creating a new task."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Draft product documentation",
                "description": "Outline sections for the public API guide.",
                "project_id": "c1e2d3f4a5b6c7d8e9f0a1b2c3d4e5f6",
                "assignees": ["u1"],
            }
        }
    )

    title: str = Field(max_length=255)
    description: str | None = Field(default=None)
    project_id: str | None = Field(default=None, max_length=64)
    priority_id: str | None = Field(default=None, max_length=64)
    status: TaskStatus = Field(default=TaskStatus.NEW)
    assignees: list[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _validate_title(cls, value: object) -> str:
        return require_text(value, "Title")

    @field_validator("description", "project_id", "priority_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        return optional_text(value)

    @field_validator("assignees", mode="after")
    @classmethod
    def _normalise_assignees(cls, value: list[str]) -> list[str]:
        return normalise_user_ids(value)


class TaskUpdate(BaseModel):
    """Payload for partially updating an existing task."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Update API documentation",
                "status": TaskStatus.IN_PROGRESS.value,
            }
        }
    )

    title: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None)
    project_id: str | None = Field(default=None, max_length=64)
    priority_id: str | None = Field(default=None, max_length=64)
    status: TaskStatus | None = Field(default=None)
    assignees: list[str] | None = Field(default=None)

    @field_validator("title", mode="before")
    @classmethod
    def _validate_title(cls, value: object) -> str:
        return require_text(value, "Title")

    @field_validator("description", "project_id", "priority_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        return optional_text(value)

    @field_validator("assignees", mode="after")
    @classmethod
    def _normalise_assignees(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            raise ValueError("Assignees must be a list; send an empty list to unassign.")
        return normalise_user_ids(value)

    @model_validator(mode="after")
    def _ensure_payload_not_empty(self) -> "TaskUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        if "status" in self.model_fields_set and self.status is None:
            raise ValueError("Status cannot be cleared.")
        return self

    def changes(self) -> dict[str, object]:
        """Return only the fields the caller explicitly supplied."""
        return self.model_dump(exclude_unset=True)


class TaskRead(BaseModel):
    """Public representation of a task."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": TASK_READ_EXAMPLE},
    )

    id: str
    title: str
    description: str | None = None
    project_id: str | None = None
    priority_id: str | None = None
    status: TaskStatus
    assignees: list[str]
    created_by: str
    created_at: datetime
    updated_at: datetime


class TaskFilters(BaseModel):
    """Optional narrowing applied after visibility filtering.

    ``assignee`` accepts a user id, ``"me"`` for the acting identity, or
    ``"unassigned"`` for tasks with nobody assigned.
    """

    status: TaskStatus | None = None
    priority_id: str | None = None
    project_id: str | None = None
    assignee: str | None = None
    search: str | None = None

    @field_validator("priority_id", "project_id", "assignee", "search", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        return optional_text(value)


class TaskStatistics(BaseModel):
    """Aggregated statistics describing task distribution."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total": 3,
                "by_status": {
                    TaskStatus.NEW.value: 1,
                    TaskStatus.IN_PROGRESS.value: 1,
                    TaskStatus.WAITING_FOR_CLIENT.value: 0,
                    TaskStatus.COMPLETED.value: 1,
                },
            }
        }
    )

    total: int = Field(ge=0)
    by_status: dict[str, int] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_counts(self) -> "TaskStatistics":
        if any(count < 0 for count in self.by_status.values()):
            raise ValueError("Status counts cannot be negative.")
        return self


class AssigneesPayload(BaseModel):
    """User ids to add to or remove from a task's assignee set."""

    user_ids: list[str] = Field(min_length=1)

    @field_validator("user_ids", mode="after")
    @classmethod
    def _normalise(cls, value: list[str]) -> list[str]:
        cleaned = normalise_user_ids(value)
        if not cleaned:
            raise ValueError("At least one user id is required.")
        return cleaned


__all__ = [
    "ASSIGNEE_ME",
    "ASSIGNEE_UNASSIGNED",
    "AssigneesPayload",
    "TaskCreate",
    "TaskFilters",
    "TaskRead",
    "TaskStatistics",
    "TaskUpdate",
]
