"""Project-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models import ProjectStatus
from .common import optional_text, require_text


class ProjectCreate(BaseModel):
    """Payload for creating a new project."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Website relaunch",
                "description": "New marketing site for the spring campaign.",
                "client_id": "u1",
                "deadline": "2024-06-30T00:00:00Z",
            }
        }
    )

    name: str = Field(max_length=255)
    description: str | None = Field(default=None)
    client_id: str | None = Field(default=None, max_length=64)
    deadline: datetime | None = Field(default=None)
    status: ProjectStatus = Field(default=ProjectStatus.ACTIVE)

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: object) -> str:
        return require_text(value, "Name")

    @field_validator("description", "client_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        return optional_text(value)


class ProjectUpdate(BaseModel):
    """Payload for partially updating a project; ``created_by`` is immutable."""

    name: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None)
    client_id: str | None = Field(default=None, max_length=64)
    deadline: datetime | None = Field(default=None)
    status: ProjectStatus | None = Field(default=None)

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: object) -> str:
        return require_text(value, "Name")

    @field_validator("description", "client_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        return optional_text(value)

    @model_validator(mode="after")
    def _ensure_payload_not_empty(self) -> "ProjectUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        if "status" in self.model_fields_set and self.status is None:
            raise ValueError("Status cannot be cleared.")
        return self

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class ProjectRead(BaseModel):
    """Public representation of a project."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    client_id: str | None = None
    deadline: datetime | None = None
    status: ProjectStatus
    created_by: str
    created_at: datetime
    updated_at: datetime


class ProjectFilters(BaseModel):
    """Optional narrowing applied after visibility filtering."""

    status: ProjectStatus | None = None
    client_id: str | None = None
    search: str | None = None

    @field_validator("client_id", "search", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        return optional_text(value)


class ProjectReport(BaseModel):
    """Task distribution for a single project, counted over visible tasks."""

    project_id: str
    name: str
    status: ProjectStatus
    total_tasks: int = Field(ge=0)
    by_status: dict[str, int] = Field(default_factory=dict)


__all__ = [
    "ProjectCreate",
    "ProjectFilters",
    "ProjectRead",
    "ProjectReport",
    "ProjectUpdate",
]
