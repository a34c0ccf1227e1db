"""Priority reference data schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import require_text

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class PriorityCreate(BaseModel):
    """Payload for defining a new priority level."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"name": "Urgent", "color": "#D32F2F", "order": 1}}
    )

    name: str = Field(max_length=120)
    color: str = Field(pattern=COLOR_PATTERN)
    order: int = Field(default=0, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: object) -> str:
        return require_text(value, "Name")

    @field_validator("color", mode="after")
    @classmethod
    def _uppercase_color(cls, value: str) -> str:
        return value.upper()


class PriorityUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=120)
    color: str | None = Field(default=None, pattern=COLOR_PATTERN)
    order: int | None = Field(default=None, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: object) -> str:
        return require_text(value, "Name")

    @field_validator("color", mode="after")
    @classmethod
    def _uppercase_color(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("Color cannot be cleared.")
        return value.upper()

    @model_validator(mode="after")
    def _ensure_payload_not_empty(self) -> "PriorityUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        if "order" in self.model_fields_set and self.order is None:
            raise ValueError("Order cannot be cleared.")
        return self

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class PriorityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: str
    order: int
    created_at: datetime
    updated_at: datetime


__all__ = ["COLOR_PATTERN", "PriorityCreate", "PriorityRead", "PriorityUpdate"]
