"""User profile Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from ..models import UserRole
from .common import optional_text


class UserCreate(BaseModel):
    """Payload an administrator uses to create a profile."""

    id: str | None = Field(
        default=None,
        min_length=1,
        max_length=64,
        description="Identity provider subject; generated when omitted.",
    )
    email: EmailStr
    name: str | None = Field(default=None, max_length=255)
    role: UserRole = Field(default=UserRole.CLIENT)
    phone: str | None = Field(default=None, max_length=64)

    @field_validator("name", "phone", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        return optional_text(value)


class UserRegistration(BaseModel):
    """Self-service signup payload; the role is always ``client``."""

    email: EmailStr
    name: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=64)

    @field_validator("name", "phone", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        return optional_text(value)


class UserUpdate(BaseModel):
    """Partial profile update; changing ``role`` is an administrative action."""

    email: EmailStr | None = None
    name: str | None = Field(default=None, max_length=255)
    role: UserRole | None = None
    phone: str | None = Field(default=None, max_length=64)

    @field_validator("name", "phone", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        return optional_text(value)

    @model_validator(mode="after")
    def _ensure_payload_not_empty(self) -> "UserUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        for required in ("email", "role"):
            if required in self.model_fields_set and getattr(self, required) is None:
                raise ValueError(f"{required.capitalize()} cannot be cleared.")
        return self

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class UserRead(BaseModel):
    """Public representation of a user profile."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: EmailStr
    name: str | None = None
    role: UserRole
    phone: str | None = None
    created_at: datetime


__all__ = ["UserCreate", "UserRead", "UserRegistration", "UserUpdate"]
