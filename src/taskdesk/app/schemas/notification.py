"""Notification schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import optional_text, require_text


class NotificationCreate(BaseModel):
    """Message to deliver to a single recipient."""

    user_id: str = Field(min_length=1, max_length=64)
    title: str = Field(max_length=255)
    content: str
    link: str | None = Field(default=None, max_length=512)

    @field_validator("title", mode="before")
    @classmethod
    def _validate_title(cls, value: object) -> str:
        return require_text(value, "Title")

    @field_validator("content", mode="before")
    @classmethod
    def _validate_content(cls, value: object) -> str:
        return require_text(value, "Content")

    @field_validator("link", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        return optional_text(value)


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    content: str
    link: str | None = None
    read: bool
    read_at: datetime | None = None
    created_at: datetime


class UnreadCountResponse(BaseModel):
    unread: int = Field(ge=0)


class MarkAllReadResponse(BaseModel):
    updated: int = Field(ge=0, description="Number of notifications newly marked as read")


__all__ = [
    "MarkAllReadResponse",
    "NotificationCreate",
    "NotificationRead",
    "UnreadCountResponse",
]
