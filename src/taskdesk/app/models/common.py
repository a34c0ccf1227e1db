"""Shared model mixins and utilities."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class EntityKind(str, Enum):
    """Kinds of records kept by the entity store."""

    PROJECT = "project"
    TASK = "task"
    USER = "user"
    PRIORITY = "priority"
    NOTIFICATION = "notification"


def utcnow() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps returned by backends without timezone support."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Persist enum members by value so stored strings match the API."""
    return [member.value for member in enum_cls]


def new_id() -> str:
    """Return a fresh opaque record identifier."""
    return uuid4().hex


class TimestampMixin(SQLModel, table=False):
    """Mixin that provides created/updated timestamp columns."""

    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "server_onupdate": sa.func.now(),
        },
    )


__all__ = ["EntityKind", "TimestampMixin", "as_utc", "enum_values", "new_id", "utcnow"]
