"""Task domain models built with SQLModel."""

from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .common import TimestampMixin, enum_values, new_id


class TaskStatus(str, Enum):
    """Enumeration of possible task states."""

    NEW = "new"
    IN_PROGRESS = "in_progress"
    WAITING_FOR_CLIENT = "waiting_for_client"
    COMPLETED = "completed"


class TaskBase(SQLModel, table=False):
    """Shared attributes for task models."""

    title: str = Field(
        max_length=255,
        sa_column=sa.Column(sa.String(length=255), nullable=False),
    )
    description: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.Text(), nullable=True),
    )
    project_id: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.String(length=64), nullable=True),
    )
    priority_id: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.String(length=64), nullable=True),
    )
    status: TaskStatus = Field(
        default=TaskStatus.NEW,
        sa_column=sa.Column(
            sa.Enum(
                TaskStatus,
                name="task_status",
                native_enum=False,
                validate_strings=True,
                values_callable=enum_values,
            ),
            nullable=False,
            server_default=TaskStatus.NEW.value,
        ),
    )
    # Set of user ids, kept sorted and unique on write.
    assignees: list[str] = Field(
        default_factory=list,
        sa_column=sa.Column(sa.JSON(), nullable=False),
    )
    created_by: str = Field(
        sa_column=sa.Column(sa.String(length=64), nullable=False),
    )


class Task(TaskBase, TimestampMixin, table=True):
    """Persistent task model."""

    __tablename__ = "tasks"
    __table_args__ = (
        sa.CheckConstraint("length(title) > 0", name="ck_tasks_title_length"),
        sa.Index("ix_tasks_project_id", "project_id"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)


__all__ = ["Task", "TaskBase", "TaskStatus"]
