"""Project domain models built with SQLModel."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .common import TimestampMixin, enum_values, new_id


class ProjectStatus(str, Enum):
    """Lifecycle states of a project."""

    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"


class ProjectBase(SQLModel, table=False):
    """Shared attributes for project models."""

    name: str = Field(
        max_length=255,
        sa_column=sa.Column(sa.String(length=255), nullable=False),
    )
    description: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.Text(), nullable=True),
    )
    # Weak reference to a user profile; lookup only.
    client_id: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.String(length=64), nullable=True),
    )
    deadline: datetime | None = Field(
        default=None,
        sa_column=sa.Column(sa.DateTime(timezone=True), nullable=True),
    )
    status: ProjectStatus = Field(
        default=ProjectStatus.ACTIVE,
        sa_column=sa.Column(
            sa.Enum(
                ProjectStatus,
                name="project_status",
                native_enum=False,
                validate_strings=True,
                values_callable=enum_values,
            ),
            nullable=False,
            server_default=ProjectStatus.ACTIVE.value,
        ),
    )
    created_by: str = Field(
        sa_column=sa.Column(sa.String(length=64), nullable=False),
    )


class Project(ProjectBase, TimestampMixin, table=True):
    """Persistent project model."""

    __tablename__ = "projects"
    __table_args__ = (
        sa.CheckConstraint("length(name) > 0", name="ck_projects_name_length"),
        sa.Index("ix_projects_client_id", "client_id"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)


__all__ = ["Project", "ProjectBase", "ProjectStatus"]
