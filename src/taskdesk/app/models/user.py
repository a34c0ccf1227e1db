"""User profile models built with SQLModel."""

from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .common import TimestampMixin, enum_values, new_id


class UserRole(str, Enum):
    """Roles an authenticated principal can hold."""

    ADMIN = "admin"
    EMPLOYEE = "employee"
    CLIENT = "client"


class UserProfileBase(SQLModel, table=False):
    """Shared attributes for user profile models."""

    email: str = Field(
        max_length=320,
        sa_column=sa.Column(
            sa.String(length=320),
            nullable=False,
            unique=True,
        ),
    )
    name: str | None = Field(
        default=None,
        max_length=255,
        sa_column=sa.Column(sa.String(length=255), nullable=True),
    )
    role: UserRole = Field(
        default=UserRole.CLIENT,
        sa_column=sa.Column(
            sa.Enum(
                UserRole,
                name="user_role",
                native_enum=False,
                validate_strings=True,
                values_callable=enum_values,
            ),
            nullable=False,
            server_default=UserRole.CLIENT.value,
        ),
    )
    phone: str | None = Field(
        default=None,
        max_length=64,
        sa_column=sa.Column(sa.String(length=64), nullable=True),
    )


class UserProfile(UserProfileBase, TimestampMixin, table=True):
    """Persistent profile, one per authenticated identity."""

    __tablename__ = "user_profiles"
    __table_args__ = (
        sa.Index("ix_user_profiles_email", "email"),
        sa.Index("ix_user_profiles_role", "role"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)


__all__ = ["UserProfile", "UserProfileBase", "UserRole"]
