"""Per-user notification models."""

from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .common import new_id, utcnow


class Notification(SQLModel, table=True):
    """Message addressed to a single recipient."""

    __tablename__ = "notifications"
    __table_args__ = (sa.Index("ix_notifications_user_id_created_at", "user_id", "created_at"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(sa_column=sa.Column(sa.String(length=64), nullable=False))
    title: str = Field(sa_column=sa.Column(sa.String(length=255), nullable=False))
    content: str = Field(sa_column=sa.Column(sa.Text(), nullable=False))
    link: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.String(length=512), nullable=True),
    )
    read: bool = Field(
        default=False,
        sa_column=sa.Column(sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    read_at: datetime | None = Field(
        default=None,
        sa_column=sa.Column(sa.DateTime(timezone=True), nullable=True),
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=sa.Column(sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


__all__ = ["Notification"]
