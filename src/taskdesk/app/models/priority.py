"""Task priority reference models."""

from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field

from .common import TimestampMixin, new_id


class Priority(TimestampMixin, table=True):
    """Globally shared priority level; lower ``order`` means more urgent."""

    __tablename__ = "task_priorities"
    __table_args__ = (sa.Index("ix_task_priorities_order", "order"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(sa_column=sa.Column(sa.String(length=120), nullable=False))
    color: str = Field(sa_column=sa.Column(sa.String(length=7), nullable=False))
    order: int = Field(
        default=0,
        sa_column=sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
    )


__all__ = ["Priority"]
