"""Repository for per-user notifications."""

from __future__ import annotations

from typing import ClassVar

from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Notification
from .base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Persistence helpers for ``Notification`` entities."""

    ordering: ClassVar[tuple[str, ...]] = ("created_at", "id")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Notification)
