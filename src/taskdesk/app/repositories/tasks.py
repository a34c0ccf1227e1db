"""Repository for interacting with task persistence models."""

from __future__ import annotations

from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Task
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Concrete repository encapsulating ``Task`` persistence operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Task)
