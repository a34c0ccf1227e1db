"""Repository for interacting with project persistence models."""

from __future__ import annotations

from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Project
from .base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Concrete repository encapsulating ``Project`` persistence operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Project)
