"""Repository for the shared priority reference list."""

from __future__ import annotations

from typing import ClassVar

from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Priority
from .base import BaseRepository


class PriorityRepository(BaseRepository[Priority]):
    """Persistence helpers for ``Priority`` entities, listed most urgent first."""

    ordering: ClassVar[tuple[str, ...]] = ("order", "name")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Priority)
