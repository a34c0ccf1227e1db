"""Repository for interacting with user profile persistence models."""

from __future__ import annotations

from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import UserProfile
from .base import BaseRepository


class UserRepository(BaseRepository[UserProfile]):
    """Concrete repository for CRUD operations on ``UserProfile`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserProfile)
