"""Base repository implementation supporting asynchronous SQLModel sessions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Provide shared persistence helpers for repositories."""

    ordering: ClassVar[tuple[str, ...]] = ("created_at",)

    def __init__(self, session: AsyncSession, model_type: type[ModelType]) -> None:
        self._session = session
        self._model_type = model_type

    @property
    def session(self) -> AsyncSession:
        """Return the session associated with the repository."""
        return self._session

    @property
    def model_type(self) -> type[ModelType]:
        return self._model_type

    async def get(self, entity_id: str) -> ModelType | None:
        """Retrieve a model instance by its primary key."""
        return await self._session.get(self._model_type, entity_id)

    async def list(self) -> list[ModelType]:
        """Return all entities of the repository type in their default order."""
        columns = [getattr(self._model_type, name) for name in self.ordering]
        query = select(self._model_type).order_by(*columns)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def add(self, instance: ModelType) -> ModelType:
        """Add and flush a new entity instance."""
        self._session.add(instance)
        await self._session.flush()
        return instance

    async def apply(self, instance: ModelType, changes: Mapping[str, Any]) -> ModelType:
        """Copy ``changes`` onto ``instance`` and flush."""
        for field_name, value in changes.items():
            setattr(instance, field_name, value)
        self._session.add(instance)
        await self._session.flush()
        return instance

    async def delete(self, instance: ModelType) -> None:
        """Delete an entity instance and flush the change."""
        await self._session.delete(instance)
        await self._session.flush()

    async def refresh(self, instance: ModelType) -> ModelType:
        """Refresh an entity from the database and return it."""
        await self._session.refresh(instance)
        return instance
