"""
Base repository - generic data access (SOLID: Interface Segregation, Dependency Inversion).
Challenge: Consistent data access, testability, reads that always reflect the store.
"""

from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from krishisetu.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic async repository. Subclasses define model-specific methods."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    def _select(self):
        # populate_existing: conditional updates bypass the identity map, so reads must refresh it
        return select(self.model).execution_options(populate_existing=True)

    async def get_by_id(self, id: str) -> ModelType | None:
        """Fetch single entity by primary key."""
        result = await self.session.execute(self._select().where(self.model.id == id))
        return result.scalar_one_or_none()

    async def add(self, entity: ModelType) -> ModelType:
        """Persist new entity. Caller commits session."""
        self.session.add(entity)
        await self.session.flush()  # Get ID without committing
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: ModelType) -> None:
        """Remove entity from DB (ORM cascades apply)."""
        await self.session.delete(entity)
        await self.session.flush()
