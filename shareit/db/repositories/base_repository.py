"""
Base repository - generic async data access shared by all entities.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from shareit.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


@dataclass(frozen=True)
class Page:
    """Offset/limit window. Callers pass None instead of a Page to fetch everything."""

    offset: int
    limit: int


def paginate(stmt: Select, page: Page | None) -> Select:
    if page is None:
        return stmt
    return stmt.offset(page.offset).limit(page.limit)


class BaseRepository(Generic[ModelType]):
    """Generic async repository. Subclasses define model-specific queries."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def get_by_id(self, id: int) -> ModelType | None:
        """Fetch single entity by primary key."""
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_many(self, page: Page | None = None) -> list[ModelType]:
        """All rows by id, optionally windowed."""
        result = await self.session.execute(paginate(select(self.model).order_by(self.model.id), page))
        return list(result.scalars().all())

    async def add(self, entity: ModelType) -> ModelType:
        """Persist new entity. Caller commits session."""
        self.session.add(entity)
        await self.session.flush()  # Get ID without committing
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: ModelType) -> None:
        """Remove entity from DB. Caller commits session."""
        await self.session.delete(entity)
        await self.session.flush()
