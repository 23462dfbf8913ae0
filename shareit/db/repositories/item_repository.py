"""
Item repository - item lookup for the booking core and owner listings.
"""

from collections import defaultdict

from sqlalchemy import or_, select

from shareit.db.models.item import Item
from shareit.db.repositories.base_repository import BaseRepository, Page, paginate


class ItemRepository(BaseRepository[Item]):
    def __init__(self, session):
        super().__init__(session, Item)

    async def get_by_owner(self, owner_id: int) -> list[Item]:
        result = await self.session.execute(
            select(Item).where(Item.owner_id == owner_id).order_by(Item.id)
        )
        return list(result.scalars().all())

    async def search_available(self, text: str, page: Page | None = None) -> list[Item]:
        """Case-insensitive match on name or description; unavailable items are never returned."""
        pattern = f"%{text}%"
        stmt = (
            select(Item)
            .where(
                Item.available.is_(True),
                or_(Item.name.ilike(pattern), Item.description.ilike(pattern)),
            )
            .order_by(Item.id)
        )
        result = await self.session.execute(paginate(stmt, page))
        return list(result.scalars().all())

    async def get_by_request_ids(self, request_ids: list[int]) -> dict[int, list[Item]]:
        """Items listed in answer to each request. Requests without answers are absent."""
        if not request_ids:
            return {}
        result = await self.session.execute(
            select(Item).where(Item.request_id.in_(request_ids)).order_by(Item.id)
        )
        grouped: dict[int, list[Item]] = defaultdict(list)
        for item in result.scalars().all():
            grouped[item.request_id].append(item)
        return dict(grouped)
