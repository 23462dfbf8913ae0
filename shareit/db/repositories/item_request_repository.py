"""
Item request repository - a user's own requests and everyone else's, newest first.
"""

from sqlalchemy import select

from shareit.db.models.item_request import ItemRequest
from shareit.db.repositories.base_repository import BaseRepository, Page, paginate


class ItemRequestRepository(BaseRepository[ItemRequest]):
    def __init__(self, session):
        super().__init__(session, ItemRequest)

    async def find_by_requestor(self, requestor_id: int) -> list[ItemRequest]:
        result = await self.session.execute(
            select(ItemRequest)
            .where(ItemRequest.requestor_id == requestor_id)
            .order_by(ItemRequest.created_at.desc(), ItemRequest.id.desc())
        )
        return list(result.scalars().all())

    async def find_by_others(self, user_id: int, page: Page | None = None) -> list[ItemRequest]:
        """Requests made by anyone except `user_id`."""
        stmt = (
            select(ItemRequest)
            .where(ItemRequest.requestor_id != user_id)
            .order_by(ItemRequest.created_at.desc(), ItemRequest.id.desc())
        )
        result = await self.session.execute(paginate(stmt, page))
        return list(result.scalars().all())
