"""
Comment repository - comments with their authors, grouped per item for item views.
"""

from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from shareit.db.models.comment import Comment
from shareit.db.repositories.base_repository import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    def __init__(self, session):
        super().__init__(session, Comment)

    async def get_by_id_with_author(self, id: int) -> Comment | None:
        result = await self.session.execute(
            select(Comment)
            .where(Comment.id == id)
            .options(selectinload(Comment.author))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_item_ids(self, item_ids: list[int]) -> dict[int, list[Comment]]:
        if not item_ids:
            return {}
        result = await self.session.execute(
            select(Comment)
            .where(Comment.item_id.in_(item_ids))
            .options(selectinload(Comment.author))
            .order_by(Comment.created_at, Comment.id)
        )
        grouped: dict[int, list[Comment]] = defaultdict(list)
        for comment in result.scalars().all():
            grouped[comment.item_id].append(comment)
        return dict(grouped)
