"""
User repository - lookups used by registration, login and token resolution, and account removal.
"""

from sqlalchemy import delete, or_, select, update

from shareit.db.models.booking import Booking
from shareit.db.models.comment import Comment
from shareit.db.models.item import Item
from shareit.db.models.item_request import ItemRequest
from shareit.db.models.user import User
from shareit.db.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, session):
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        """Find user by email - used for authentication and duplicate checks."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def delete_with_dependents(self, user_id: int) -> tuple[list[int], list[int]]:
        """
        Remove a user with everything that references them: their bookings, bookings of
        their items, comments by them or on their items, their item requests and items.
        Items answering their requests are kept and unlinked.
        Returns (deleted booking ids, deleted item ids).
        """
        owned_items = select(Item.id).where(Item.owner_id == user_id)
        own_requests = select(ItemRequest.id).where(ItemRequest.requestor_id == user_id)

        item_ids = list((await self.session.execute(owned_items)).scalars().all())
        booking_ids = list(
            (
                await self.session.execute(
                    select(Booking.id).where(
                        or_(Booking.booker_id == user_id, Booking.item_id.in_(owned_items))
                    )
                )
            ).scalars().all()
        )

        statements = [
            delete(Booking).where(Booking.id.in_(booking_ids)),
            delete(Comment).where(or_(Comment.author_id == user_id, Comment.item_id.in_(owned_items))),
            update(Item).where(Item.request_id.in_(own_requests)).values(request_id=None),
            delete(ItemRequest).where(ItemRequest.requestor_id == user_id),
            delete(Item).where(Item.owner_id == user_id),
            delete(User).where(User.id == user_id),
        ]
        for stmt in statements:
            await self.session.execute(stmt.execution_options(synchronize_session=False))
        return booking_ids, item_ids
