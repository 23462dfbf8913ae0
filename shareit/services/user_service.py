"""
User service - profile edits and account removal.
Registration and login stay in the users endpoint.
"""

import logging

from shareit.config import get_settings
from shareit.core.exceptions import ConflictException, NotFoundException
from shareit.db.models.user import User
from shareit.db.repositories.booking_repository import BookingRepository
from shareit.db.repositories.user_repository import UserRepository
from shareit.db.session import after_commit
from shareit.domain import policy
from shareit.queue.tasks import remove_item_task
from shareit.schemas.user import UserResponse, UserUpdate
from shareit.services.booking_service import invalidate_cached_bookings

logger = logging.getLogger(__name__)
settings = get_settings()


class UserService:
    def __init__(
        self,
        user_repo: UserRepository,
        booking_repo: BookingRepository,
        search_enabled: bool | None = None,
    ):
        self.user_repo = user_repo
        self.booking_repo = booking_repo
        self.search_enabled = settings.search_enabled if search_enabled is None else search_enabled

    async def _get_or_404(self, user_id: int) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            logger.warning("User with id %s not found", user_id)
            raise NotFoundException(f"User with id {user_id} not found")
        return user

    async def list_all(self) -> list[UserResponse]:
        return [UserResponse.model_validate(u) for u in await self.user_repo.get_many()]

    async def update(self, user_id: int, requester_id: int, data: UserUpdate) -> UserResponse:
        user = await self._get_or_404(user_id)
        policy.ensure_can_manage_user(requester_id, user_id)
        if data.email is not None and data.email != user.email:
            if await self.user_repo.get_by_email(data.email):
                logger.warning("Email %s is already registered", data.email)
                raise ConflictException("Email already registered", code="EmailAlreadyExists")
            user.email = data.email
        if data.name is not None and data.name != user.name:
            user.name = data.name
            # Cached booking details carry the booker's name
            invalidate_cached_bookings(
                self.user_repo.session, await self.booking_repo.get_ids_by_booker(user_id)
            )
        await self.user_repo.session.flush()
        await self.user_repo.session.refresh(user)
        logger.info("User %s updated their profile", user_id)
        return UserResponse.model_validate(user)

    async def delete(self, user_id: int, requester_id: int) -> None:
        """Remove the account together with its items, bookings, comments and requests."""
        await self._get_or_404(user_id)
        policy.ensure_can_manage_user(requester_id, user_id)
        booking_ids, item_ids = await self.user_repo.delete_with_dependents(user_id)
        invalidate_cached_bookings(self.user_repo.session, booking_ids)
        if self.search_enabled and item_ids:
            after_commit(self.user_repo.session, lambda: self._unindex(item_ids))
        logger.info("User %s deleted with %d items and %d bookings", user_id, len(item_ids), len(booking_ids))

    async def _unindex(self, item_ids: list[int]) -> None:
        for item_id in item_ids:
            try:
                remove_item_task.delay(item_id)
            except Exception as e:
                logger.warning("Could not enqueue removal of item %s from the index: %s", item_id, e)
