"""
Booking service - booking lifecycle orchestration.
Resolves the item, runs the authorization policy and the state machine, persists,
and maps bookings to responses. The only place booking side effects happen.
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from shareit.cache.redis_client import cache_delete_many, cache_get, cache_set
from shareit.config import get_settings
from shareit.core.clock import Clock, utcnow
from shareit.core.exceptions import (
    ConflictException,
    InvalidStateException,
    NotFoundException,
    ValidationException,
)
from shareit.core.metrics import BOOKING_DECISIONS, BOOKINGS_CREATED
from shareit.db.models.booking import Booking
from shareit.db.repositories.base_repository import Page
from shareit.db.repositories.booking_repository import BookingRepository
from shareit.db.repositories.item_repository import ItemRepository
from shareit.db.session import after_commit
from shareit.domain import policy
from shareit.domain.booking_state import BookingState, BookingStatus, decide
from shareit.schemas.booking import BookingCreate, BookingResponse, BookingShort

logger = logging.getLogger(__name__)
settings = get_settings()

CACHE_PREFIX = "booking:"


def invalidate_cached_bookings(session: AsyncSession, booking_ids: list[int]) -> None:
    """Drop cached booking details once the current transaction has committed."""
    keys = [CACHE_PREFIX + str(booking_id) for booking_id in booking_ids]
    if keys:
        after_commit(session, lambda: cache_delete_many(keys))


def booking_to_response(booking: Booking) -> BookingResponse:
    """Map a booking with item and booker loaded to the API response."""
    return BookingResponse.model_validate(booking)


def booking_to_short(booking: Booking | None) -> BookingShort | None:
    return BookingShort.model_validate(booking) if booking is not None else None


def _validate_window(start: datetime, end: datetime, now: datetime) -> None:
    if start < now:
        logger.warning("Booking start time %s is in the past", start)
        raise ValidationException("Booking start time cannot be in the past", code="StartInPast")
    if end <= start:
        logger.warning("Booking end time %s is not after start time %s", end, start)
        raise ValidationException("Booking end time must be after start time", code="InvalidWindow")


class BookingService:
    """Create, decide, read and list bookings."""

    def __init__(
        self,
        booking_repo: BookingRepository,
        item_repo: ItemRepository,
        clock: Clock = utcnow,
        reject_overlapping: bool | None = None,
    ):
        self.booking_repo = booking_repo
        self.item_repo = item_repo
        self.clock = clock
        self.reject_overlapping = (
            settings.reject_overlapping_bookings if reject_overlapping is None else reject_overlapping
        )

    async def create(self, booker_id: int, data: BookingCreate) -> BookingResponse:
        """Create a booking request in WAITING status."""
        now = self.clock()
        item = await self.item_repo.get_by_id(data.item_id)
        if item is None:
            logger.warning("Item with id %s not found", data.item_id)
            raise NotFoundException(f"Item with id {data.item_id} not found")
        policy.ensure_can_create_booking(booker_id, item)
        _validate_window(data.start, data.end, now)
        if self.reject_overlapping and await self.booking_repo.has_overlapping_approved(
            item.id, data.start, data.end
        ):
            logger.warning("Booking window %s - %s overlaps an approved booking of item %s", data.start, data.end, item.id)
            raise ConflictException(
                f"Item with id {item.id} is already booked for the requested period",
                details={"item_id": item.id},
            )

        booking = await self.booking_repo.add(
            Booking(
                item_id=item.id,
                booker_id=booker_id,
                start=data.start,
                end=data.end,
                status=BookingStatus.WAITING,
            )
        )
        # Reload with item and booker to avoid lazy loads in async context
        booking = await self.booking_repo.get_by_id_with_relations(booking.id)
        BOOKINGS_CREATED.inc()
        logger.info("User %s requested booking %s of item %s", booker_id, booking.id, item.id)
        return booking_to_response(booking)

    async def approve(self, booking_id: int, owner_id: int, approved: bool) -> BookingResponse:
        """Owner decision on a WAITING booking. Decided bookings cannot be decided again."""
        booking = await self.booking_repo.get_by_id_with_relations(booking_id)
        if booking is None:
            logger.warning("Booking with id %s not found for %s", booking_id, "approval" if approved else "rejection")
            raise NotFoundException(f"Booking with id {booking_id} not found")
        policy.ensure_can_approve(owner_id, booking)
        new_status = decide(booking.status, approved, booking.id)

        if not await self.booking_repo.transition_status(booking.id, new_status):
            # A concurrent decision won the conditional update
            logger.warning("Booking %s was decided concurrently", booking.id)
            raise InvalidStateException(
                f"Booking with id {booking.id} has already been decided",
                details={"booking_id": booking.id},
            )

        booking = await self.booking_repo.get_by_id_with_relations(booking.id)
        # Dropped once committed, so no reader sees an entry older than the decision
        invalidate_cached_bookings(self.booking_repo.session, [booking.id])
        BOOKING_DECISIONS.labels(status=new_status.value).inc()
        logger.info("Owner %s set booking %s to %s", owner_id, booking.id, new_status.value)
        return booking_to_response(booking)

    async def get_by_id(self, booking_id: int, requester_id: int) -> BookingResponse:
        """Booking detail for its booker or the item owner. Cached; access is checked on every call."""
        key = CACHE_PREFIX + str(booking_id)
        cached = await cache_get(key)
        if cached:
            response = BookingResponse.model_validate(cached)
        else:
            booking = await self.booking_repo.get_by_id_with_relations(booking_id)
            if booking is None:
                logger.warning("Booking with id %s not found", booking_id)
                raise NotFoundException(f"Booking with id {booking_id} not found")
            response = booking_to_response(booking)
            # Only decided bookings are cached: their status never changes again
            if response.status.is_terminal:
                await cache_set(key, response.model_dump(mode="json"), settings.booking_cache_ttl)
        policy.ensure_can_view_booking(requester_id, response.id, response.booker.id, response.item.owner_id)
        return response

    async def delete(self, booking_id: int, user_id: int) -> None:
        """Booker withdraws their booking, whatever its status."""
        booking = await self.booking_repo.get_by_id(booking_id)
        if booking is None:
            logger.warning("Booking with id %s not found for deletion", booking_id)
            raise NotFoundException(f"Booking with id {booking_id} not found")
        policy.ensure_can_delete_booking(user_id, booking)
        await self.booking_repo.delete(booking)
        invalidate_cached_bookings(self.booking_repo.session, [booking_id])
        logger.info("User %s deleted booking %s", user_id, booking_id)

    async def list_for_booker(
        self, booker_id: int, state: BookingState | str = BookingState.ALL, page: Page | None = None
    ) -> list[BookingResponse]:
        state = state if isinstance(state, BookingState) else BookingState.parse(state)
        now = self.clock()
        bookings = await self.booking_repo.find_by_booker_and_state(booker_id, state, now, page)
        logger.debug("Fetched %d %s bookings of booker %s", len(bookings), state.value, booker_id)
        return [booking_to_response(b) for b in bookings]

    async def list_for_owner(
        self, owner_id: int, state: BookingState | str = BookingState.ALL, page: Page | None = None
    ) -> list[BookingResponse]:
        state = state if isinstance(state, BookingState) else BookingState.parse(state)
        now = self.clock()
        bookings = await self.booking_repo.find_by_owner_and_state(owner_id, state, now, page)
        logger.debug("Fetched %d %s bookings of items owned by %s", len(bookings), state.value, owner_id)
        return [booking_to_response(b) for b in bookings]

    async def is_eligible_to_comment(self, user_id: int, item_id: int) -> bool:
        """True once the user has an approved booking of the item that has ended."""
        bookings = await self.booking_repo.find_approved_by_booker_and_item(user_id, item_id)
        return policy.can_comment(user_id, item_id, bookings, self.clock())

    async def ensure_eligible_to_comment(self, user_id: int, item_id: int) -> None:
        bookings = await self.booking_repo.find_approved_by_booker_and_item(user_id, item_id)
        policy.ensure_can_comment(user_id, item_id, bookings, self.clock())

    async def last_and_next_for_items(
        self, item_ids: list[int]
    ) -> dict[int, tuple[BookingShort | None, BookingShort | None]]:
        """Last and next approved booking per item, None-filled for display."""
        last, next_ = await self.booking_repo.find_last_and_next_for_items(item_ids, self.clock())
        return {
            item_id: (booking_to_short(last.get(item_id)), booking_to_short(next_.get(item_id)))
            for item_id in item_ids
        }
