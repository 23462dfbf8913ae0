"""
Booking repository - the storage side of the booking query engine.

State filters are translated to SQL here; their semantics mirror
shareit.domain.booking_state.matches_state and must stay in step with it.
"""

from datetime import datetime

from sqlalchemy import ColumnElement, and_, select, true, update
from sqlalchemy.orm import selectinload

from shareit.db.models.booking import Booking
from shareit.db.models.item import Item
from shareit.db.repositories.base_repository import BaseRepository, Page, paginate
from shareit.domain.booking_state import BookingState, BookingStatus


def state_clause(state: BookingState, now: datetime) -> ColumnElement[bool]:
    """SQL predicate for one filter state at a fixed `now`."""
    if state is BookingState.CURRENT:
        return and_(Booking.start <= now, Booking.end > now)
    if state is BookingState.PAST:
        return Booking.end < now
    if state is BookingState.FUTURE:
        return Booking.start > now
    if state is BookingState.WAITING:
        return Booking.status == BookingStatus.WAITING
    if state is BookingState.REJECTED:
        return Booking.status == BookingStatus.REJECTED
    return true()


class BookingRepository(BaseRepository[Booking]):
    """Booking queries. Item and booker are eager loaded wherever a full booking is returned."""

    def __init__(self, session):
        super().__init__(session, Booking)

    @staticmethod
    def _with_relations(stmt):
        return stmt.options(selectinload(Booking.item), selectinload(Booking.booker))

    async def get_by_id_with_relations(self, id: int) -> Booking | None:
        result = await self.session.execute(
            self._with_relations(select(Booking).where(Booking.id == id)).execution_options(
                populate_existing=True
            )
        )
        return result.scalar_one_or_none()

    async def find_by_booker_and_state(
        self, booker_id: int, state: BookingState, now: datetime, page: Page | None = None
    ) -> list[Booking]:
        """Bookings made by `booker_id` matching `state`, newest start first."""
        stmt = (
            select(Booking)
            .where(Booking.booker_id == booker_id, state_clause(state, now))
            .order_by(Booking.start.desc(), Booking.id.desc())
        )
        result = await self.session.execute(self._with_relations(paginate(stmt, page)))
        return list(result.scalars().all())

    async def find_by_owner_and_state(
        self, owner_id: int, state: BookingState, now: datetime, page: Page | None = None
    ) -> list[Booking]:
        """Bookings of items owned by `owner_id` matching `state`, newest start first."""
        stmt = (
            select(Booking)
            .join(Item, Booking.item_id == Item.id)
            .where(Item.owner_id == owner_id, state_clause(state, now))
            .order_by(Booking.start.desc(), Booking.id.desc())
        )
        result = await self.session.execute(self._with_relations(paginate(stmt, page)))
        return list(result.scalars().all())

    async def transition_status(self, booking_id: int, new_status: BookingStatus) -> bool:
        """
        Conditional update from WAITING. Returns False when the row was already decided,
        so of two concurrent decisions on the same booking only one can succeed.
        """
        result = await self.session.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == BookingStatus.WAITING)
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def find_short_bookings_for_items(
        self, item_ids: list[int], now: datetime, upcoming: bool
    ) -> dict[int, Booking]:
        """
        Approved bookings per item: with upcoming=False the latest one already started
        (start <= now), with upcoming=True the earliest one not yet started.
        Ties on start are broken by lowest id. Items without a match are absent.
        """
        if not item_ids:
            return {}
        stmt = select(Booking).where(
            Booking.item_id.in_(item_ids),
            Booking.status == BookingStatus.APPROVED,
        )
        if upcoming:
            stmt = stmt.where(Booking.start > now).order_by(
                Booking.item_id, Booking.start.asc(), Booking.id.asc()
            )
        else:
            stmt = stmt.where(Booking.start <= now).order_by(
                Booking.item_id, Booking.start.desc(), Booking.id.asc()
            )
        result = await self.session.execute(stmt)
        found: dict[int, Booking] = {}
        for booking in result.scalars().all():
            found.setdefault(booking.item_id, booking)
        return found

    async def find_last_and_next_for_items(
        self, item_ids: list[int], now: datetime
    ) -> tuple[dict[int, Booking], dict[int, Booking]]:
        last = await self.find_short_bookings_for_items(item_ids, now, upcoming=False)
        next_ = await self.find_short_bookings_for_items(item_ids, now, upcoming=True)
        return last, next_

    async def find_approved_by_booker_and_item(self, booker_id: int, item_id: int) -> list[Booking]:
        result = await self.session.execute(
            select(Booking).where(
                Booking.booker_id == booker_id,
                Booking.item_id == item_id,
                Booking.status == BookingStatus.APPROVED,
            )
        )
        return list(result.scalars().all())

    async def has_overlapping_approved(self, item_id: int, start: datetime, end: datetime) -> bool:
        """True if an approved booking of the item intersects [start, end)."""
        result = await self.session.execute(
            select(Booking.id)
            .where(
                Booking.item_id == item_id,
                Booking.status == BookingStatus.APPROVED,
                Booking.start < end,
                Booking.end > start,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def get_ids_by_item(self, item_id: int) -> list[int]:
        result = await self.session.execute(select(Booking.id).where(Booking.item_id == item_id))
        return list(result.scalars().all())

    async def get_ids_by_booker(self, booker_id: int) -> list[int]:
        result = await self.session.execute(select(Booking.id).where(Booking.booker_id == booker_id))
        return list(result.scalars().all())
