"""
Booking endpoints - request, decide, read and list bookings.
Design: Thin controller; BookingService holds the lifecycle and access rules.
"""

from fastapi import APIRouter, Query, status

from shareit.core.dependencies import CurrentUserId, PageParams
from shareit.db.repositories.booking_repository import BookingRepository
from shareit.db.repositories.item_repository import ItemRepository
from shareit.db.session import DbSession
from shareit.domain.booking_state import BookingState
from shareit.schemas.booking import BookingCreate, BookingResponse
from shareit.services.booking_service import BookingService

router = APIRouter()


def _get_booking_service(session: DbSession) -> BookingService:
    return BookingService(BookingRepository(session), ItemRepository(session))


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(session: DbSession, data: BookingCreate, user_id: CurrentUserId):
    """Request a booking of someone else's item. Starts in WAITING."""
    return await _get_booking_service(session).create(user_id, data)


@router.get("/owner", response_model=list[BookingResponse])
async def list_owner_bookings(
    session: DbSession,
    user_id: CurrentUserId,
    page: PageParams,
    state: str = Query("ALL"),
):
    """Bookings of the caller's items. REST: GET /bookings/owner?state=FUTURE&from=0&size=10."""
    svc = _get_booking_service(session)
    return await svc.list_for_owner(user_id, BookingState.parse(state), page)


@router.get("", response_model=list[BookingResponse])
async def list_booker_bookings(
    session: DbSession,
    user_id: CurrentUserId,
    page: PageParams,
    state: str = Query("ALL"),
):
    """Bookings made by the caller, newest start first."""
    svc = _get_booking_service(session)
    return await svc.list_for_booker(user_id, BookingState.parse(state), page)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(session: DbSession, booking_id: int, user_id: CurrentUserId):
    """Visible to the booker and the item owner only."""
    return await _get_booking_service(session).get_by_id(booking_id, user_id)


@router.patch("/{booking_id}", response_model=BookingResponse)
async def approve_booking(
    session: DbSession,
    booking_id: int,
    user_id: CurrentUserId,
    approved: bool = Query(...),
):
    """Owner approves (approved=true) or rejects (approved=false) a WAITING booking."""
    return await _get_booking_service(session).approve(booking_id, user_id, approved)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(session: DbSession, booking_id: int, user_id: CurrentUserId):
    """Booker only."""
    await _get_booking_service(session).delete(booking_id, user_id)
