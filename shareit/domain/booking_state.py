"""
Booking statuses, the approval transition and the read-time state filter.

Statuses are stored on the booking row. Filter states (CURRENT, PAST, ...) are
never stored: they are computed from start, end, status and a single "now"
captured per query.
"""

from datetime import datetime
from enum import Enum

from shareit.core.exceptions import InvalidStateException, ValidationException


class BookingStatus(str, Enum):
    WAITING = "WAITING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self is not BookingStatus.WAITING


class BookingState(str, Enum):
    """Filter requested by a booker or owner when listing bookings."""

    ALL = "ALL"
    CURRENT = "CURRENT"
    PAST = "PAST"
    FUTURE = "FUTURE"
    WAITING = "WAITING"
    REJECTED = "REJECTED"

    @classmethod
    def parse(cls, value: str | None) -> "BookingState":
        """Case-insensitive lookup; missing value means ALL."""
        if value is None or not value.strip():
            return cls.ALL
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValidationException(f"Unknown state: {value}", code="UnknownState") from None


def matches_state(
    state: BookingState,
    now: datetime,
    start: datetime,
    end: datetime,
    status: BookingStatus,
) -> bool:
    """True if a booking with this window and status belongs to the filter at `now`."""
    if state is BookingState.ALL:
        return True
    if state is BookingState.CURRENT:
        return start <= now < end
    if state is BookingState.PAST:
        return end < now
    if state is BookingState.FUTURE:
        return start > now
    if state is BookingState.WAITING:
        return status == BookingStatus.WAITING
    if state is BookingState.REJECTED:
        return status == BookingStatus.REJECTED
    raise ValidationException(f"Unknown state: {state}", code="UnknownState")


def decide(current: BookingStatus, approved: bool, booking_id: int | None = None) -> BookingStatus:
    """
    Approval transition. WAITING is the only state that accepts a decision;
    deciding an already decided booking is an error, not a no-op.
    """
    if current.is_terminal:
        raise InvalidStateException(
            f"Booking with id {booking_id} is already {current.value}",
            details={"booking_id": booking_id, "status": current.value},
        )
    return BookingStatus.APPROVED if approved else BookingStatus.REJECTED
