"""
Authorization policy for bookings, items and comments.

The can_* predicates are pure. The ensure_* helpers raise the matching domain
exception and are what services call before changing or returning data.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from shareit.core.exceptions import (
    AccessDeniedException,
    ItemUnavailableException,
    SelfBookingException,
    ValidationException,
)
from shareit.domain.booking_state import BookingStatus

logger = logging.getLogger(__name__)


def can_create_booking(user_id: int, item) -> bool:
    """Item must be available and must not belong to the requester."""
    return bool(item.available) and user_id != item.owner_id


def can_approve(user_id: int, owner_id: int) -> bool:
    return user_id == owner_id


def can_view_booking(user_id: int, booker_id: int, owner_id: int) -> bool:
    return user_id in (booker_id, owner_id)


def can_edit_item(user_id: int, item) -> bool:
    return user_id == item.owner_id


def is_completed_rental(booking, user_id: int, item_id: int, now: datetime) -> bool:
    """Approved booking by this user for this item that has already ended."""
    return (
        booking.booker_id == user_id
        and booking.item_id == item_id
        and booking.status == BookingStatus.APPROVED
        and booking.end < now
    )


def can_comment(user_id: int, item_id: int, bookings: Iterable, now: datetime) -> bool:
    return any(is_completed_rental(b, user_id, item_id, now) for b in bookings)


def ensure_can_create_booking(user_id: int, item) -> None:
    if user_id == item.owner_id:
        logger.warning("User %s is the owner of item %s and cannot book it", user_id, item.id)
        raise SelfBookingException(
            f"User with id {user_id} is the owner of item with id {item.id}",
            details={"item_id": item.id},
        )
    if not item.available:
        logger.warning("Item %s is not available", item.id)
        raise ItemUnavailableException(
            f"Item with id {item.id} is not available",
            details={"item_id": item.id},
        )


def ensure_can_approve(user_id: int, booking) -> None:
    if not can_approve(user_id, booking.item.owner_id):
        logger.warning("User %s is not the owner of item in booking %s", user_id, booking.id)
        raise AccessDeniedException(
            f"User with id {user_id} is not the owner of item in booking with id {booking.id}"
        )


def ensure_can_view_booking(user_id: int, booking_id: int, booker_id: int, owner_id: int) -> None:
    if not can_view_booking(user_id, booker_id, owner_id):
        logger.warning("User %s is neither booker nor owner of booking %s", user_id, booking_id)
        raise AccessDeniedException(
            f"User with id {user_id} is not the booker or owner of booking with id {booking_id}"
        )


def ensure_can_edit_item(user_id: int, item) -> None:
    if not can_edit_item(user_id, item):
        logger.warning("User %s does not own item %s", user_id, item.id)
        raise AccessDeniedException(f"User with id {user_id} does not own item with id {item.id}")


def ensure_can_comment(user_id: int, item_id: int, bookings: Iterable, now: datetime) -> None:
    if not can_comment(user_id, item_id, bookings, now):
        logger.warning("User %s has no completed booking of item %s", user_id, item_id)
        raise ValidationException(
            "Cannot comment without a completed booking",
            code="CommentNotAllowed",
            details={"item_id": item_id},
        )


def can_delete_booking(user_id: int, booker_id: int) -> bool:
    return user_id == booker_id


def ensure_can_delete_booking(user_id: int, booking) -> None:
    if not can_delete_booking(user_id, booking.booker_id):
        logger.warning("Booking %s does not belong to user %s", booking.id, user_id)
        raise AccessDeniedException(
            f"Booking with id {booking.id} does not belong to user with id {user_id}"
        )


def ensure_can_manage_user(user_id: int, target_id: int) -> None:
    """Users edit and delete only their own account."""
    if user_id != target_id:
        logger.warning("User %s tried to manage account %s", user_id, target_id)
        raise AccessDeniedException(f"User with id {user_id} cannot modify user with id {target_id}")
