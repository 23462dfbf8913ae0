"""
Item endpoints - list, edit, view with booking context, comment.
Design: Thin controller; service layer holds business logic.
"""

from fastapi import APIRouter, status

from shareit.core.dependencies import CurrentUserId
from shareit.db.repositories.booking_repository import BookingRepository
from shareit.db.repositories.comment_repository import CommentRepository
from shareit.db.repositories.item_repository import ItemRepository
from shareit.db.session import DbSession
from shareit.schemas.comment import CommentCreate, CommentResponse
from shareit.schemas.item import ItemCreate, ItemResponse, ItemUpdate, ItemWithBookingInfoResponse
from shareit.services.booking_service import BookingService
from shareit.services.item_service import ItemService

router = APIRouter()


def get_item_service(session: DbSession) -> ItemService:
    """Factory for service with repository injection (Dependency Inversion)."""
    item_repo = ItemRepository(session)
    bookings = BookingService(BookingRepository(session), item_repo)
    return ItemService(item_repo, CommentRepository(session), bookings)


@router.get("", response_model=list[ItemWithBookingInfoResponse])
async def list_own_items(session: DbSession, user_id: CurrentUserId):
    """Caller's items with last/next approved booking and comments."""
    return await get_item_service(session).list_for_owner(user_id)


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(session: DbSession, data: ItemCreate, user_id: CurrentUserId):
    """List a new item; the caller becomes its owner."""
    return await get_item_service(session).create(user_id, data)


@router.get("/{item_id}", response_model=ItemWithBookingInfoResponse)
async def get_item(session: DbSession, item_id: int, user_id: CurrentUserId):
    return await get_item_service(session).get_by_id(item_id, user_id)


@router.patch("/{item_id}", response_model=ItemResponse)
async def update_item(session: DbSession, item_id: int, data: ItemUpdate, user_id: CurrentUserId):
    """Owner-only partial update (name, description, availability)."""
    return await get_item_service(session).update(item_id, user_id, data)


@router.post("/{item_id}/comment", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(session: DbSession, item_id: int, data: CommentCreate, user_id: CurrentUserId):
    """Requires a completed (approved and ended) booking of the item by the caller."""
    return await get_item_service(session).add_comment(item_id, user_id, data)
