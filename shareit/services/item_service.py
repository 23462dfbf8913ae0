"""
Item service - item listing, owner edits, comments and search.
Booking context (last/next booking, comment eligibility) comes from BookingService.
"""

import logging

from shareit.config import get_settings
from shareit.core.exceptions import NotFoundException
from shareit.db.models.comment import Comment
from shareit.db.models.item import Item
from shareit.db.repositories.base_repository import Page
from shareit.db.repositories.comment_repository import CommentRepository
from shareit.db.repositories.item_repository import ItemRepository
from shareit.db.repositories.item_request_repository import ItemRequestRepository
from shareit.domain import policy
from shareit.queue.tasks import index_item_task
from shareit.schemas.comment import CommentCreate, CommentResponse
from shareit.schemas.item import ItemCreate, ItemResponse, ItemUpdate, ItemWithBookingInfoResponse
from shareit.search.elasticsearch_client import search_items
from shareit.services.booking_service import BookingService, invalidate_cached_bookings

logger = logging.getLogger(__name__)
settings = get_settings()


def item_to_doc(item: Item) -> dict:
    """Document for the Elasticsearch items index."""
    return {
        "id": item.id,
        "name": item.name,
        "description": item.description,
        "available": item.available,
        "owner_id": item.owner_id,
    }


def _comment_to_response(comment: Comment) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        text=comment.text,
        item_id=comment.item_id,
        author_name=comment.author.name,
        created=comment.created_at,
    )


class ItemService:
    def __init__(
        self,
        item_repo: ItemRepository,
        comment_repo: CommentRepository,
        bookings: BookingService,
        search_enabled: bool | None = None,
        request_repo: ItemRequestRepository | None = None,
    ):
        self.item_repo = item_repo
        self.comment_repo = comment_repo
        self.bookings = bookings
        self.request_repo = request_repo or ItemRequestRepository(item_repo.session)
        self.search_enabled = settings.search_enabled if search_enabled is None else search_enabled

    def _enqueue_index(self, item: Item) -> None:
        """Hand indexing to the worker; a broker outage must not fail the write."""
        if not self.search_enabled:
            return
        try:
            index_item_task.delay(item_to_doc(item))
        except Exception as e:
            logger.warning("Could not enqueue indexing of item %s: %s", item.id, e)

    async def _get_or_404(self, item_id: int) -> Item:
        item = await self.item_repo.get_by_id(item_id)
        if item is None:
            logger.warning("Item with id %s not found", item_id)
            raise NotFoundException(f"Item with id {item_id} not found")
        return item

    async def _with_booking_info(
        self, items: list[Item], owner_view: bool
    ) -> list[ItemWithBookingInfoResponse]:
        item_ids = [i.id for i in items]
        comments = await self.comment_repo.get_by_item_ids(item_ids)
        booking_info = await self.bookings.last_and_next_for_items(item_ids) if owner_view else {}
        responses = []
        for item in items:
            last, next_ = booking_info.get(item.id, (None, None))
            responses.append(
                ItemWithBookingInfoResponse(
                    id=item.id,
                    name=item.name,
                    description=item.description,
                    available=item.available,
                    owner_id=item.owner_id,
                    request_id=item.request_id,
                    comments=[_comment_to_response(c) for c in comments.get(item.id, [])],
                    last_booking=last,
                    next_booking=next_,
                )
            )
        return responses

    async def create(self, owner_id: int, data: ItemCreate) -> ItemResponse:
        """List an item, optionally in answer to an item request."""
        if data.request_id is not None and await self.request_repo.get_by_id(data.request_id) is None:
            logger.warning("Item request %s not found", data.request_id)
            raise NotFoundException(f"ItemRequest with id {data.request_id} not found")
        item = await self.item_repo.add(
            Item(
                name=data.name,
                description=data.description,
                available=data.available,
                owner_id=owner_id,
                request_id=data.request_id,
            )
        )
        self._enqueue_index(item)
        logger.info("User %s listed item %s", owner_id, item.id)
        return ItemResponse.model_validate(item)

    async def update(self, item_id: int, user_id: int, data: ItemUpdate) -> ItemResponse:
        """Partial update by the owner; availability is owner-controlled."""
        item = await self._get_or_404(item_id)
        policy.ensure_can_edit_item(user_id, item)
        if data.name is not None and data.name != item.name:
            item.name = data.name
            # Cached booking details carry the item name
            invalidate_cached_bookings(
                self.item_repo.session, await self.bookings.booking_repo.get_ids_by_item(item.id)
            )
        if data.description is not None:
            item.description = data.description
        if data.available is not None:
            item.available = data.available
        await self.item_repo.session.flush()
        await self.item_repo.session.refresh(item)
        self._enqueue_index(item)
        logger.info("User %s updated item %s", user_id, item.id)
        return ItemResponse.model_validate(item)

    async def get_by_id(self, item_id: int, requester_id: int) -> ItemWithBookingInfoResponse:
        """Item with comments; last/next booking is shown to the owner only."""
        item = await self._get_or_404(item_id)
        owner_view = item.owner_id == requester_id
        return (await self._with_booking_info([item], owner_view))[0]

    async def list_for_owner(self, owner_id: int) -> list[ItemWithBookingInfoResponse]:
        items = await self.item_repo.get_by_owner(owner_id)
        logger.debug("Fetched %d items of owner %s", len(items), owner_id)
        return await self._with_booking_info(items, owner_view=True)

    async def search(self, text: str, skip: int = 0, limit: int = 20) -> list[ItemResponse]:
        """Available items matching the text. Blank text matches nothing."""
        if not text or not text.strip():
            return []
        if self.search_enabled:
            hits = await search_items(query=text, skip=skip, limit=limit)
            return [ItemResponse.model_validate(hit) for hit in hits]
        items = await self.item_repo.search_available(text.strip(), Page(offset=skip, limit=limit))
        return [ItemResponse.model_validate(i) for i in items]

    async def add_comment(self, item_id: int, author_id: int, data: CommentCreate) -> CommentResponse:
        """Comment on an item after a completed rental of it."""
        item = await self._get_or_404(item_id)
        await self.bookings.ensure_eligible_to_comment(author_id, item.id)
        comment = await self.comment_repo.add(Comment(text=data.text, item_id=item.id, author_id=author_id))
        comment = await self.comment_repo.get_by_id_with_author(comment.id)
        logger.info("User %s commented on item %s", author_id, item.id)
        return _comment_to_response(comment)
