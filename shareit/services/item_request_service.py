"""
Item request service - users ask for items; owners answer by listing items against a request.
"""

import logging

from shareit.core.exceptions import NotFoundException
from shareit.db.models.item_request import ItemRequest
from shareit.db.repositories.base_repository import Page
from shareit.db.repositories.item_repository import ItemRepository
from shareit.db.repositories.item_request_repository import ItemRequestRepository
from shareit.schemas.item import ItemResponse
from shareit.schemas.item_request import ItemRequestCreate, ItemRequestResponse

logger = logging.getLogger(__name__)


class ItemRequestService:
    def __init__(self, request_repo: ItemRequestRepository, item_repo: ItemRepository):
        self.request_repo = request_repo
        self.item_repo = item_repo

    async def _to_responses(self, requests: list[ItemRequest]) -> list[ItemRequestResponse]:
        answers = await self.item_repo.get_by_request_ids([r.id for r in requests])
        return [
            ItemRequestResponse(
                id=r.id,
                description=r.description,
                created=r.created_at,
                items=[ItemResponse.model_validate(i) for i in answers.get(r.id, [])],
            )
            for r in requests
        ]

    async def create(self, requestor_id: int, data: ItemRequestCreate) -> ItemRequestResponse:
        request = await self.request_repo.add(
            ItemRequest(description=data.description, requestor_id=requestor_id)
        )
        logger.info("User %s added item request %s", requestor_id, request.id)
        return ItemRequestResponse(id=request.id, description=request.description, created=request.created_at)

    async def list_own(self, requestor_id: int) -> list[ItemRequestResponse]:
        requests = await self.request_repo.find_by_requestor(requestor_id)
        logger.debug("Found %d requests of user %s", len(requests), requestor_id)
        return await self._to_responses(requests)

    async def list_others(self, user_id: int, page: Page | None = None) -> list[ItemRequestResponse]:
        """Requests by other users, newest first."""
        requests = await self.request_repo.find_by_others(user_id, page)
        return await self._to_responses(requests)

    async def get_by_id(self, request_id: int) -> ItemRequestResponse:
        request = await self.request_repo.get_by_id(request_id)
        if request is None:
            logger.warning("Item request %s not found", request_id)
            raise NotFoundException(f"ItemRequest with id {request_id} not found")
        return (await self._to_responses([request]))[0]
