"""
Item request endpoints - ask for an item, browse what others are asking for.
"""

from fastapi import APIRouter, status

from shareit.core.dependencies import CurrentUserId, PageParams
from shareit.db.repositories.item_repository import ItemRepository
from shareit.db.repositories.item_request_repository import ItemRequestRepository
from shareit.db.session import DbSession
from shareit.schemas.item_request import ItemRequestCreate, ItemRequestResponse
from shareit.services.item_request_service import ItemRequestService

router = APIRouter()


def _get_request_service(session: DbSession) -> ItemRequestService:
    return ItemRequestService(ItemRequestRepository(session), ItemRepository(session))


@router.post("", response_model=ItemRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(session: DbSession, data: ItemRequestCreate, user_id: CurrentUserId):
    return await _get_request_service(session).create(user_id, data)


@router.get("", response_model=list[ItemRequestResponse])
async def list_own_requests(session: DbSession, user_id: CurrentUserId):
    """Caller's requests with the items listed in answer, newest first."""
    return await _get_request_service(session).list_own(user_id)


@router.get("/all", response_model=list[ItemRequestResponse])
async def list_other_requests(session: DbSession, user_id: CurrentUserId, page: PageParams):
    """Requests of other users. REST: GET /requests/all?from=0&size=10."""
    return await _get_request_service(session).list_others(user_id, page)


@router.get("/{request_id}", response_model=ItemRequestResponse)
async def get_request(session: DbSession, request_id: int, _: CurrentUserId):
    return await _get_request_service(session).get_by_id(request_id)
