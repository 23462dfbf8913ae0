"""
Search endpoint - full-text search over available items.
Elasticsearch when enabled, database match otherwise.
"""

from fastapi import APIRouter, Query

from shareit.config import get_settings
from shareit.core.dependencies import CurrentUserId
from shareit.db.session import DbSession
from shareit.api.v1.endpoints.items import get_item_service

router = APIRouter()
settings = get_settings()


@router.get("/items")
async def search_items_endpoint(
    session: DbSession,
    user_id: CurrentUserId,
    q: str = Query(""),
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    hits = await get_item_service(session).search(q, skip=skip, limit=limit)
    return {"query": q, "results": [h.model_dump() for h in hits], "count": len(hits)}
