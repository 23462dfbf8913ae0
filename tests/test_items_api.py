"""
Item API tests - REST CRUD, owner-only edits, booking context and comments.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from shareit.core.clock import utcnow
from shareit.domain.booking_state import BookingStatus

URL = "/api/v1/items"


@pytest.mark.asyncio
async def test_list_items_empty(client: AsyncClient, owner_headers: dict):
    """GET /api/v1/items returns 200 and the caller's items."""
    response = await client.get(URL, headers=owner_headers)
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_create_item_requires_auth(client: AsyncClient):
    response = await client.post(URL, json={"name": "Foo", "description": "Bar", "available": True})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_item_with_auth(client: AsyncClient, owner_headers: dict, owner):
    """POST /api/v1/items with valid token creates item owned by the caller."""
    response = await client.post(
        URL,
        headers=owner_headers,
        json={"name": "Test Item", "description": "Desc", "available": True},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Test Item"
    assert data["available"] is True
    assert data["owner_id"] == owner.id
    assert "id" in data


@pytest.mark.asyncio
async def test_create_item_validation(client: AsyncClient, owner_headers: dict):
    """Missing availability or blank name returns 422."""
    response = await client.post(URL, headers=owner_headers, json={"name": "X", "description": "Y"})
    assert response.status_code == 422
    response = await client.post(URL, headers=owner_headers, json={"name": "", "description": "Y", "available": True})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_item_by_owner(client: AsyncClient, owner_headers: dict, item):
    response = await client.patch(f"{URL}/{item.id}", headers=owner_headers, json={"available": False})
    assert response.status_code == 200
    data = response.json()
    assert data["available"] is False
    assert data["name"] == item.name


@pytest.mark.asyncio
async def test_update_item_by_non_owner(client: AsyncClient, booker_headers: dict, item):
    response = await client.patch(f"{URL}/{item.id}", headers=booker_headers, json={"name": "Mine now"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_get_item_not_found(client: AsyncClient, owner_headers: dict):
    response = await client.get(f"{URL}/99999", headers=owner_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "NotFoundException"


@pytest.mark.asyncio
async def test_owner_sees_last_and_next_booking(
    client: AsyncClient, owner_headers: dict, booker_headers: dict, item, booker, add_booking
):
    now = utcnow()
    last = await add_booking(item, booker, now - timedelta(days=2), now - timedelta(days=1), BookingStatus.APPROVED)
    next_ = await add_booking(item, booker, now + timedelta(days=1), now + timedelta(days=2), BookingStatus.APPROVED)
    await add_booking(item, booker, now + timedelta(hours=1), now + timedelta(hours=2), BookingStatus.WAITING)

    data = (await client.get(f"{URL}/{item.id}", headers=owner_headers)).json()
    assert data["last_booking"]["id"] == last.id
    assert data["last_booking"]["booker_id"] == booker.id
    assert data["next_booking"]["id"] == next_.id

    # the owner's item list carries the same context
    listed = (await client.get(URL, headers=owner_headers)).json()
    assert listed[0]["next_booking"]["id"] == next_.id

    # other users see the item without booking context
    data = (await client.get(f"{URL}/{item.id}", headers=booker_headers)).json()
    assert data["last_booking"] is None
    assert data["next_booking"] is None


@pytest.mark.asyncio
async def test_item_without_bookings_has_no_context(client: AsyncClient, owner_headers: dict, item):
    data = (await client.get(f"{URL}/{item.id}", headers=owner_headers)).json()
    assert data["last_booking"] is None
    assert data["next_booking"] is None
    assert data["comments"] == []


@pytest.mark.asyncio
async def test_comment_requires_completed_booking(
    client: AsyncClient, booker_headers: dict, item, booker, add_booking
):
    now = utcnow()
    response = await client.post(f"{URL}/{item.id}/comment", headers=booker_headers, json={"text": "Great drill"})
    assert response.status_code == 400
    assert response.json()["code"] == "CommentNotAllowed"

    # approved but still running
    await add_booking(item, booker, now - timedelta(hours=1), now + timedelta(hours=1), BookingStatus.APPROVED)
    response = await client.post(f"{URL}/{item.id}/comment", headers=booker_headers, json={"text": "Great drill"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_comment_after_completed_booking(
    client: AsyncClient, booker_headers: dict, stranger_headers: dict, item, booker, add_booking
):
    now = utcnow()
    await add_booking(item, booker, now - timedelta(days=2), now - timedelta(days=1), BookingStatus.APPROVED)

    response = await client.post(f"{URL}/{item.id}/comment", headers=booker_headers, json={"text": "Great drill"})
    assert response.status_code == 201
    data = response.json()
    assert data["text"] == "Great drill"
    assert data["author_name"] == booker.name
    assert data["item_id"] == item.id

    item_view = (await client.get(f"{URL}/{item.id}", headers=stranger_headers)).json()
    assert [c["text"] for c in item_view["comments"]] == ["Great drill"]

    # a completed rental by someone else does not qualify
    response = await client.post(f"{URL}/{item.id}/comment", headers=stranger_headers, json={"text": "Me too"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_comment_on_unknown_item(client: AsyncClient, booker_headers: dict):
    response = await client.post(f"{URL}/99999/comment", headers=booker_headers, json={"text": "Hi"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_search_available_items(client: AsyncClient, booker_headers: dict, item, unavailable_item):
    """Database search when Elasticsearch is disabled: only available items match."""
    response = await client.get("/api/v1/search/items", headers=booker_headers, params={"q": "DRILL"})
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    assert data["results"][0]["id"] == item.id

    response = await client.get("/api/v1/search/items", headers=booker_headers, params={"q": "ladder"})
    assert response.json()["count"] == 0


@pytest.mark.asyncio
async def test_search_blank_text(client: AsyncClient, booker_headers: dict, item):
    response = await client.get("/api/v1/search/items", headers=booker_headers, params={"q": "  "})
    assert response.status_code == 200
    assert response.json() == {"query": "  ", "results": [], "count": 0}
