"""
Booking API tests - lifecycle over HTTP, error mapping and list filters.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from shareit.core.clock import utcnow
from shareit.domain.booking_state import BookingStatus

URL = "/api/v1/bookings"


def _window(start_in_hours: float = 1, length_hours: float = 1) -> tuple[str, str]:
    start = utcnow() + timedelta(hours=start_in_hours)
    return start.isoformat(), (start + timedelta(hours=length_hours)).isoformat()


async def _create(client: AsyncClient, headers: dict, item_id: int, **window) -> dict:
    start, end = _window(**window)
    response = await client.post(URL, headers=headers, json={"item_id": item_id, "start": start, "end": end})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_booking_requires_auth(client: AsyncClient, item):
    start, end = _window()
    response = await client.post(URL, json={"item_id": item.id, "start": start, "end": end})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_booking(client: AsyncClient, booker_headers: dict, item, booker):
    data = await _create(client, booker_headers, item.id)
    assert data["status"] == "WAITING"
    assert data["item"] == {"id": item.id, "name": item.name, "owner_id": item.owner_id}
    assert data["booker"] == {"id": booker.id, "name": booker.name}


@pytest.mark.asyncio
async def test_create_booking_accepts_offset_timestamps(client: AsyncClient, booker_headers: dict, item):
    start = (utcnow() + timedelta(days=1)).replace(microsecond=0)
    response = await client.post(
        URL,
        headers=booker_headers,
        json={
            "item_id": item.id,
            "start": start.isoformat() + "+02:00",
            "end": (start + timedelta(hours=1)).isoformat() + "+02:00",
        },
    )
    assert response.status_code == 201
    # stored and returned as UTC
    assert response.json()["start"] == (start - timedelta(hours=2)).isoformat()


@pytest.mark.asyncio
async def test_owner_cannot_book_own_item(client: AsyncClient, owner_headers: dict, item):
    start, end = _window()
    response = await client.post(URL, headers=owner_headers, json={"item_id": item.id, "start": start, "end": end})
    assert response.status_code == 403
    body = response.json()
    assert body["code"] == "SelfBookingException"
    assert body["status"] == 403
    assert body["details"] == {"item_id": item.id}


@pytest.mark.asyncio
async def test_unavailable_item(client: AsyncClient, booker_headers: dict, unavailable_item):
    start, end = _window()
    response = await client.post(
        URL, headers=booker_headers, json={"item_id": unavailable_item.id, "start": start, "end": end}
    )
    assert response.status_code == 400
    assert response.json()["code"] == "ItemUnavailableException"


@pytest.mark.asyncio
async def test_unknown_item(client: AsyncClient, booker_headers: dict):
    start, end = _window()
    response = await client.post(URL, headers=booker_headers, json={"item_id": 999, "start": start, "end": end})
    assert response.status_code == 404
    assert response.json()["code"] == "NotFoundException"


@pytest.mark.asyncio
async def test_end_before_start(client: AsyncClient, booker_headers: dict, item):
    start, end = _window(start_in_hours=2, length_hours=-1)
    response = await client.post(URL, headers=booker_headers, json={"item_id": item.id, "start": start, "end": end})
    assert response.status_code == 400
    assert response.json()["code"] == "InvalidWindow"


@pytest.mark.asyncio
async def test_start_in_past(client: AsyncClient, booker_headers: dict, item):
    start, end = _window(start_in_hours=-2)
    response = await client.post(URL, headers=booker_headers, json={"item_id": item.id, "start": start, "end": end})
    assert response.status_code == 400
    assert response.json()["code"] == "StartInPast"


@pytest.mark.asyncio
async def test_missing_fields(client: AsyncClient, booker_headers: dict, item):
    response = await client.post(URL, headers=booker_headers, json={"item_id": item.id})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_owner_approves_once(client: AsyncClient, booker_headers: dict, owner_headers: dict, item):
    booking = await _create(client, booker_headers, item.id)

    response = await client.patch(f"{URL}/{booking['id']}", headers=owner_headers, params={"approved": "true"})
    assert response.status_code == 200
    assert response.json()["status"] == "APPROVED"

    response = await client.patch(f"{URL}/{booking['id']}", headers=owner_headers, params={"approved": "false"})
    assert response.status_code == 409
    assert response.json()["code"] == "InvalidStateException"

    response = await client.get(f"{URL}/{booking['id']}", headers=booker_headers)
    assert response.json()["status"] == "APPROVED"


@pytest.mark.asyncio
async def test_owner_rejects(client: AsyncClient, booker_headers: dict, owner_headers: dict, item):
    booking = await _create(client, booker_headers, item.id)
    response = await client.patch(f"{URL}/{booking['id']}", headers=owner_headers, params={"approved": "false"})
    assert response.status_code == 200
    assert response.json()["status"] == "REJECTED"


@pytest.mark.asyncio
async def test_booker_cannot_approve(client: AsyncClient, booker_headers: dict, item):
    booking = await _create(client, booker_headers, item.id)
    response = await client.patch(f"{URL}/{booking['id']}", headers=booker_headers, params={"approved": "true"})
    assert response.status_code == 403
    assert response.json()["code"] == "AccessDeniedException"


@pytest.mark.asyncio
async def test_approve_requires_flag(client: AsyncClient, booker_headers: dict, owner_headers: dict, item):
    booking = await _create(client, booker_headers, item.id)
    response = await client.patch(f"{URL}/{booking['id']}", headers=owner_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_approve_unknown_booking(client: AsyncClient, owner_headers: dict):
    response = await client.patch(f"{URL}/999", headers=owner_headers, params={"approved": "true"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_booking_visibility(
    client: AsyncClient, booker_headers: dict, owner_headers: dict, stranger_headers: dict, item
):
    booking = await _create(client, booker_headers, item.id)
    assert (await client.get(f"{URL}/{booking['id']}", headers=booker_headers)).status_code == 200
    assert (await client.get(f"{URL}/{booking['id']}", headers=owner_headers)).status_code == 200

    response = await client.get(f"{URL}/{booking['id']}", headers=stranger_headers)
    assert response.status_code == 403
    assert (await client.get(f"{URL}/999", headers=booker_headers)).status_code == 404


@pytest.mark.asyncio
async def test_list_by_state(
    client: AsyncClient, booker_headers: dict, owner_headers: dict, item, booker, add_booking
):
    now = utcnow()
    past = await add_booking(item, booker, now - timedelta(days=2), now - timedelta(days=1), BookingStatus.APPROVED)
    current = await add_booking(item, booker, now - timedelta(hours=1), now + timedelta(days=1), BookingStatus.APPROVED)
    future = await add_booking(item, booker, now + timedelta(days=2), now + timedelta(days=3))
    rejected = await add_booking(
        item, booker, now + timedelta(days=4), now + timedelta(days=5), BookingStatus.REJECTED
    )

    expected = {
        "ALL": [rejected.id, future.id, current.id, past.id],
        "CURRENT": [current.id],
        "PAST": [past.id],
        "FUTURE": [rejected.id, future.id],
        "WAITING": [future.id],
        "rejected": [rejected.id],
    }
    for state, ids in expected.items():
        response = await client.get(URL, headers=booker_headers, params={"state": state})
        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == ids, state

        response = await client.get(f"{URL}/owner", headers=owner_headers, params={"state": state})
        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == ids, state


@pytest.mark.asyncio
async def test_list_defaults_to_all(client: AsyncClient, booker_headers: dict, item):
    booking = await _create(client, booker_headers, item.id)
    response = await client.get(URL, headers=booker_headers)
    assert [b["id"] for b in response.json()] == [booking["id"]]


@pytest.mark.asyncio
async def test_owner_list_excludes_other_owners(client: AsyncClient, booker_headers: dict, stranger_headers: dict, item):
    await _create(client, booker_headers, item.id)
    response = await client.get(f"{URL}/owner", headers=stranger_headers)
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_unknown_state(client: AsyncClient, booker_headers: dict):
    response = await client.get(URL, headers=booker_headers, params={"state": "UNSUPPORTED_STATUS"})
    assert response.status_code == 400
    assert response.json()["error"] == "Unknown state: UNSUPPORTED_STATUS"

    response = await client.get(f"{URL}/owner", headers=booker_headers, params={"state": "SOON"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_paging(client: AsyncClient, booker_headers: dict, item):
    created = [await _create(client, booker_headers, item.id, start_in_hours=i) for i in range(1, 6)]
    newest_first = [b["id"] for b in reversed(created)]

    response = await client.get(URL, headers=booker_headers, params={"from": 1, "size": 2})
    assert [b["id"] for b in response.json()] == newest_first[1:3]

    # from without size: whole list
    response = await client.get(URL, headers=booker_headers, params={"from": 3})
    assert [b["id"] for b in response.json()] == newest_first


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"from": -1, "size": 2}, {"from": 0, "size": 0}])
async def test_invalid_paging(client: AsyncClient, booker_headers: dict, params):
    response = await client.get(URL, headers=booker_headers, params=params)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_booker_deletes_booking(client: AsyncClient, booker_headers: dict, owner_headers: dict, item):
    booking = await _create(client, booker_headers, item.id)
    await client.patch(f"{URL}/{booking['id']}", headers=owner_headers, params={"approved": "true"})

    response = await client.delete(f"{URL}/{booking['id']}", headers=booker_headers)
    assert response.status_code == 204
    assert (await client.get(f"{URL}/{booking['id']}", headers=booker_headers)).status_code == 404
    assert (await client.get(URL, headers=booker_headers)).json() == []


@pytest.mark.asyncio
async def test_only_booker_deletes_booking(
    client: AsyncClient, booker_headers: dict, owner_headers: dict, stranger_headers: dict, item
):
    booking = await _create(client, booker_headers, item.id)
    for headers in (owner_headers, stranger_headers):
        response = await client.delete(f"{URL}/{booking['id']}", headers=headers)
        assert response.status_code == 403
        assert response.json()["code"] == "AccessDeniedException"
    assert (await client.get(f"{URL}/{booking['id']}", headers=booker_headers)).status_code == 200


@pytest.mark.asyncio
async def test_delete_unknown_booking(client: AsyncClient, booker_headers: dict):
    assert (await client.delete(f"{URL}/999", headers=booker_headers)).status_code == 404
