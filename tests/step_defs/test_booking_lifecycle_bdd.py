"""
BDD step definitions for the booking lifecycle (pytest-bdd).
Runs the authorization policy and the approval transition without a database.
"""

from types import SimpleNamespace

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from shareit.core.exceptions import DomainException
from shareit.domain import policy
from shareit.domain.booking_state import BookingStatus, decide

scenarios("../features/booking_lifecycle.feature")


@pytest.fixture
def context():
    return {}


@given(parsers.parse("an available item owned by user {owner_id:d}"))
def available_item(context, owner_id):
    context["item"] = SimpleNamespace(id=1, owner_id=owner_id, available=True)


def _request_booking(context, user_id):
    item = context["item"]
    try:
        policy.ensure_can_create_booking(user_id, item)
    except DomainException as e:
        context["error"] = e
        return
    context["booking"] = SimpleNamespace(id=1, booker_id=user_id, item=item, status=BookingStatus.WAITING)


@given(parsers.parse("user {user_id:d} requested a booking of the item"))
def requested_booking(context, user_id):
    _request_booking(context, user_id)
    assert "booking" in context


@when(parsers.parse("user {user_id:d} requests a booking of the item"))
def request_booking(context, user_id):
    _request_booking(context, user_id)


def _decide(context, user_id, approved):
    booking = context["booking"]
    try:
        policy.ensure_can_approve(user_id, booking)
        booking.status = decide(booking.status, approved, booking.id)
    except DomainException as e:
        context["error"] = e


@given(parsers.parse("user {user_id:d} approves the booking"))
@when(parsers.parse("user {user_id:d} approves the booking"))
def approve(context, user_id):
    _decide(context, user_id, True)


@when(parsers.parse("user {user_id:d} rejects the booking"))
def reject(context, user_id):
    _decide(context, user_id, False)


@then(parsers.parse('the booking status should be "{status}"'))
def booking_status(context, status):
    assert context["booking"].status == BookingStatus(status)


@then(parsers.parse('the decision should fail with "{code}"'))
@then(parsers.parse('the request should fail with "{code}"'))
def failed_with(context, code):
    assert context["error"].code == code
