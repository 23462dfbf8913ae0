"""Booking request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from shareit.core.clock import to_naive_utc
from shareit.domain.booking_state import BookingStatus
from shareit.schemas.user import UserShort


class BookingCreate(BaseModel):
    # Window ordering (end after start, start not in the past) is a domain rule checked by the service
    item_id: int
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _normalize(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class BookingItem(BaseModel):
    id: int
    name: str
    owner_id: int

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    id: int
    item: BookingItem
    booker: UserShort
    start: datetime
    end: datetime
    status: BookingStatus

    model_config = {"from_attributes": True}


class BookingShort(BaseModel):
    """Compact booking used for an item's last/next booking."""

    id: int
    booker_id: int
    item_id: int
    start: datetime
    end: datetime

    model_config = {"from_attributes": True}
