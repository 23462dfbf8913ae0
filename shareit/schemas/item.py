"""Item request/response schemas - REST API contract."""

from pydantic import BaseModel, Field

from shareit.schemas.booking import BookingShort
from shareit.schemas.comment import CommentResponse


class ItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    available: bool


class ItemCreate(ItemBase):
    request_id: int | None = None


class ItemUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    available: bool | None = None


class ItemResponse(ItemBase):
    id: int
    owner_id: int
    request_id: int | None = None

    model_config = {"from_attributes": True}


class ItemWithBookingInfoResponse(ItemResponse):
    comments: list[CommentResponse] = []
    # Populated only when the requester owns the item
    last_booking: BookingShort | None = None
    next_booking: BookingShort | None = None
