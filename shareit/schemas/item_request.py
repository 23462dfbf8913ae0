"""Item request schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from shareit.schemas.item import ItemResponse


class ItemRequestCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=2000)


class ItemRequestResponse(BaseModel):
    id: int
    description: str
    created: datetime
    # Items owners listed in answer to this request
    items: list[ItemResponse] = []
