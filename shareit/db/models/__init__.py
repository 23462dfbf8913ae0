from shareit.db.models.booking import Booking
from shareit.db.models.comment import Comment
from shareit.db.models.item import Item
from shareit.db.models.item_request import ItemRequest
from shareit.db.models.user import User

__all__ = ["User", "Item", "ItemRequest", "Booking", "Comment"]
