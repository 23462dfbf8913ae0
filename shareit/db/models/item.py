"""
Item model - something an owner lists for lending.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shareit.db.base import Base

if TYPE_CHECKING:
    from shareit.db.models.comment import Comment
    from shareit.db.models.user import User


class Item(Base):
    """Item entity. `available` is a point-in-time flag, not a calendar of booked windows."""

    __tablename__ = "items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    available: Mapped[bool] = mapped_column(nullable=False, default=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    # Set when the item was listed in answer to an item request
    request_id: Mapped[int | None] = mapped_column(ForeignKey("item_requests.id"), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    owner: Mapped["User"] = relationship("User", back_populates="items")
    comments: Mapped[list["Comment"]] = relationship(
        "Comment", back_populates="item", order_by="Comment.created_at", lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, name={self.name}, owner_id={self.owner_id}, available={self.available})>"
