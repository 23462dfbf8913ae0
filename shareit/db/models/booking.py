"""
Booking model - a time-bounded reservation of an item by a booker.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shareit.db.base import Base
from shareit.domain.booking_state import BookingStatus

if TYPE_CHECKING:
    from shareit.db.models.item import Item
    from shareit.db.models.user import User


class Booking(Base):
    """Booking entity. start/end are naive UTC; status changes exactly once, from WAITING."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("start_date < end_date", name="ck_bookings_window"),
        Index("ix_bookings_item_status_start", "item_id", "status", "start_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("items.id"), nullable=False, index=True)
    booker_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    start: Mapped[datetime] = mapped_column("start_date", DateTime(), nullable=False)
    end: Mapped[datetime] = mapped_column("end_date", DateTime(), nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, name="booking_status", native_enum=False, length=16),
        nullable=False,
        default=BookingStatus.WAITING,
    )

    item: Mapped["Item"] = relationship("Item")
    booker: Mapped["User"] = relationship("User")

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, item_id={self.item_id}, booker_id={self.booker_id}, "
            f"start={self.start}, end={self.end}, status={self.status})>"
        )
