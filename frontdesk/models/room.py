"""
Room inventory models.
"""

from datetime import date as Date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, Date as SQLDate, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from frontdesk.models.base import TimestampModel, enum_column
from frontdesk.models.enums import RoomStatus

if TYPE_CHECKING:
    from frontdesk.models.booking import BookingRoom
    from frontdesk.models.staff import Staff

__all__ = ["RoomType", "Room", "BlockedRoom"]


class RoomType(TimestampModel):
    """
    Room category with its nightly base price.

    The base price is copied onto each booking room when a booking is
    created, so later price changes do not affect existing bookings.
    """

    __tablename__ = "room_types"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    base_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0.00"),
        comment="Nightly rate",
    )
    max_occupancy: Mapped[int] = mapped_column(Integer, nullable=False, default=2)

    rooms: Mapped[List["Room"]] = relationship(back_populates="room_type")


class Room(TimestampModel):
    """A physical room identified by its number."""

    __tablename__ = "rooms"

    number: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    floor: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    room_type_id: Mapped[str] = mapped_column(
        ForeignKey("room_types.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    status: Mapped[RoomStatus] = mapped_column(
        enum_column(RoomStatus),
        nullable=False,
        default=RoomStatus.AVAILABLE,
        index=True,
    )

    room_type: Mapped["RoomType"] = relationship(back_populates="rooms")
    booking_rooms: Mapped[List["BookingRoom"]] = relationship(back_populates="room")

    @property
    def room_type_name(self) -> Optional[str]:
        return self.room_type.name if self.room_type else None


class BlockedRoom(TimestampModel):
    """
    A period a room was taken out of service.

    A block stays active until the room is unblocked; the unblock fields
    are filled in at that point.
    """

    __tablename__ = "blocked_rooms"

    room_id: Mapped[str] = mapped_column(ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    blocked_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now, index=True)
    blocked_from_date: Mapped[Date] = mapped_column(SQLDate, nullable=False)
    blocked_to_date: Mapped[Date] = mapped_column(SQLDate, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    blocked_by_staff_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"),
        nullable=True,
    )
    unblocked_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    unblock_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    unblocked_by_staff_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"),
        nullable=True,
    )

    room: Mapped["Room"] = relationship()
    blocked_by: Mapped[Optional["Staff"]] = relationship(foreign_keys=[blocked_by_staff_id])
    unblocked_by: Mapped[Optional["Staff"]] = relationship(foreign_keys=[unblocked_by_staff_id])
