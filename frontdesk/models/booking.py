"""
Booking models.

A booking belongs to one guest and spans one or more booking rooms.
Each booking room carries its own dates, actual timestamps, status and
the nightly rate captured at booking time.
"""

from datetime import date as Date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    Date as SQLDate,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from frontdesk.models.base import TimestampModel, enum_column
from frontdesk.models.enums import ArrivalType, BookingRoomStatus, BookingStatus

if TYPE_CHECKING:
    from frontdesk.models.guest import Guest
    from frontdesk.models.payment import BookingPaymentBreakdown, ChargeItem, PaymentTransaction
    from frontdesk.models.room import Room
    from frontdesk.models.staff import Staff

__all__ = ["Booking", "BookingRoom", "CancelledBooking", "RoomTransfer"]


class Booking(TimestampModel):
    """
    Guest stay record.

    Attributes:
        booking_number: Human-readable reference (e.g. BK20240101093000123)
        check_in: Planned arrival date
        expected_checkout: Planned departure date
        actual_check_in: When the guest was checked in
        actual_check_out: When the last room was checked out
        planned_nights: Nights booked
        actual_nights: Nights stayed, set at checkout
    """

    __tablename__ = "bookings"

    booking_number: Mapped[str] = mapped_column(String(40), unique=True, nullable=False, index=True)
    guest_id: Mapped[str] = mapped_column(ForeignKey("guests.id", ondelete="RESTRICT"), nullable=False, index=True)
    staff_id: Mapped[Optional[str]] = mapped_column(ForeignKey("staff.id", ondelete="SET NULL"), nullable=True, index=True)
    status: Mapped[BookingStatus] = mapped_column(
        enum_column(BookingStatus),
        nullable=False,
        default=BookingStatus.CONFIRMED,
        index=True,
    )

    check_in: Mapped[Date] = mapped_column(SQLDate, nullable=False, index=True)
    expected_checkout: Mapped[Date] = mapped_column(SQLDate, nullable=False, index=True)
    actual_check_in: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    actual_check_out: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    planned_nights: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    actual_nights: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    number_of_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    child_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    extra_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    arrival_type: Mapped[ArrivalType] = mapped_column(
        enum_column(ArrivalType),
        nullable=False,
        default=ArrivalType.WALK_IN,
    )
    ota_company: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    bill_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    special_requests: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    checkout_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    early_checkout_reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    guest: Mapped["Guest"] = relationship(back_populates="bookings")
    staff: Mapped[Optional["Staff"]] = relationship()
    rooms: Mapped[List["BookingRoom"]] = relationship(
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingRoom.check_in_date",
    )
    payment_breakdown: Mapped[Optional["BookingPaymentBreakdown"]] = relationship(
        back_populates="booking",
        uselist=False,
        cascade="all, delete-orphan",
    )
    transactions: Mapped[List["PaymentTransaction"]] = relationship(
        back_populates="booking",
        cascade="all, delete-orphan",
    )
    charge_items: Mapped[List["ChargeItem"]] = relationship(
        back_populates="booking",
        cascade="all, delete-orphan",
    )
    cancellation: Mapped[Optional["CancelledBooking"]] = relationship(
        back_populates="booking",
        uselist=False,
    )
    transfers: Mapped[List["RoomTransfer"]] = relationship(
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="RoomTransfer.transfer_date",
    )

    @property
    def active_rooms(self) -> List["BookingRoom"]:
        """Booking rooms that are not checked out or cancelled."""
        return [
            br for br in self.rooms
            if br.room_status in (BookingRoomStatus.RESERVED, BookingRoomStatus.CHECKED_IN)
        ]


class BookingRoom(TimestampModel):
    """One room leg of a booking."""

    __tablename__ = "booking_rooms"

    booking_id: Mapped[str] = mapped_column(ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id: Mapped[str] = mapped_column(ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False, index=True)
    check_in_date: Mapped[Date] = mapped_column(SQLDate, nullable=False, index=True)
    check_out_date: Mapped[Date] = mapped_column(SQLDate, nullable=False, index=True)
    actual_check_in: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)
    actual_check_out: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)
    room_status: Mapped[BookingRoomStatus] = mapped_column(
        enum_column(BookingRoomStatus),
        nullable=False,
        default=BookingRoomStatus.RESERVED,
        index=True,
    )
    room_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    room_total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    booking: Mapped["Booking"] = relationship(back_populates="rooms")
    room: Mapped["Room"] = relationship(back_populates="booking_rooms")

    @property
    def room_number(self) -> Optional[str]:
        return self.room.number if self.room else None

    @property
    def room_type(self) -> Optional[str]:
        return self.room.room_type_name if self.room else None


class CancelledBooking(TimestampModel):
    """Cancellation record with refund tracking."""

    __tablename__ = "cancelled_bookings"

    booking_id: Mapped[str] = mapped_column(ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cancel_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now, index=True)
    cancelled_by_staff_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"),
        nullable=True,
    )
    refund_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    refund_processed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    refund_processed_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    booking: Mapped["Booking"] = relationship(back_populates="cancellation")
    cancelled_by: Mapped[Optional["Staff"]] = relationship()


class RoomTransfer(TimestampModel):
    """A booking room moved from one physical room to another."""

    __tablename__ = "room_transfers"

    booking_id: Mapped[str] = mapped_column(ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    booking_room_id: Mapped[str] = mapped_column(
        ForeignKey("booking_rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    from_room_id: Mapped[str] = mapped_column(ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False)
    to_room_id: Mapped[str] = mapped_column(ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False)
    reason: Mapped[str] = mapped_column(String(255), nullable=False)
    transfer_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now, index=True)
    transfer_staff_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"),
        nullable=True,
    )

    booking: Mapped["Booking"] = relationship(back_populates="transfers")
    from_room: Mapped["Room"] = relationship(foreign_keys=[from_room_id])
    to_room: Mapped["Room"] = relationship(foreign_keys=[to_room_id])
    transfer_staff: Mapped[Optional["Staff"]] = relationship()

    @property
    def from_room_number(self) -> Optional[str]:
        return self.from_room.number if self.from_room else None

    @property
    def to_room_number(self) -> Optional[str]:
        return self.to_room.number if self.to_room else None

    @property
    def transfer_staff_name(self) -> Optional[str]:
        return self.transfer_staff.name if self.transfer_staff else None
