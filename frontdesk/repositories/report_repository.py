"""
Read-only queries behind the front-desk reports.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session, selectinload

from frontdesk.models.booking import Booking, BookingRoom, CancelledBooking, RoomTransfer
from frontdesk.models.enums import BookingRoomStatus
from frontdesk.models.payment import BookingPaymentBreakdown, PaymentTransaction
from frontdesk.models.room import BlockedRoom, Room
from frontdesk.utils.date_utils import end_of_day, start_of_day


def _room_row_options():
    return (
        selectinload(BookingRoom.booking).selectinload(Booking.guest),
        selectinload(BookingRoom.booking).selectinload(Booking.staff),
        selectinload(BookingRoom.booking).selectinload(Booking.payment_breakdown),
        selectinload(BookingRoom.room).selectinload(Room.room_type),
    )


class ReportRepository:
    """Report queries; each returns ORM rows with their joins preloaded."""

    def __init__(self, db: Session):
        self.db = db

    def _booking_rooms(self, *criteria, order_by=None) -> List[BookingRoom]:
        stmt = select(BookingRoom).options(*_room_row_options()).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        return list(self.db.execute(stmt).scalars().all())

    def actual_checkins(self, start: date, end: date) -> List[BookingRoom]:
        return self._booking_rooms(
            BookingRoom.actual_check_in >= start_of_day(start),
            BookingRoom.actual_check_in <= end_of_day(end),
        )

    def scheduled_checkins(self, start: date, end: date) -> List[BookingRoom]:
        """Rooms due to arrive in the range that have not checked in."""
        return self._booking_rooms(
            BookingRoom.check_in_date >= start,
            BookingRoom.check_in_date <= end,
            BookingRoom.actual_check_in.is_(None),
        )

    def actual_checkouts(self, start: date, end: date) -> List[BookingRoom]:
        return self._booking_rooms(
            BookingRoom.actual_check_out >= start_of_day(start),
            BookingRoom.actual_check_out <= end_of_day(end),
        )

    def scheduled_checkouts(self, start: date, end: date) -> List[BookingRoom]:
        """Rooms due to leave in the range that have not checked out."""
        return self._booking_rooms(
            BookingRoom.check_out_date >= start,
            BookingRoom.check_out_date <= end,
            BookingRoom.actual_check_out.is_(None),
        )

    def expected_checkouts(self, start: date, end: date) -> List[BookingRoom]:
        return self._booking_rooms(
            BookingRoom.room_status == BookingRoomStatus.CHECKED_IN,
            BookingRoom.actual_check_out.is_(None),
            BookingRoom.check_out_date >= start,
            BookingRoom.check_out_date <= end,
            order_by=BookingRoom.check_out_date.asc(),
        )

    def stay_activity(self, start: date, end: date) -> List[BookingRoom]:
        """Rooms with an actual check-in or check-out inside the range."""
        range_start, range_end = start_of_day(start), end_of_day(end)
        return self._booking_rooms(
            or_(
                and_(BookingRoom.actual_check_in >= range_start, BookingRoom.actual_check_in <= range_end),
                and_(BookingRoom.actual_check_out >= range_start, BookingRoom.actual_check_out <= range_end),
            ),
            order_by=BookingRoom.actual_check_in.asc(),
        )

    def high_balances(
        self,
        threshold: Decimal,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[BookingPaymentBreakdown]:
        stmt = (
            select(BookingPaymentBreakdown)
            .join(Booking, Booking.id == BookingPaymentBreakdown.booking_id)
            .options(selectinload(BookingPaymentBreakdown.booking).selectinload(Booking.guest))
            .where(BookingPaymentBreakdown.outstanding_amount > threshold)
            .order_by(BookingPaymentBreakdown.outstanding_amount.desc())
        )
        if start is not None and end is not None:
            stmt = stmt.where(
                Booking.created_at >= start_of_day(start),
                Booking.created_at <= end_of_day(end),
            )
        return list(self.db.execute(stmt).scalars().all())

    def transactions(self, start: datetime, end: datetime) -> List[PaymentTransaction]:
        stmt = (
            select(PaymentTransaction)
            .where(PaymentTransaction.created_at >= start, PaymentTransaction.created_at <= end)
            .order_by(PaymentTransaction.created_at)
        )
        return list(self.db.execute(stmt).scalars().all())

    def bookings_created(self, start: datetime, end: datetime) -> List[Booking]:
        stmt = (
            select(Booking)
            .options(
                selectinload(Booking.rooms),
                selectinload(Booking.payment_breakdown),
                selectinload(Booking.transactions),
                selectinload(Booking.charge_items),
            )
            .where(Booking.created_at >= start, Booking.created_at <= end)
        )
        return list(self.db.execute(stmt).scalars().all())

    def cancellations(self, start: date, end: date) -> List[CancelledBooking]:
        stmt = (
            select(CancelledBooking)
            .options(
                selectinload(CancelledBooking.cancelled_by),
                selectinload(CancelledBooking.booking)
                .selectinload(Booking.rooms)
                .selectinload(BookingRoom.room)
                .selectinload(Room.room_type),
            )
            .where(
                CancelledBooking.cancel_date >= start_of_day(start),
                CancelledBooking.cancel_date <= end_of_day(end),
            )
            .order_by(CancelledBooking.cancel_date.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def arrivals(self, start: date, end: date) -> List[BookingRoom]:
        """Rooms checked in during the range, newest first."""
        return self._booking_rooms(
            BookingRoom.actual_check_in >= start_of_day(start),
            BookingRoom.actual_check_in <= end_of_day(end),
            BookingRoom.room_status != BookingRoomStatus.CANCELLED,
            order_by=BookingRoom.actual_check_in.desc(),
        )

    def stays_overlapping(self, start: date, end: date) -> List[BookingRoom]:
        """
        Rooms whose planned or actual stay touches the range.

        Callers narrow this down per day; the query only has to be a
        superset.
        """
        stmt = select(BookingRoom).where(
            BookingRoom.room_status != BookingRoomStatus.CANCELLED,
            or_(BookingRoom.check_in_date <= end, BookingRoom.actual_check_in <= end_of_day(end)),
            or_(BookingRoom.check_out_date >= start, BookingRoom.actual_check_out >= start_of_day(start)),
        )
        return list(self.db.execute(stmt).scalars().all())

    def blocked_rooms(self, start: date, end: date) -> List[BlockedRoom]:
        stmt = (
            select(BlockedRoom)
            .options(
                selectinload(BlockedRoom.room).selectinload(Room.room_type),
                selectinload(BlockedRoom.blocked_by),
                selectinload(BlockedRoom.unblocked_by),
            )
            .where(
                BlockedRoom.blocked_date >= start_of_day(start),
                BlockedRoom.blocked_date <= end_of_day(end),
            )
            .order_by(BlockedRoom.blocked_date.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def room_transfers(self, start: date, end: date) -> List[RoomTransfer]:
        stmt = (
            select(RoomTransfer)
            .options(
                selectinload(RoomTransfer.booking).selectinload(Booking.guest),
                selectinload(RoomTransfer.from_room),
                selectinload(RoomTransfer.to_room),
                selectinload(RoomTransfer.transfer_staff),
            )
            .where(
                RoomTransfer.transfer_date >= start_of_day(start),
                RoomTransfer.transfer_date <= end_of_day(end),
            )
            .order_by(RoomTransfer.transfer_date.desc())
        )
        return list(self.db.execute(stmt).scalars().all())
