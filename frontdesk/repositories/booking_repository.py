"""
Booking data access.
"""

from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from frontdesk.core.exceptions import BookingNotFoundError
from frontdesk.models.booking import Booking, BookingRoom, CancelledBooking, RoomTransfer
from frontdesk.models.enums import BookingRoomStatus, BookingStatus
from frontdesk.models.guest import Guest
from frontdesk.models.room import Room
from frontdesk.repositories.base import BaseRepository


def _booking_options():
    return (
        selectinload(Booking.guest),
        selectinload(Booking.staff),
        selectinload(Booking.rooms).selectinload(BookingRoom.room).selectinload(Room.room_type),
        selectinload(Booking.payment_breakdown),
    )


class BookingRepository(BaseRepository[Booking]):
    not_found_error = BookingNotFoundError

    def __init__(self, db: Session):
        super().__init__(Booking, db)

    def get_with_details(self, booking_id: str) -> Booking:
        """Load a booking with guest, staff, rooms and payment ledger."""
        stmt = select(Booking).options(*_booking_options()).where(Booking.id == booking_id)
        booking = self.db.execute(stmt).scalar_one_or_none()
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    def find_by_number(self, booking_number: str) -> Optional[Booking]:
        stmt = select(Booking).where(Booking.booking_number == booking_number)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_bookings(
        self,
        status: Optional[BookingStatus] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Booking], int]:
        stmt = select(Booking).join(Guest, Guest.id == Booking.guest_id)
        if status is not None:
            stmt = stmt.where(Booking.status == status)
        if from_date is not None:
            stmt = stmt.where(Booking.expected_checkout >= from_date)
        if to_date is not None:
            stmt = stmt.where(Booking.check_in <= to_date)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(
                    Booking.booking_number.ilike(pattern),
                    Guest.name.ilike(pattern),
                    Guest.phone.ilike(pattern),
                )
            )

        total = self.db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
        page = (
            stmt.options(*_booking_options())
            .order_by(Booking.check_in.desc(), Booking.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.execute(page).scalars().all()), total

    def count_by_status(self) -> dict:
        rows = self.db.execute(select(Booking.status, func.count()).group_by(Booking.status)).all()
        return {status.value: count for status, count in rows}


class BookingRoomRepository(BaseRepository[BookingRoom]):
    def __init__(self, db: Session):
        super().__init__(BookingRoom, db)

    def in_house(self) -> List[BookingRoom]:
        """Checked-in rooms that have not checked out, earliest due first."""
        stmt = (
            select(BookingRoom)
            .options(
                selectinload(BookingRoom.booking).selectinload(Booking.guest),
                selectinload(BookingRoom.room),
            )
            .where(
                BookingRoom.room_status == BookingRoomStatus.CHECKED_IN,
                BookingRoom.actual_check_out.is_(None),
            )
            .order_by(BookingRoom.check_out_date.asc())
        )
        return list(self.db.execute(stmt).scalars().all())


class CancelledBookingRepository(BaseRepository[CancelledBooking]):
    def __init__(self, db: Session):
        super().__init__(CancelledBooking, db)


class RoomTransferRepository(BaseRepository[RoomTransfer]):
    def __init__(self, db: Session):
        super().__init__(RoomTransfer, db)

    def for_booking(self, booking_id: str) -> List[RoomTransfer]:
        stmt = (
            select(RoomTransfer)
            .options(
                selectinload(RoomTransfer.from_room),
                selectinload(RoomTransfer.to_room),
                selectinload(RoomTransfer.transfer_staff),
            )
            .where(RoomTransfer.booking_id == booking_id)
            .order_by(RoomTransfer.transfer_date.desc())
        )
        return list(self.db.execute(stmt).scalars().all())
