"""
Booking lifecycle: creation, updates, check-in, cancellation, no-shows,
room transfers, payments and extra charges.

Every write runs inside ``BaseService.transaction`` and leaves a
staff log entry. Rates are copied from the room type when a room is
added to a booking.
"""

import random
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from frontdesk.core.exceptions import (
    BaseAppException,
    InvalidStateError,
    NotFoundError,
    RoomUnavailableError,
    ValidationError,
)
from frontdesk.models.booking import Booking, BookingRoom, CancelledBooking, RoomTransfer
from frontdesk.models.enums import (
    BookingRoomStatus,
    BookingStatus,
    PaymentMethod,
    RoomStatus,
    TransactionType,
)
from frontdesk.models.guest import Guest
from frontdesk.models.payment import BookingPaymentBreakdown, ChargeItem, PaymentTransaction
from frontdesk.models.room import Room
from frontdesk.repositories.booking_repository import (
    BookingRepository,
    CancelledBookingRepository,
    RoomTransferRepository,
)
from frontdesk.repositories.guest_repository import GuestRepository
from frontdesk.repositories.payment_repository import (
    PaymentBreakdownRepository,
    PaymentTransactionRepository,
)
from frontdesk.repositories.room_repository import RoomRepository
from frontdesk.repositories.staff_repository import StaffLogRepository, StaffRepository
from frontdesk.schemas.booking import (
    BookingCreate,
    BookingRoomUpdate,
    BookingUpdate,
    ChargeCreate,
    PaymentCreate,
)
from frontdesk.services.base import BaseService
from frontdesk.services.housekeeping.housekeeping_service import HousekeepingService
from frontdesk.services.payment.payment_summary import summarize_payments
from frontdesk.utils.date_utils import days_between_ceil
from frontdesk.utils.formatters import ZERO, money_float, quantize_money, to_decimal

UNBOOKABLE_ROOM_STATUSES = (RoomStatus.BLOCKED, RoomStatus.MAINTENANCE)
CLOSED_BOOKING_STATUSES = (BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED)
TRANSFERABLE_BOOKING_STATUSES = (
    BookingStatus.RESERVED,
    BookingStatus.CONFIRMED,
    BookingStatus.PENDING,
    BookingStatus.CHECKED_IN,
)


def generate_booking_number(now: Optional[datetime] = None) -> str:
    """BK + timestamp to the second + three random digits."""
    now = now or datetime.now()
    return f"BK{now:%Y%m%d%H%M%S}{random.randint(0, 999):03d}"


def count_nights(check_in: date, check_out: date) -> int:
    """Nights between two dates; same-day stays count as one night."""
    return max(1, days_between_ceil(check_in, check_out))


def payment_overview(breakdown: Optional[BookingPaymentBreakdown]) -> Dict[str, float]:
    totals = summarize_payments(breakdown)
    return {
        "total_amount": money_float(totals.total_amount),
        "advance_total": money_float(totals.advance_total),
        "receipt_total": money_float(totals.receipt_total),
        "outstanding_amount": money_float(totals.outstanding),
        "price_adjustment": money_float(getattr(breakdown, "price_adjustment", None)),
    }


def refresh_outstanding(breakdown: BookingPaymentBreakdown) -> Decimal:
    """Store the floored balance on the breakdown and return it."""
    breakdown.outstanding_amount = quantize_money(summarize_payments(breakdown).outstanding)
    return breakdown.outstanding_amount


def recalculate_totals(booking: Booking, tax_amount: Optional[Decimal] = None) -> BookingPaymentBreakdown:
    """
    Rebuild the booking total from room legs, extra charges and any
    checkout price adjustment, then refresh the outstanding amount.
    """
    breakdown = booking.payment_breakdown
    if breakdown is None:
        breakdown = BookingPaymentBreakdown()
        booking.payment_breakdown = breakdown

    room_total = sum(
        (to_decimal(br.room_total) for br in booking.rooms if br.room_status != BookingRoomStatus.CANCELLED),
        ZERO,
    )
    charge_total = sum((to_decimal(item.total_amount) for item in booking.charge_items), ZERO)
    tax = to_decimal(breakdown.total_tax_amount) if tax_amount is None else to_decimal(tax_amount)

    total = room_total + charge_total + to_decimal(breakdown.price_adjustment)
    breakdown.total_amount = quantize_money(total)
    breakdown.total_tax_amount = quantize_money(tax)
    breakdown.taxed_total_amount = quantize_money(total + tax)
    refresh_outstanding(breakdown)
    return breakdown


def release_room(room: Optional[Room]) -> None:
    """Free a room held by a reservation."""
    if room is not None and room.status == RoomStatus.RESERVED:
        room.status = RoomStatus.AVAILABLE


class BookingService(BaseService):

    def __init__(self, db, settings=None, email_service=None):
        super().__init__(db, settings)
        self.bookings = BookingRepository(db)
        self.cancellations = CancelledBookingRepository(db)
        self.rooms = RoomRepository(db)
        self.guests = GuestRepository(db)
        self.staff = StaffRepository(db)
        self.logs = StaffLogRepository(db)
        self.breakdowns = PaymentBreakdownRepository(db)
        self.transactions = PaymentTransactionRepository(db)
        self.room_transfers = RoomTransferRepository(db)
        self.housekeeping = HousekeepingService(db, self.settings)
        self.email_service = email_service

    # ==================== Helpers ====================

    def _validate_staff(self, staff_id: Optional[str]) -> None:
        if staff_id:
            self.staff.get_by_id(staff_id)

    def _unique_booking_number(self) -> str:
        number = generate_booking_number()
        while self.bookings.find_by_number(number) is not None:
            number = generate_booking_number()
        return number

    def _check_room_bookable(
        self,
        room: Room,
        check_in: date,
        check_out: date,
        exclude_leg_ids: Iterable[str] = (),
    ) -> None:
        if room.status in UNBOOKABLE_ROOM_STATUSES:
            raise RoomUnavailableError(room.number, f"room is {room.status.value}")
        # Same-day stays still hold the room for the night
        end = check_out if check_out > check_in else check_in + timedelta(days=1)
        if self.rooms.find_conflicts(room.id, check_in, end, exclude_leg_ids):
            raise RoomUnavailableError(room.number, "already booked for the selected dates")

    def _resolve_guest(self, data: BookingCreate) -> Guest:
        if data.guest_id:
            return self.guests.get_by_id(data.guest_id)
        if data.guest.phone:
            existing = self.guests.find_by_phone(data.guest.phone)
            if existing is not None:
                return existing
        return self.guests.create(Guest(**data.guest.model_dump()))

    def _get_open_booking(self, booking_id: str, operation: str) -> Booking:
        booking = self.bookings.get_with_details(booking_id)
        if booking.status == BookingStatus.CANCELLED:
            raise InvalidStateError(f"Cannot {operation} a cancelled booking", booking.status.value)
        return booking

    # ==================== Queries ====================

    def get_booking(self, booking_id: str) -> Booking:
        return self.bookings.get_with_details(booking_id)

    def list_bookings(
        self,
        status: Optional[BookingStatus] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> Tuple[List[Booking], int]:
        return self.bookings.list_bookings(
            status=status,
            from_date=from_date,
            to_date=to_date,
            search=search,
            offset=(page - 1) * page_size,
            limit=page_size,
        )

    def get_transactions(self, booking_id: str) -> List[PaymentTransaction]:
        self.bookings.get_by_id(booking_id)
        return self.transactions.for_booking(booking_id)

    def get_booking_stats(self, today: Optional[date] = None) -> Dict[str, Any]:
        """Dashboard counters: bookings by status, arrivals, departures, occupancy."""
        today = today or date.today()
        by_status = self.bookings.count_by_status()

        arrivals, _ = self.bookings.list_bookings(from_date=None, to_date=today, limit=10_000)
        arrivals_today = [
            b for b in arrivals
            if b.check_in == today and b.status in (BookingStatus.RESERVED, BookingStatus.CONFIRMED, BookingStatus.PENDING)
        ]
        in_house, _ = self.bookings.list_bookings(status=BookingStatus.CHECKED_IN, limit=10_000)
        departures_today = [b for b in in_house if b.expected_checkout <= today]

        total_rooms = self.rooms.count() or self.settings.TOTAL_ROOMS
        occupied = self.rooms.count_by_status(RoomStatus.OCCUPIED)

        return {
            "by_status": {status.value: by_status.get(status.value, 0) for status in BookingStatus},
            "total_bookings": sum(by_status.values()),
            "arrivals_today": len(arrivals_today),
            "departures_today": len(departures_today),
            "in_house": len(in_house),
            "occupied_rooms": occupied,
            "total_rooms": total_rooms,
            "occupancy_rate": round(occupied / total_rooms * 100, 2) if total_rooms else 0.0,
        }

    # ==================== Create ====================

    def create_booking(self, data: BookingCreate) -> Booking:
        """
        Create a booking with one leg per room.

        Raises:
            RoomNotFoundError: Unknown room id
            RoomUnavailableError: Room blocked, under maintenance or
                already booked for an overlapping range
        """
        self._validate_staff(data.staff_id)
        nights = count_nights(data.check_in, data.check_out)

        rooms = [self.rooms.get_by_id(room_id) for room_id in data.room_ids]
        for room in rooms:
            self._check_room_bookable(room, data.check_in, data.check_out)

        with self.transaction("create booking"):
            guest = self._resolve_guest(data)
            booking = Booking(
                booking_number=self._unique_booking_number(),
                guest=guest,
                staff_id=data.staff_id,
                status=data.status,
                check_in=data.check_in,
                expected_checkout=data.check_out,
                planned_nights=nights,
                number_of_guests=data.number_of_guests,
                child_guests=data.child_guests,
                extra_guests=data.extra_guests,
                arrival_type=data.arrival_type,
                ota_company=data.ota_company,
                bill_number=data.bill_number,
                special_requests=data.special_requests,
            )

            for room in rooms:
                rate = to_decimal(room.room_type.base_price)
                booking.rooms.append(
                    BookingRoom(
                        room=room,
                        check_in_date=data.check_in,
                        check_out_date=data.check_out,
                        room_status=BookingRoomStatus.RESERVED,
                        room_rate=rate,
                        room_total=quantize_money(rate * nights),
                    )
                )
                if room.status == RoomStatus.AVAILABLE:
                    room.status = RoomStatus.RESERVED

            breakdown = BookingPaymentBreakdown()
            for payment in data.advance_payments:
                field = f"advance_{payment.method.value}"
                setattr(breakdown, field, to_decimal(getattr(breakdown, field)) + payment.amount)
                booking.transactions.append(
                    PaymentTransaction(
                        amount=quantize_money(payment.amount),
                        payment_method=payment.method.transaction_method,
                        transaction_type=TransactionType.ADVANCE,
                        reference=payment.reference,
                        collected_by=data.staff_id,
                    )
                )
            booking.payment_breakdown = breakdown
            recalculate_totals(booking, tax_amount=data.tax_amount)

            self.bookings.create(booking)
            self.logs.add(
                "CREATE_BOOKING",
                staff_id=data.staff_id,
                details={
                    "booking_number": booking.booking_number,
                    "guest_name": guest.name,
                    "rooms": [room.number for room in rooms],
                    "nights": nights,
                    "total_amount": money_float(breakdown.taxed_total_amount),
                },
                booking_id=booking.id,
            )

        self._logger.info(
            f"Created booking {booking.booking_number} for {guest.name} "
            f"({len(rooms)} room(s), {nights} night(s))"
        )
        booking = self.bookings.get_with_details(booking.id)

        if self.email_service is not None and guest.email:
            self.email_service.send_booking_confirmation(booking)
        return booking

    # ==================== Update ====================

    def _find_leg(self, booking: Booking, booking_room_id: str) -> BookingRoom:
        for br in booking.rooms:
            if br.id == booking_room_id:
                return br
        raise NotFoundError(
            booking_room_id,
            message=f"Booking room {booking_room_id} does not belong to this booking",
        )

    def _apply_room_change(self, booking: Booking, item: BookingRoomUpdate) -> BookingRoom:
        """
        Validate then apply one room entry. Raises before mutating anything.
        """
        if item.room_status in (BookingRoomStatus.CHECKED_IN, BookingRoomStatus.CHECKED_OUT):
            raise InvalidStateError(
                f"Room status '{item.room_status.value}' is set by check-in and checkout",
                item.room_status.value,
            )

        if item.id is None:
            room = self.rooms.get_by_id(item.room_id)
            check_in = item.check_in_date or booking.check_in
            check_out = item.check_out_date or booking.expected_checkout
            if check_out < check_in:
                raise ValidationError("check_out_date cannot be before check_in_date")
            self._check_room_bookable(room, check_in, check_out)

            rate = item.room_rate if item.room_rate is not None else to_decimal(room.room_type.base_price)
            leg = BookingRoom(
                room=room,
                check_in_date=check_in,
                check_out_date=check_out,
                room_status=BookingRoomStatus.RESERVED,
                room_rate=rate,
                room_total=quantize_money(rate * count_nights(check_in, check_out)),
            )
            booking.rooms.append(leg)
            if room.status == RoomStatus.AVAILABLE:
                room.status = RoomStatus.RESERVED
            self.db.flush()
            return leg

        leg = self._find_leg(booking, item.id)
        if leg.room_status == BookingRoomStatus.CHECKED_OUT:
            raise InvalidStateError("Checked-out rooms cannot be changed", leg.room_status.value)

        room = leg.room
        if item.room_id and item.room_id != leg.room_id:
            if leg.room_status == BookingRoomStatus.CHECKED_IN:
                raise InvalidStateError("Cannot move a checked-in room", leg.room_status.value)
            room = self.rooms.get_by_id(item.room_id)

        check_in = item.check_in_date or leg.check_in_date
        check_out = item.check_out_date or leg.check_out_date
        if check_out < check_in:
            raise ValidationError("check_out_date cannot be before check_in_date")

        cancelling = item.room_status == BookingRoomStatus.CANCELLED
        if not cancelling and (
            room.id != leg.room_id or check_in != leg.check_in_date or check_out != leg.check_out_date
        ):
            self._check_room_bookable(room, check_in, check_out, exclude_leg_ids=[leg.id])

        previous_room = leg.room
        rate = item.room_rate if item.room_rate is not None else to_decimal(leg.room_rate)
        leg.room = room
        leg.check_in_date = check_in
        leg.check_out_date = check_out
        leg.room_rate = rate
        leg.room_total = quantize_money(rate * count_nights(check_in, check_out))

        if cancelling:
            leg.room_status = BookingRoomStatus.CANCELLED
            release_room(room)
        elif item.room_status is not None:
            leg.room_status = item.room_status
        if previous_room is not room:
            release_room(previous_room)
            if room.status == RoomStatus.AVAILABLE:
                room.status = RoomStatus.RESERVED
        self.db.flush()
        return leg

    def _remove_leg(self, booking: Booking, leg: BookingRoom) -> None:
        if leg.room_status in (BookingRoomStatus.CHECKED_IN, BookingRoomStatus.CHECKED_OUT):
            raise InvalidStateError(
                f"Room {leg.room_number} is {leg.room_status.value} and cannot be removed",
                leg.room_status.value,
            )
        release_room(leg.room)
        booking.rooms.remove(leg)
        self.db.flush()

    def _apply_room_changes(self, booking: Booking, rooms: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Apply every room entry, collecting failures instead of aborting."""
        room_errors: List[Dict[str, Any]] = []
        kept_ids = set()

        for index, raw in enumerate(rooms):
            raw_id = raw.get("id") if isinstance(raw, dict) else None
            if raw_id:
                kept_ids.add(raw_id)
            room_ref = raw.get("room_id") if isinstance(raw, dict) else None

            try:
                item = BookingRoomUpdate.model_validate(raw)
            except PydanticValidationError as e:
                first = e.errors()[0]
                room_errors.append({
                    "index": index,
                    "id": raw_id,
                    "room_id": room_ref,
                    "error": first.get("msg", "Invalid room data"),
                })
                continue

            try:
                leg = self._apply_room_change(booking, item)
            except BaseAppException as e:
                room_errors.append({
                    "index": index,
                    "id": item.id,
                    "room_id": item.room_id,
                    "error": e.message,
                })
                continue
            kept_ids.add(leg.id)

        for leg in list(booking.rooms):
            if leg.id in kept_ids:
                continue
            try:
                self._remove_leg(booking, leg)
            except InvalidStateError as e:
                room_errors.append({"index": None, "id": leg.id, "room_id": leg.room_id, "error": e.message})

        return room_errors

    def update_booking(self, booking_id: str, data: BookingUpdate) -> Tuple[Booking, List[Dict[str, Any]]]:
        """
        Update booking fields and its rooms.

        Room entries that fail are returned in ``room_errors`` while the
        rest of the update is still committed. Rooms left out of
        ``data.rooms`` are removed from the booking.

        Returns:
            (booking, room_errors)
        """
        booking = self.bookings.get_with_details(booking_id)
        self._validate_staff(data.staff_id)

        if data.rooms is not None:
            if booking.status in CLOSED_BOOKING_STATUSES:
                raise InvalidStateError(
                    f"Rooms of a {booking.status.value} booking cannot be changed",
                    booking.status.value,
                )
            if not data.rooms:
                raise ValidationError(
                    "A booking must keep at least one room",
                    field_errors={"rooms": ["must not be empty"]},
                )

        values = data.model_dump(exclude_unset=True, exclude={"rooms", "staff_id", "tax_amount", "check_out"})
        if "check_out" in data.model_fields_set and data.check_out is not None:
            values["expected_checkout"] = data.check_out
        check_in = values.get("check_in") or booking.check_in
        check_out = values.get("expected_checkout") or booking.expected_checkout
        if check_out < check_in:
            raise ValidationError(
                "check_out cannot be before check_in",
                field_errors={"check_out": ["must be on or after check_in"]},
            )
        values["planned_nights"] = count_nights(check_in, check_out)

        room_errors: List[Dict[str, Any]] = []
        with self.transaction("update booking"):
            self.bookings.update(booking, **values)
            if data.rooms is not None:
                room_errors = self._apply_room_changes(booking, data.rooms)
            recalculate_totals(booking, tax_amount=data.tax_amount)
            self.logs.add(
                "UPDATE_BOOKING",
                staff_id=data.staff_id,
                details={
                    "booking_number": booking.booking_number,
                    "fields": sorted(values),
                    "room_errors": len(room_errors),
                },
                booking_id=booking.id,
            )

        if room_errors:
            self._logger.warning(
                f"Booking {booking.booking_number} updated with {len(room_errors)} room error(s)"
            )
        return self.bookings.get_with_details(booking.id), room_errors

    # ==================== Status transitions ====================

    def check_in(
        self,
        booking_id: str,
        staff_id: Optional[str] = None,
        room_ids: Optional[List[str]] = None,
        checked_in_at: Optional[datetime] = None,
    ) -> Booking:
        """
        Check in all reserved rooms of a booking, or only ``room_ids``.

        Raises:
            InvalidStateError: Booking already checked in, checked out or cancelled
            RoomUnavailableError: A room is occupied, blocked or under maintenance
        """
        booking = self.bookings.get_with_details(booking_id)
        if booking.status in (BookingStatus.CHECKED_IN, BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED):
            raise InvalidStateError(
                f"Cannot check in a booking that is {booking.status.value}",
                booking.status.value,
            )
        self._validate_staff(staff_id)

        if room_ids:
            unknown = set(room_ids) - {br.room_id for br in booking.rooms}
            if unknown:
                raise ValidationError(
                    "Rooms are not part of this booking",
                    field_errors={"room_ids": sorted(unknown)},
                )
        legs = [
            br for br in booking.rooms
            if br.room_status == BookingRoomStatus.RESERVED and (not room_ids or br.room_id in room_ids)
        ]
        if not legs:
            raise InvalidStateError("No reserved rooms to check in", booking.status.value)

        for leg in legs:
            if leg.room.status in (RoomStatus.OCCUPIED, RoomStatus.BLOCKED, RoomStatus.MAINTENANCE):
                raise RoomUnavailableError(leg.room.number, f"room is {leg.room.status.value}")

        now = checked_in_at or datetime.now()
        with self.transaction("check in booking"):
            for leg in legs:
                leg.room_status = BookingRoomStatus.CHECKED_IN
                leg.actual_check_in = now
                leg.room.status = RoomStatus.OCCUPIED
            booking.status = BookingStatus.CHECKED_IN
            booking.actual_check_in = booking.actual_check_in or now
            self.logs.add(
                "CHECK_IN",
                staff_id=staff_id,
                details={
                    "booking_number": booking.booking_number,
                    "guest_name": booking.guest.name,
                    "rooms": [leg.room.number for leg in legs],
                },
                booking_id=booking.id,
            )

        self._logger.info(f"Checked in booking {booking.booking_number} ({len(legs)} room(s))")
        return booking

    def cancel_booking(
        self,
        booking_id: str,
        reason: Optional[str] = None,
        staff_id: Optional[str] = None,
        refund_amount: Decimal = ZERO,
        notes: Optional[str] = None,
    ) -> Booking:
        booking = self.bookings.get_with_details(booking_id)
        if booking.status in (BookingStatus.CHECKED_IN, BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED):
            raise InvalidStateError(
                f"Cannot cancel a booking that is {booking.status.value}",
                booking.status.value,
            )
        self._validate_staff(staff_id)

        refund = to_decimal(refund_amount)
        paid = summarize_payments(booking.payment_breakdown).paid_total
        if refund > paid:
            raise ValidationError(
                "Refund cannot exceed the amount paid",
                field_errors={"refund_amount": [f"must be <= {money_float(paid)}"]},
            )

        with self.transaction("cancel booking"):
            booking.status = BookingStatus.CANCELLED
            for leg in booking.rooms:
                leg.room_status = BookingRoomStatus.CANCELLED
                release_room(leg.room)
            self.cancellations.create(
                CancelledBooking(
                    booking_id=booking.id,
                    cancellation_reason=reason,
                    cancelled_by_staff_id=staff_id,
                    refund_amount=quantize_money(refund),
                    notes=notes,
                )
            )
            self.logs.add(
                "CANCEL_BOOKING",
                staff_id=staff_id,
                details={
                    "booking_number": booking.booking_number,
                    "reason": reason,
                    "refund_amount": money_float(refund),
                },
                booking_id=booking.id,
            )

        self._logger.info(f"Cancelled booking {booking.booking_number}")
        return self.bookings.get_with_details(booking.id)

    def mark_no_show(self, booking_id: str, staff_id: Optional[str] = None) -> Booking:
        booking = self.bookings.get_with_details(booking_id)
        if booking.status not in (BookingStatus.RESERVED, BookingStatus.CONFIRMED, BookingStatus.PENDING):
            raise InvalidStateError(
                f"Only upcoming bookings can be marked as no-show, booking is {booking.status.value}",
                booking.status.value,
            )
        self._validate_staff(staff_id)

        with self.transaction("mark booking as no-show"):
            booking.status = BookingStatus.NO_SHOW
            for leg in booking.rooms:
                leg.room_status = BookingRoomStatus.CANCELLED
                release_room(leg.room)
            self.logs.add(
                "NO_SHOW",
                staff_id=staff_id,
                details={"booking_number": booking.booking_number},
                booking_id=booking.id,
            )
        self._logger.info(f"Booking {booking.booking_number} marked as no-show")
        return booking

    # ==================== Room transfers ====================

    def _transferable_leg(self, booking: Booking, booking_room_id: str) -> BookingRoom:
        if booking.status not in TRANSFERABLE_BOOKING_STATUSES:
            raise InvalidStateError(
                f"Cannot transfer booking with status: {booking.status.value}",
                booking.status.value,
            )
        leg = self._find_leg(booking, booking_room_id)
        if leg.room_status not in (BookingRoomStatus.RESERVED, BookingRoomStatus.CHECKED_IN):
            raise InvalidStateError(
                f"Room {leg.room_number} is {leg.room_status.value} and cannot be transferred",
                leg.room_status.value,
            )
        return leg

    @staticmethod
    def _remaining_stay(leg: BookingRoom, today: date) -> Tuple[date, date]:
        """Dates the target room must be free for; in-house guests only need the rest of the stay."""
        start = leg.check_in_date
        if leg.room_status == BookingRoomStatus.CHECKED_IN:
            start = max(start, today)
        end = leg.check_out_date if leg.check_out_date > start else start + timedelta(days=1)
        return start, end

    def get_transfer_rooms(self, booking_id: str, booking_room_id: str) -> List[Room]:
        """Rooms a booking room could move to for the rest of its stay."""
        booking = self.bookings.get_with_details(booking_id)
        leg = self._transferable_leg(booking, booking_room_id)
        start, end = self._remaining_stay(leg, date.today())
        rooms = [room for room in self.rooms.find_available(start, end) if room.id != leg.room_id]
        if leg.room_status == BookingRoomStatus.CHECKED_IN:
            rooms = [room for room in rooms if room.status == RoomStatus.AVAILABLE]
        return rooms

    def get_transfer_history(self, booking_id: str) -> List[RoomTransfer]:
        self.bookings.get_by_id(booking_id)
        return self.room_transfers.for_booking(booking_id)

    def transfer_room(
        self,
        booking_id: str,
        booking_room_id: str,
        new_room_id: str,
        reason: str,
        staff_id: Optional[str] = None,
        transferred_at: Optional[datetime] = None,
    ) -> Tuple[Booking, RoomTransfer]:
        """
        Move one booking room to a different physical room.

        The leg keeps its dates and nightly rate. A checked-in guest needs
        a room that is available now; the room they leave is queued for
        cleaning. A reserved leg only needs the new room to be free for
        its dates.

        Raises:
            InvalidStateError: Booking or room leg cannot be transferred
            ValidationError: Missing reason or same source and target room
            RoomUnavailableError: Target room is not free
        """
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Transfer reason is required", field_errors={"reason": ["must not be empty"]})

        booking = self.bookings.get_with_details(booking_id)
        leg = self._transferable_leg(booking, booking_room_id)
        if new_room_id == leg.room_id:
            raise ValidationError(
                "Source and target rooms cannot be the same",
                field_errors={"new_room_id": ["must differ from the current room"]},
            )
        self._validate_staff(staff_id)

        now = transferred_at or datetime.now()
        target = self.rooms.get_by_id(new_room_id)
        checked_in = leg.room_status == BookingRoomStatus.CHECKED_IN
        if checked_in and target.status != RoomStatus.AVAILABLE:
            raise RoomUnavailableError(target.number, f"room is {target.status.value}")
        start, end = self._remaining_stay(leg, now.date())
        self._check_room_bookable(target, start, end)

        source = leg.room
        with self.transaction("transfer room"):
            leg.room = target
            if checked_in:
                source.status = RoomStatus.AVAILABLE
                self.housekeeping.schedule_checkout_cleaning(source, booking.id)
                target.status = RoomStatus.OCCUPIED
            else:
                release_room(source)
                if target.status == RoomStatus.AVAILABLE:
                    target.status = RoomStatus.RESERVED

            transfer = self.room_transfers.create(
                RoomTransfer(
                    booking_id=booking.id,
                    booking_room_id=leg.id,
                    from_room_id=source.id,
                    to_room_id=target.id,
                    reason=reason,
                    transfer_date=now,
                    transfer_staff_id=staff_id,
                )
            )
            self.logs.add(
                "ROOM_TRANSFER",
                staff_id=staff_id,
                details={
                    "booking_number": booking.booking_number,
                    "from_room": source.number,
                    "to_room": target.number,
                    "reason": reason,
                },
                booking_id=booking.id,
                room_id=target.id,
            )

        self._logger.info(
            f"Booking {booking.booking_number} moved from room {source.number} to {target.number}: {reason}"
        )
        return self.bookings.get_with_details(booking.id), transfer

    # ==================== Money ====================

    def record_payment(self, booking_id: str, data: PaymentCreate) -> Tuple[PaymentTransaction, Dict[str, float]]:
        booking = self._get_open_booking(booking_id, "record a payment for")
        self._validate_staff(data.staff_id)
        method: PaymentMethod = data.method

        with self.transaction("record payment"):
            breakdown = self.breakdowns.get_or_create(booking.id)
            field = f"{data.transaction_type.value}_{method.value}"
            setattr(breakdown, field, quantize_money(to_decimal(getattr(breakdown, field)) + data.amount))
            refresh_outstanding(breakdown)

            transaction = self.transactions.create(
                PaymentTransaction(
                    booking_id=booking.id,
                    amount=quantize_money(data.amount),
                    payment_method=method.transaction_method,
                    transaction_type=data.transaction_type,
                    reference=data.reference,
                    notes=data.notes,
                    collected_by=data.staff_id,
                )
            )
            self.logs.add(
                "RECORD_PAYMENT",
                staff_id=data.staff_id,
                details={
                    "booking_number": booking.booking_number,
                    "amount": money_float(data.amount),
                    "method": method.value,
                    "type": data.transaction_type.value,
                },
                booking_id=booking.id,
            )

        self._logger.info(
            f"Recorded {data.transaction_type.value} of {money_float(data.amount)} "
            f"({method.value}) for booking {booking.booking_number}"
        )
        return transaction, payment_overview(breakdown)

    def add_charge(self, booking_id: str, data: ChargeCreate) -> Tuple[ChargeItem, Dict[str, float]]:
        booking = self._get_open_booking(booking_id, "add a charge to")
        self._validate_staff(data.staff_id)
        amount = quantize_money(data.unit_price * data.quantity)

        with self.transaction("add charge"):
            item = ChargeItem(
                description=data.description,
                quantity=data.quantity,
                unit_price=quantize_money(data.unit_price),
                total_amount=amount,
            )
            booking.charge_items.append(item)
            self.db.flush()
            breakdown = recalculate_totals(booking)
            self.logs.add(
                "ADD_CHARGE",
                staff_id=data.staff_id,
                details={
                    "booking_number": booking.booking_number,
                    "description": data.description,
                    "amount": money_float(amount),
                },
                booking_id=booking.id,
            )
        return item, payment_overview(breakdown)
