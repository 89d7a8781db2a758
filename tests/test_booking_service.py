from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from frontdesk.core.exceptions import (
    BookingNotFoundError,
    InvalidStateError,
    RoomUnavailableError,
    ValidationError,
)
from frontdesk.models.enums import (
    BookingRoomStatus,
    BookingStatus,
    PaymentMethod,
    RoomStatus,
    TransactionType,
)
from frontdesk.schemas.booking import (
    BookingCreate,
    BookingUpdate,
    ChargeCreate,
    PaymentCreate,
)
from frontdesk.schemas.guest import GuestCreate
from frontdesk.services.booking.booking_service import count_nights, generate_booking_number


class TestHelpers:
    def test_booking_number_format(self):
        from datetime import datetime

        number = generate_booking_number(datetime(2024, 1, 2, 9, 30, 15))
        assert number.startswith("BK20240102093015")
        assert len(number) == len("BK20240102093015") + 3

    def test_same_day_stay_counts_one_night(self):
        assert count_nights(date(2024, 1, 1), date(2024, 1, 1)) == 1
        assert count_nights(date(2024, 1, 1), date(2024, 1, 4)) == 3


class TestCreateBooking:
    def test_snapshots_rates_and_reserves_rooms(self, make_booking, rooms):
        booking = make_booking([rooms[0].id, rooms[1].id], advance_cash=Decimal("500"))

        assert booking.status == BookingStatus.CONFIRMED
        assert booking.planned_nights == 3
        assert len(booking.rooms) == 2
        for leg in booking.rooms:
            assert leg.room_rate == Decimal("1000.00")
            assert leg.room_total == Decimal("3000.00")
            assert leg.room_status == BookingRoomStatus.RESERVED
            assert leg.room.status == RoomStatus.RESERVED

        breakdown = booking.payment_breakdown
        assert breakdown.total_amount == Decimal("6000.00")
        assert breakdown.taxed_total_amount == Decimal("6000.00")
        assert breakdown.advance_cash == Decimal("500")
        assert breakdown.outstanding_amount == Decimal("5500.00")
        assert [t.transaction_type for t in booking.transactions] == [TransactionType.ADVANCE]

    def test_tax_is_added_to_taxed_total(self, booking_service, guest, rooms):
        booking = booking_service.create_booking(BookingCreate(
            guest_id=guest.id,
            room_ids=[rooms[0].id],
            check_in=date.today(),
            check_out=date.today() + timedelta(days=2),
            tax_amount=Decimal("360"),
        ))
        assert booking.payment_breakdown.total_amount == Decimal("2000.00")
        assert booking.payment_breakdown.taxed_total_amount == Decimal("2360.00")

    def test_inline_guest_is_reused_by_phone(self, booking_service, guest, rooms):
        booking = booking_service.create_booking(BookingCreate(
            guest=GuestCreate(name="A. Rao", phone=guest.phone),
            room_ids=[rooms[0].id],
            check_in=date.today(),
            check_out=date.today() + timedelta(days=1),
        ))
        assert booking.guest_id == guest.id

    def test_overlapping_booking_is_rejected(self, make_booking, rooms):
        make_booking([rooms[0].id])
        with pytest.raises(RoomUnavailableError, match="already booked"):
            make_booking([rooms[0].id], check_in=date.today() + timedelta(days=1))

    def test_back_to_back_stays_do_not_clash(self, make_booking, rooms):
        make_booking([rooms[0].id], nights=2)
        second = make_booking([rooms[0].id], check_in=date.today() + timedelta(days=2))
        assert second.rooms[0].room_id == rooms[0].id

    def test_blocked_room_is_rejected(self, make_booking, make_room):
        blocked = make_room("201", RoomStatus.BLOCKED)
        with pytest.raises(RoomUnavailableError, match="room is blocked"):
            make_booking([blocked.id])

    def test_schema_rejects_reversed_dates(self, guest, rooms):
        with pytest.raises(ValueError, match="check_out cannot be before check_in"):
            BookingCreate(
                guest_id=guest.id,
                room_ids=[rooms[0].id],
                check_in=date(2024, 1, 5),
                check_out=date(2024, 1, 4),
            )


class TestUpdateBooking:
    def test_room_errors_are_collected(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        leg = booking.rooms[0]

        updated, room_errors = booking_service.update_booking(booking.id, BookingUpdate(
            special_requests="Late arrival",
            rooms=[
                {"id": leg.id},
                {"room_id": "missing-room"},
                {"foo": "bar"},
            ],
        ))

        assert updated.special_requests == "Late arrival"
        assert [br.id for br in updated.rooms] == [leg.id]
        assert len(room_errors) == 2
        assert room_errors[0]["index"] == 1
        assert room_errors[1]["index"] == 2

    def test_rooms_left_out_are_removed(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id, rooms[1].id])
        keep = booking.rooms[0]

        updated, room_errors = booking_service.update_booking(
            booking.id,
            BookingUpdate(rooms=[{"id": keep.id}]),
        )

        assert room_errors == []
        assert len(updated.rooms) == 1
        assert updated.payment_breakdown.total_amount == Decimal("3000.00")

    def test_adding_a_room_recomputes_totals(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id], nights=2)
        updated, room_errors = booking_service.update_booking(booking.id, BookingUpdate(rooms=[
            {"id": booking.rooms[0].id},
            {"room_id": rooms[1].id, "room_rate": "1500"},
        ]))
        assert room_errors == []
        assert updated.payment_breakdown.total_amount == Decimal("5000.00")

    def test_moving_onto_a_sibling_room_is_a_conflict(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id, rooms[1].id])
        legs = {leg.room_id: leg for leg in booking.rooms}
        first, second = legs[rooms[0].id], legs[rooms[1].id]

        updated, room_errors = booking_service.update_booking(booking.id, BookingUpdate(rooms=[
            {"id": first.id},
            {"id": second.id, "room_id": rooms[0].id},
        ]))

        assert len(room_errors) == 1
        assert room_errors[0]["index"] == 1
        assert "already booked" in room_errors[0]["error"]
        assert sorted(leg.room.number for leg in updated.rooms) == ["101", "102"]
        assert rooms[1].status == RoomStatus.RESERVED

    def test_same_room_twice_in_one_update_is_a_conflict(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        updated, room_errors = booking_service.update_booking(booking.id, BookingUpdate(rooms=[
            {"id": booking.rooms[0].id},
            {"room_id": rooms[0].id},
        ]))

        assert [error["index"] for error in room_errors] == [1]
        assert len(updated.rooms) == 1
        assert updated.payment_breakdown.total_amount == Decimal("3000.00")

    def test_leg_can_extend_its_own_dates(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id], nights=2)
        leg = booking.rooms[0]
        updated, room_errors = booking_service.update_booking(booking.id, BookingUpdate(rooms=[
            {"id": leg.id, "check_out_date": (leg.check_out_date + timedelta(days=1)).isoformat()},
        ]))

        assert room_errors == []
        assert updated.rooms[0].room_total == Decimal("3000.00")

    def test_empty_room_list_is_rejected(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        with pytest.raises(ValidationError, match="at least one room"):
            booking_service.update_booking(booking.id, BookingUpdate(rooms=[]))


class TestStatusTransitions:
    def test_check_in_occupies_rooms(self, booking_service, make_booking, rooms, staff_member):
        booking = make_booking([rooms[0].id])
        booking = booking_service.check_in(booking.id, staff_member.id)

        assert booking.status == BookingStatus.CHECKED_IN
        assert booking.actual_check_in is not None
        assert booking.rooms[0].room_status == BookingRoomStatus.CHECKED_IN
        assert booking.rooms[0].room.status == RoomStatus.OCCUPIED

    def test_check_in_twice_is_rejected(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        booking_service.check_in(booking.id)
        with pytest.raises(InvalidStateError, match="Cannot check in a booking that is checked_in"):
            booking_service.check_in(booking.id)

    def test_check_in_refuses_occupied_room(self, booking_service, db_session, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        rooms[0].status = RoomStatus.OCCUPIED
        db_session.commit()
        with pytest.raises(RoomUnavailableError, match="room is occupied"):
            booking_service.check_in(booking.id)

    def test_cancel_releases_rooms(self, booking_service, make_booking, rooms, staff_member):
        booking = make_booking([rooms[0].id], advance_cash=Decimal("1000"))
        booking = booking_service.cancel_booking(
            booking.id, "Change of plans", staff_member.id, Decimal("500"),
        )

        assert booking.status == BookingStatus.CANCELLED
        assert booking.rooms[0].room_status == BookingRoomStatus.CANCELLED
        assert booking.rooms[0].room.status == RoomStatus.AVAILABLE
        assert booking.cancellation.refund_amount == Decimal("500.00")

    def test_refund_above_paid_is_rejected(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id], advance_cash=Decimal("100"))
        with pytest.raises(ValidationError, match="Refund cannot exceed the amount paid"):
            booking_service.cancel_booking(booking.id, refund_amount=Decimal("200"))

    def test_cannot_cancel_checked_in_booking(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        booking_service.check_in(booking.id)
        with pytest.raises(InvalidStateError, match="Cannot cancel"):
            booking_service.cancel_booking(booking.id)

    def test_no_show(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        booking = booking_service.mark_no_show(booking.id)
        assert booking.status == BookingStatus.NO_SHOW
        assert booking.rooms[0].room.status == RoomStatus.AVAILABLE

    def test_unknown_booking(self, booking_service):
        with pytest.raises(BookingNotFoundError):
            booking_service.get_booking("does-not-exist")


class TestRoomTransfer:
    def test_reserved_room_moves_and_releases_source(self, booking_service, make_booking, rooms, staff_member):
        booking = make_booking([rooms[0].id])
        leg = booking.rooms[0]

        booking, transfer = booking_service.transfer_room(
            booking.id, leg.id, rooms[1].id, "Guest request", staff_member.id,
        )

        assert booking.rooms[0].room_id == rooms[1].id
        assert booking.rooms[0].room_rate == Decimal("1000.00")
        assert booking.payment_breakdown.total_amount == Decimal("3000.00")
        assert rooms[0].status == RoomStatus.AVAILABLE
        assert rooms[1].status == RoomStatus.RESERVED
        assert (transfer.from_room_id, transfer.to_room_id) == (rooms[0].id, rooms[1].id)
        assert [t.id for t in booking_service.get_transfer_history(booking.id)] == [transfer.id]

        log = booking_service.logs.latest(1, action="ROOM_TRANSFER")[0]
        assert log.staff_id == staff_member.id
        assert log.details == {
            "booking_number": booking.booking_number,
            "from_room": "101",
            "to_room": "102",
            "reason": "Guest request",
        }

    def test_checked_in_guest_leaves_room_for_cleaning(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        booking_service.check_in(booking.id)

        booking, _ = booking_service.transfer_room(booking.id, booking.rooms[0].id, rooms[1].id, "Noise complaint")

        assert booking.rooms[0].room_status == BookingRoomStatus.CHECKED_IN
        assert rooms[0].status == RoomStatus.AVAILABLE
        assert rooms[1].status == RoomStatus.OCCUPIED
        tasks = booking_service.housekeeping.list_tasks(room_id=rooms[0].id)
        assert [task.task_type for task in tasks] == ["checkout_cleaning"]

    def test_checked_in_guest_needs_an_available_room(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        booking_service.check_in(booking.id)
        make_booking([rooms[1].id], check_in=date.today() + timedelta(days=10))

        with pytest.raises(RoomUnavailableError, match="room is reserved"):
            booking_service.transfer_room(booking.id, booking.rooms[0].id, rooms[1].id, "Room upgrade")

    def test_target_booked_for_the_same_dates(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        make_booking([rooms[1].id], check_in=date.today() + timedelta(days=1))

        with pytest.raises(RoomUnavailableError, match="already booked"):
            booking_service.transfer_room(booking.id, booking.rooms[0].id, rooms[1].id, "Guest preference")

    def test_same_room_is_rejected(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        with pytest.raises(ValidationError, match="Source and target rooms cannot be the same"):
            booking_service.transfer_room(booking.id, booking.rooms[0].id, rooms[0].id, "Guest request")

    def test_reason_is_required(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        with pytest.raises(ValidationError, match="Transfer reason is required"):
            booking_service.transfer_room(booking.id, booking.rooms[0].id, rooms[1].id, "  ")

    def test_cancelled_booking_cannot_be_transferred(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        booking_service.cancel_booking(booking.id)
        with pytest.raises(InvalidStateError, match="Cannot transfer booking with status: cancelled"):
            booking_service.transfer_room(booking.id, booking.rooms[0].id, rooms[1].id, "Guest request")

    def test_transfer_rooms_skip_busy_and_blocked(self, booking_service, make_booking, make_room, rooms):
        make_room("104", RoomStatus.BLOCKED)
        booking = make_booking([rooms[0].id])
        make_booking([rooms[1].id])

        available = booking_service.get_transfer_rooms(booking.id, booking.rooms[0].id)
        assert [room.number for room in available] == ["103"]


class TestMoney:
    def test_record_payment_updates_outstanding(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        transaction, overview = booking_service.record_payment(
            booking.id,
            PaymentCreate(amount=Decimal("1200"), method=PaymentMethod.BANK),
        )
        assert transaction.payment_method == "bank_transfer"
        assert transaction.transaction_type == TransactionType.RECEIPT
        assert overview["receipt_total"] == 1200.0
        assert overview["outstanding_amount"] == 1800.0

    def test_refund_type_cannot_be_recorded_directly(self):
        with pytest.raises(ValueError, match="Only advance and receipt payments"):
            PaymentCreate(amount=Decimal("10"), method=PaymentMethod.CASH, transaction_type=TransactionType.REFUND)

    def test_add_charge_increases_total(self, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        item, overview = booking_service.add_charge(
            booking.id,
            ChargeCreate(description="Laundry", quantity=2, unit_price=Decimal("150")),
        )
        assert item.total_amount == Decimal("300.00")
        assert overview["total_amount"] == 3300.0

    def test_booking_stats(self, booking_service, make_booking, rooms):
        make_booking([rooms[0].id])
        stats = booking_service.get_booking_stats()
        assert stats["total_bookings"] == 1
        assert stats["arrivals_today"] == 1
        assert stats["total_rooms"] == 3
