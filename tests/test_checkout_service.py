from __future__ import annotations

from dataclasses import fields
from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest

from frontdesk.core.exceptions import InvalidStateError, ValidationError
from frontdesk.models.enums import (
    BookingRoomStatus,
    BookingStatus,
    NotificationType,
    PaymentMethod,
    RoomStatus,
)
from frontdesk.schemas.checkout import CheckoutRequest
from frontdesk.services.checkout.checkout_service import CheckoutQuote, CheckoutService

TODAY = date.today()


def at(hour: int, minute: int = 0, day: date = TODAY) -> datetime:
    return datetime.combine(day, time(hour, minute))


@pytest.fixture
def checkout_service(db_session, settings) -> CheckoutService:
    return CheckoutService(db_session, settings)


@pytest.fixture
def in_house(make_booking, booking_service, rooms):
    """Checked-in booking; by default it arrived three days ago and is due today."""
    def _make(room_ids=None, arrived_days_ago: int = 3, nights: int = 3, **kwargs):
        room_ids = room_ids or [rooms[0].id]
        booking = make_booking(room_ids, check_in=TODAY - timedelta(days=arrived_days_ago), nights=nights, **kwargs)
        return booking_service.check_in(booking.id, checked_in_at=at(14, day=booking.check_in))
    return _make


class TestPreview:
    def test_early_departure_is_prorated(self, checkout_service, in_house):
        booking = in_house(arrived_days_ago=1, nights=3)
        quote = checkout_service.preview_checkout(booking.id, at(10))

        assert quote["is_early"] is True
        assert quote["days_difference"] == 2
        assert quote["original_amount"] == 3000.0
        assert quote["price_adjustment"] == -2000.0
        assert quote["final_amount"] == 1000.0
        assert quote["late_fee"] == 0.0
        assert booking.status == BookingStatus.CHECKED_IN

    def test_overstay_adds_nights(self, checkout_service, in_house):
        booking = in_house(arrived_days_ago=3, nights=2)
        quote = checkout_service.preview_checkout(booking.id, at(10))

        assert quote["is_late"] is True
        assert quote["price_adjustment"] == 1000.0
        assert quote["booking_total"] == 3000.0

    def test_quote_snapshots_totals_when_built(self, checkout_service, in_house):
        booking = in_house(arrived_days_ago=1, nights=3, advance_cash=Decimal("1000"))
        quote = checkout_service._quote(booking, at(10), None)

        assert isinstance(quote, CheckoutQuote)
        assert {f.name for f in fields(quote) if not f.init} == {"current_total", "paid_total", "new_total"}
        assert quote.current_total == Decimal("3000")
        assert quote.paid_total == Decimal("1000")
        assert quote.new_total == Decimal("1000")
        assert quote.final_amount == Decimal("1000")
        assert quote.remaining_balance == Decimal("0")

    def test_cancelled_booking_cannot_be_checked_out(self, checkout_service, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id])
        booking_service.cancel_booking(booking.id)
        with pytest.raises(InvalidStateError, match="Cannot check out a booking that is cancelled"):
            checkout_service.preview_checkout(booking.id)


class TestProcessCheckout:
    def test_on_time_checkout(self, checkout_service, in_house, db_session):
        booking = in_house()
        result = checkout_service.process_checkout(CheckoutRequest(booking_id=booking.id, actual_check_out=at(11, 30)))

        assert result["booking_status"] == "checked_out"
        assert result["price_adjustment"] == 0.0
        assert result["late_fee"] == 0.0
        assert result["remaining_balance"] == 3000.0
        assert len(result["housekeeping_tasks"]) == 1

        db_session.expire_all()
        assert booking.status == BookingStatus.CHECKED_OUT
        assert booking.actual_nights == 3
        assert booking.rooms[0].room_status == BookingRoomStatus.CHECKED_OUT
        assert booking.rooms[0].room.status == RoomStatus.AVAILABLE

    def test_early_checkout_requires_reason(self, checkout_service, in_house):
        booking = in_house(arrived_days_ago=1, nights=3)
        with pytest.raises(ValidationError, match="Early checkout reason is required"):
            checkout_service.process_checkout(CheckoutRequest(booking_id=booking.id, actual_check_out=at(10)))

    def test_early_checkout_with_custom_reason(self, checkout_service, in_house, db_session):
        booking = in_house(arrived_days_ago=1, nights=3)
        result = checkout_service.process_checkout(CheckoutRequest(
            booking_id=booking.id,
            actual_check_out=at(10),
            early_checkout_reason="Other",
            custom_reason="Flight rescheduled",
        ))

        assert result["early_checkout_reason"] == "Flight rescheduled"
        assert result["booking_total"] == 1000.0
        db_session.expire_all()
        assert booking.payment_breakdown.price_adjustment == Decimal("-2000.00")
        assert booking.payment_breakdown.total_amount == Decimal("1000.00")

    def test_late_fee_is_recorded(self, checkout_service, in_house, db_session):
        booking = in_house()
        result = checkout_service.process_checkout(CheckoutRequest(booking_id=booking.id, actual_check_out=at(15, 30)))

        assert result["late_fee"] == 300.0
        assert result["late_checkout"]["hours_charged"] == 3
        assert result["booking_total"] == 3300.0

        db_session.expire_all()
        assert [item.description for item in booking.charge_items] == ["Late checkout fee (3 hour(s))"]
        alerts = checkout_service.get_active_alerts()
        assert [alert.notification_type for alert in alerts] == [NotificationType.LATE_CHARGES]

    def test_checkout_inside_grace_period_is_free(self, checkout_service, in_house):
        booking = in_house()
        result = checkout_service.process_checkout(CheckoutRequest(booking_id=booking.id, actual_check_out=at(12, 45)))
        assert result["late_checkout"]["grace_period_used"] is True
        assert result["late_fee"] == 0.0

    def test_single_room_checkout_keeps_booking_open(self, checkout_service, in_house, rooms, db_session):
        booking = in_house([rooms[0].id, rooms[1].id])
        result = checkout_service.process_checkout(CheckoutRequest(
            booking_id=booking.id,
            room_id=rooms[0].id,
            actual_check_out=at(11),
        ))

        assert result["rooms"] == ["101"]
        assert result["booking_status"] == "checked_in"
        db_session.expire_all()
        statuses = {leg.room.number: leg.room_status for leg in booking.rooms}
        assert statuses == {"101": BookingRoomStatus.CHECKED_OUT, "102": BookingRoomStatus.CHECKED_IN}

        result = checkout_service.process_checkout(CheckoutRequest(booking_id=booking.id, actual_check_out=at(11, 30)))
        assert result["rooms"] == ["102"]
        assert result["booking_status"] == "checked_out"

    def test_rest_of_booking_is_prorated_after_single_room_checkout(self, checkout_service, in_house, rooms, db_session):
        booking = in_house([rooms[0].id, rooms[1].id], arrived_days_ago=1, nights=3)
        first = checkout_service.process_checkout(CheckoutRequest(
            booking_id=booking.id,
            room_id=rooms[0].id,
            actual_check_out=at(10),
            early_checkout_reason="Guest request",
        ))
        assert first["price_adjustment"] == -2000.0
        assert first["booking_total"] == 4000.0

        rest = checkout_service.process_checkout(CheckoutRequest(
            booking_id=booking.id,
            actual_check_out=at(10),
            early_checkout_reason="Guest request",
        ))
        assert rest["rooms"] == ["102"]
        assert rest["original_amount"] == 3000.0
        assert rest["price_adjustment"] == -2000.0
        assert rest["booking_total"] == 2000.0
        assert rest["remaining_balance"] == 2000.0

        db_session.expire_all()
        assert booking.payment_breakdown.total_amount == Decimal("2000.00")
        assert booking.payment_breakdown.price_adjustment == Decimal("-4000.00")

    def test_unknown_room_is_rejected(self, checkout_service, in_house, rooms):
        booking = in_house()
        with pytest.raises(ValidationError, match="not an active room"):
            checkout_service.process_checkout(CheckoutRequest(booking_id=booking.id, room_id=rooms[2].id))

    def test_collects_outstanding_balance(self, checkout_service, in_house):
        booking = in_house(advance_cash=Decimal("1000"))
        result = checkout_service.process_checkout(CheckoutRequest(
            booking_id=booking.id,
            actual_check_out=at(11),
            collect_amount=Decimal("2000"),
            payment_method=PaymentMethod.UPI,
        ))
        assert result["collected_amount"] == 2000.0
        assert result["paid_total"] == 3000.0
        assert result["remaining_balance"] == 0.0

    def test_collection_above_balance_is_rejected(self, checkout_service, in_house):
        booking = in_house(advance_cash=Decimal("1000"))
        with pytest.raises(ValidationError, match="exceeds the remaining balance"):
            checkout_service.process_checkout(CheckoutRequest(
                booking_id=booking.id,
                actual_check_out=at(11),
                collect_amount=Decimal("2500"),
            ))

    def test_cleaning_task_per_room(self, checkout_service, in_house, rooms):
        booking = in_house([rooms[0].id, rooms[1].id])
        result = checkout_service.process_checkout(CheckoutRequest(booking_id=booking.id, actual_check_out=at(11)))

        tasks = checkout_service.housekeeping.list_tasks()
        assert sorted(task.task_number for task in tasks) == sorted(result["housekeeping_tasks"])
        assert {task.task_type for task in tasks} == {"checkout_cleaning"}
        assert {task.priority.value for task in tasks} == {"high"}


class TestNotifications:
    def test_windows(self, checkout_service, in_house):
        in_house()

        result = checkout_service.process_automated_notifications(at(10, 30))
        assert result["created"] == 1
        assert result["approaching"] == 1

        result = checkout_service.process_automated_notifications(at(12, 30))
        assert result["grace_period"] == 1

        result = checkout_service.process_automated_notifications(at(14))
        assert result["overdue"] == 1
        assert "120 minutes past checkout" in result["notifications"][0].message

    def test_alert_is_not_duplicated(self, checkout_service, in_house):
        in_house()
        checkout_service.process_automated_notifications(at(14))
        again = checkout_service.process_automated_notifications(at(15))
        assert again["created"] == 0
        assert len(checkout_service.get_active_alerts()) == 1

    def test_nothing_before_window(self, checkout_service, in_house):
        in_house()
        assert checkout_service.process_automated_notifications(at(8))["created"] == 0

    def test_dismiss(self, checkout_service, in_house, staff_member):
        in_house()
        notification = checkout_service.process_automated_notifications(at(14))["notifications"][0]
        dismissed = checkout_service.dismiss_notification(notification.id, staff_member.id)

        assert dismissed.is_active is False
        assert dismissed.dismissed_by == staff_member.id
        assert checkout_service.get_active_alerts() == []

    def test_checkout_clears_alerts(self, checkout_service, in_house):
        booking = in_house()
        checkout_service.process_automated_notifications(at(10, 30))
        checkout_service.process_checkout(CheckoutRequest(booking_id=booking.id, actual_check_out=at(11)))
        assert checkout_service.get_active_alerts() == []


class TestStatistics:
    def test_on_time_and_late(self, checkout_service, in_house, rooms):
        first = in_house([rooms[0].id])
        second = in_house([rooms[1].id])
        checkout_service.process_checkout(CheckoutRequest(booking_id=first.id, actual_check_out=at(11)))
        checkout_service.process_checkout(CheckoutRequest(booking_id=second.id, actual_check_out=at(14, 30)))

        stats = checkout_service.get_checkout_statistics(TODAY, TODAY)
        assert stats["total_checkouts"] == 2
        assert stats["on_time_checkouts"] == 1
        assert stats["late_checkouts"] == 1
        assert stats["late_fee_charges"] == 1
        assert stats["total_late_fees"] == 200.0
        assert stats["average_late_minutes"] == 150.0
