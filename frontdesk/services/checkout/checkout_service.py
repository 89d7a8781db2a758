"""
Checkout workflow and checkout alerts.

A checkout prorates the stay against the scheduled dates, adds a late
fee when the guest leaves after the standard checkout time plus the
grace period, frees the rooms and queues cleaning for each of them.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from frontdesk.core.exceptions import InvalidStateError, ValidationError
from frontdesk.models.booking import Booking, BookingRoom
from frontdesk.models.checkout import CheckoutNotification, LateCheckoutCharge
from frontdesk.models.enums import (
    BookingRoomStatus,
    BookingStatus,
    NotificationType,
    RoomStatus,
    TransactionType,
)
from frontdesk.models.payment import BookingPaymentBreakdown, ChargeItem, PaymentTransaction
from frontdesk.repositories.booking_repository import BookingRepository, BookingRoomRepository
from frontdesk.repositories.checkout_repository import (
    CheckoutNotificationRepository,
    LateCheckoutChargeRepository,
)
from frontdesk.repositories.report_repository import ReportRepository
from frontdesk.repositories.staff_repository import StaffLogRepository, StaffRepository
from frontdesk.schemas.checkout import CheckoutRequest
from frontdesk.services.base import BaseService
from frontdesk.services.booking.booking_service import count_nights, recalculate_totals, refresh_outstanding
from frontdesk.services.checkout.late_fee import NO_LATE_FEE, GracePeriodPolicy, LateFee, calculate_late_fee
from frontdesk.services.checkout.price_adjustment import (
    PriceAdjustment,
    calculate_price_adjustment,
    validate_early_checkout_reason,
)
from frontdesk.services.housekeeping.housekeeping_service import HousekeepingService
from frontdesk.services.payment.payment_summary import summarize_payments
from frontdesk.utils.date_utils import end_of_day, start_of_day
from frontdesk.utils.formatters import ZERO, money_float, quantize_money, to_decimal

CHECKOUT_ALLOWED_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN)


@dataclass
class CheckoutQuote:
    """Everything a checkout would change, computed without writing."""

    booking: Booking
    legs: List[BookingRoom]
    actual_check_out: datetime
    adjustment: PriceAdjustment
    late_fee: LateFee
    room_id: Optional[str] = None
    current_total: Decimal = field(init=False)
    paid_total: Decimal = field(init=False)
    new_total: Decimal = field(init=False)

    def __post_init__(self) -> None:
        # Snapshot of the breakdown before the checkout writes to it
        totals = summarize_payments(self.booking.payment_breakdown)
        self.current_total = totals.total_amount
        self.paid_total = totals.paid_total
        self.new_total = self.current_total + self.adjustment.adjustment + self.late_fee.fee

    @property
    def final_amount(self) -> Decimal:
        """Prorated amount for the rooms being checked out, late fee included."""
        return self.adjustment.final_amount + self.late_fee.fee

    @property
    def remaining_balance(self) -> Decimal:
        return max(self.new_total - self.paid_total, ZERO)

    def to_dict(self) -> Dict[str, Any]:
        booking = self.booking
        return {
            "booking_id": booking.id,
            "booking_number": booking.booking_number,
            "guest_name": booking.guest.name if booking.guest else None,
            "room_id": self.room_id,
            "rooms": [leg.room.number for leg in self.legs],
            "check_in": booking.check_in.isoformat(),
            "scheduled_check_out": booking.expected_checkout.isoformat(),
            "actual_check_out": self.actual_check_out.isoformat(),
            "is_early": self.adjustment.is_early,
            "is_late": self.adjustment.is_late,
            "days_difference": self.adjustment.day_difference,
            "original_amount": money_float(self.adjustment.original_amount),
            "price_adjustment": money_float(self.adjustment.adjustment),
            "adjustment_reason": self.adjustment.reason,
            "adjustment": self.adjustment.to_dict(),
            "late_fee": money_float(self.late_fee.fee),
            "late_checkout": self.late_fee.to_dict(),
            "final_amount": money_float(self.final_amount),
            "booking_total": money_float(self.new_total),
            "paid_total": money_float(self.paid_total),
            "remaining_balance": money_float(self.remaining_balance),
        }


class CheckoutService(BaseService):

    def __init__(self, db, settings=None, email_service=None):
        super().__init__(db, settings)
        self.bookings = BookingRepository(db)
        self.booking_rooms = BookingRoomRepository(db)
        self.notifications = CheckoutNotificationRepository(db)
        self.late_charges = LateCheckoutChargeRepository(db)
        self.reports = ReportRepository(db)
        self.staff = StaffRepository(db)
        self.logs = StaffLogRepository(db)
        self.housekeeping = HousekeepingService(db, self.settings)
        self.policy = GracePeriodPolicy.from_settings(self.settings)
        self.email_service = email_service

    def scheduled_checkout_at(self, day: date) -> datetime:
        return datetime.combine(day, self.settings.checkout_time())

    # ==================== Quotes ====================

    def _checkout_booking(self, booking_id: str) -> Booking:
        booking = self.bookings.get_with_details(booking_id)
        if booking.status not in CHECKOUT_ALLOWED_STATUSES:
            raise InvalidStateError(
                f"Cannot check out a booking that is {booking.status.value}",
                booking.status.value,
            )
        return booking

    def _legs_for(self, booking: Booking, room_id: Optional[str]) -> List[BookingRoom]:
        active = booking.active_rooms
        if room_id is None:
            if not active:
                raise InvalidStateError("Booking has no rooms left to check out", booking.status.value)
            return active
        legs = [leg for leg in active if leg.room_id == room_id]
        if not legs:
            raise ValidationError(
                "Room is not an active room of this booking",
                field_errors={"room_id": [room_id]},
            )
        return legs

    def _quote(self, booking: Booking, actual_check_out: datetime, room_id: Optional[str]) -> CheckoutQuote:
        legs = self._legs_for(booking, room_id)

        settled = any(leg.room_status == BookingRoomStatus.CHECKED_OUT for leg in booking.rooms)
        if room_id is None and not settled:
            check_in = booking.check_in
            scheduled = booking.expected_checkout
            original = summarize_payments(booking.payment_breakdown).total_amount
        elif room_id is None:
            # Rooms already checked out were prorated then; only the rest is left
            check_in = min(leg.check_in_date for leg in legs)
            scheduled = max(leg.check_out_date for leg in legs)
            original = sum((to_decimal(leg.room_total) for leg in legs), ZERO)
        else:
            leg = legs[0]
            check_in = leg.check_in_date
            scheduled = leg.check_out_date
            original = to_decimal(leg.room_total)

        # Proration counts calendar days; the clock time only matters for late fees
        adjustment = calculate_price_adjustment(check_in, scheduled, actual_check_out.date(), original)

        late_fee = NO_LATE_FEE
        if not adjustment.is_early:
            late_fee = calculate_late_fee(
                self.scheduled_checkout_at(actual_check_out.date()),
                actual_check_out,
                self.policy,
            )
        return CheckoutQuote(booking, legs, actual_check_out, adjustment, late_fee, room_id)

    def preview_checkout(
        self,
        booking_id: str,
        actual_check_out: Optional[datetime] = None,
        room_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        booking = self._checkout_booking(booking_id)
        return self._quote(booking, actual_check_out or datetime.now(), room_id).to_dict()

    # ==================== Checkout ====================

    def _record_late_fee(self, booking: Booking, quote: CheckoutQuote) -> None:
        fee = quote.late_fee
        scheduled = self.scheduled_checkout_at(quote.actual_check_out.date())
        booking.charge_items.append(
            ChargeItem(
                description=f"Late checkout fee ({fee.hours_charged} hour(s))",
                quantity=1,
                unit_price=quantize_money(fee.fee),
                total_amount=quantize_money(fee.fee),
            )
        )
        self.late_charges.create(
            LateCheckoutCharge(
                booking_id=booking.id,
                scheduled_checkout=scheduled,
                actual_checkout=quote.actual_check_out,
                late_minutes=fee.late_minutes,
                grace_period_minutes=self.policy.duration_minutes if self.policy.enabled else 0,
                hours_charged=fee.hours_charged,
                fee_amount=quantize_money(fee.fee),
            )
        )
        self.notifications.create(
            CheckoutNotification(
                booking_id=booking.id,
                guest_name=booking.guest.name,
                room_number=", ".join(leg.room.number for leg in quote.legs)[:20],
                checkout_time=scheduled,
                notification_type=NotificationType.LATE_CHARGES,
                message=(
                    f"Late checkout fee of {money_float(fee.fee)} applied: "
                    f"{fee.late_minutes} minutes late, {fee.hours_charged} hour(s) charged"
                ),
            )
        )

    def _collect_payment(self, booking: Booking, breakdown: BookingPaymentBreakdown, request: CheckoutRequest) -> None:
        column = f"receipt_{request.payment_method.value}"
        setattr(breakdown, column, quantize_money(to_decimal(getattr(breakdown, column)) + request.collect_amount))
        booking.transactions.append(
            PaymentTransaction(
                amount=quantize_money(request.collect_amount),
                payment_method=request.payment_method.transaction_method,
                transaction_type=TransactionType.RECEIPT,
                collected_by=request.staff_id,
                notes="Collected at checkout",
            )
        )
        refresh_outstanding(breakdown)

    def process_checkout(self, request: CheckoutRequest) -> Dict[str, Any]:
        """
        Check out a whole booking or a single room.

        Raises:
            InvalidStateError: Booking is not confirmed or checked in
            ValidationError: Missing early checkout reason, unknown room,
                or collection above the remaining balance
        """
        booking = self._checkout_booking(request.booking_id)
        if request.staff_id:
            self.staff.get_by_id(request.staff_id)

        actual = request.actual_check_out or datetime.now()
        quote = self._quote(booking, actual, request.room_id)
        reason_text = validate_early_checkout_reason(
            quote.adjustment,
            request.early_checkout_reason,
            request.custom_reason,
        )

        collect = to_decimal(request.collect_amount)
        if collect > quantize_money(quote.remaining_balance):
            raise ValidationError(
                "Collected amount exceeds the remaining balance",
                field_errors={"collect_amount": [f"must be <= {money_float(quote.remaining_balance)}"]},
            )

        tasks = []
        with self.transaction("process checkout"):
            for leg in quote.legs:
                if leg.actual_check_in is None:
                    leg.actual_check_in = actual
                leg.actual_check_out = actual
                leg.room_status = BookingRoomStatus.CHECKED_OUT
                leg.room.status = RoomStatus.AVAILABLE
                tasks.append(self.housekeeping.schedule_checkout_cleaning(leg.room, booking.id))

            breakdown = booking.payment_breakdown
            if breakdown is None:
                breakdown = BookingPaymentBreakdown()
                booking.payment_breakdown = breakdown
            breakdown.price_adjustment = quantize_money(
                to_decimal(breakdown.price_adjustment) + quote.adjustment.adjustment
            )
            if quote.late_fee.fee > 0:
                self._record_late_fee(booking, quote)
            self.db.flush()
            recalculate_totals(booking)

            if collect > 0:
                self._collect_payment(booking, breakdown, request)

            if reason_text:
                booking.early_checkout_reason = reason_text
            if request.notes:
                booking.checkout_notes = request.notes

            fully_checked_out = not booking.active_rooms
            if fully_checked_out:
                booking.status = BookingStatus.CHECKED_OUT
                booking.actual_check_out = actual
                booking.actual_nights = count_nights(booking.check_in, actual.date())
                self.notifications.deactivate_for_booking(booking.id)

            self.logs.add(
                "CHECK_OUT",
                staff_id=request.staff_id,
                details={
                    "booking_number": booking.booking_number,
                    "rooms": [leg.room.number for leg in quote.legs],
                    "days_difference": quote.adjustment.day_difference,
                    "price_adjustment": money_float(quote.adjustment.adjustment),
                    "late_fee": money_float(quote.late_fee.fee),
                    "collected": money_float(collect),
                },
                booking_id=booking.id,
            )

        remaining = summarize_payments(breakdown).outstanding
        self._logger.info(
            f"Checked out {len(quote.legs)} room(s) of booking {booking.booking_number}, "
            f"final amount {money_float(quote.final_amount)}, remaining {money_float(remaining)}"
        )

        result = quote.to_dict()
        result.update({
            "booking_status": booking.status.value,
            "early_checkout_reason": reason_text,
            "collected_amount": money_float(collect),
            "paid_total": money_float(summarize_payments(breakdown).paid_total),
            "remaining_balance": money_float(remaining),
            "housekeeping_tasks": [task.task_number for task in tasks],
        })

        if request.send_receipt and self.email_service is not None and booking.guest.email:
            self.email_service.send_checkout_receipt(booking, result)
        return result

    # ==================== Notifications ====================

    def _notify(
        self,
        booking: Booking,
        legs: List[BookingRoom],
        due: datetime,
        notification_type: NotificationType,
        message: str,
    ) -> Optional[CheckoutNotification]:
        if self.notifications.find_active(booking.id, notification_type) is not None:
            return None
        return self.notifications.create(
            CheckoutNotification(
                booking_id=booking.id,
                guest_name=booking.guest.name,
                room_number=", ".join(leg.room.number for leg in legs)[:20],
                checkout_time=due,
                notification_type=notification_type,
                message=message,
            )
        )

    def process_automated_notifications(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Raise approaching, grace period and overdue alerts for in-house rooms.

        At most one active alert of each type exists per booking.
        """
        now = now or datetime.now()
        approaching_window = timedelta(hours=self.settings.APPROACHING_CHECKOUT_HOURS)
        grace = timedelta(minutes=self.policy.duration_minutes if self.policy.enabled else 0)

        by_booking: "OrderedDict[str, List[BookingRoom]]" = OrderedDict()
        for leg in self.booking_rooms.in_house():
            by_booking.setdefault(leg.booking_id, []).append(leg)

        created: List[CheckoutNotification] = []
        with self.transaction("process checkout notifications"):
            for legs in by_booking.values():
                booking = legs[0].booking
                due = self.scheduled_checkout_at(min(leg.check_out_date for leg in legs))
                notification = None

                if due - approaching_window <= now <= due:
                    minutes = int((due - now).total_seconds() // 60)
                    notification = self._notify(
                        booking, legs, due, NotificationType.APPROACHING,
                        f"{booking.guest.name} is due to check out in {minutes} minutes",
                    )
                elif due < now <= due + grace:
                    notification = self._notify(
                        booking, legs, due, NotificationType.GRACE_PERIOD,
                        f"{booking.guest.name} is within the checkout grace period",
                    )
                elif now > due + grace:
                    minutes = int((now - due).total_seconds() // 60)
                    notification = self._notify(
                        booking, legs, due, NotificationType.OVERDUE,
                        f"{booking.guest.name} is {minutes} minutes past checkout",
                    )

                if notification is not None:
                    created.append(notification)

        counts = {kind.value: 0 for kind in (NotificationType.APPROACHING, NotificationType.GRACE_PERIOD, NotificationType.OVERDUE)}
        for notification in created:
            counts[notification.notification_type.value] += 1
        if created:
            self._logger.info(f"Created {len(created)} checkout notification(s): {counts}")
        return {"created": len(created), **counts, "notifications": created}

    def get_active_alerts(self) -> List[CheckoutNotification]:
        return self.notifications.list_active()

    def dismiss_notification(self, notification_id: str, staff_id: Optional[str] = None) -> CheckoutNotification:
        notification = self.notifications.get_by_id(notification_id)
        if staff_id:
            self.staff.get_by_id(staff_id)
        with self.transaction("dismiss checkout notification"):
            notification.is_active = False
            notification.dismissed_by = staff_id
            notification.dismissed_at = datetime.now()
        return notification

    def get_checkout_statistics(self, start: date, end: date) -> Dict[str, Any]:
        """On-time versus late checkouts and late fee totals for a date range."""
        legs = self.reports.actual_checkouts(start, end)
        on_time = late = grace_used = 0
        late_minutes: List[int] = []
        for leg in legs:
            fee = calculate_late_fee(
                self.scheduled_checkout_at(leg.actual_check_out.date()),
                leg.actual_check_out,
                self.policy,
            )
            if not fee.is_late:
                on_time += 1
            elif fee.within_grace_period:
                grace_used += 1
            else:
                late += 1
                late_minutes.append(fee.late_minutes)

        charges = self.late_charges.in_range(start_of_day(start), end_of_day(end))
        total_fees = sum((to_decimal(charge.fee_amount) for charge in charges), ZERO)
        return {
            "from_date": start.isoformat(),
            "to_date": end.isoformat(),
            "total_checkouts": len(legs),
            "on_time_checkouts": on_time,
            "late_checkouts": late,
            "grace_period_used": grace_used,
            "late_fee_charges": len(charges),
            "total_late_fees": money_float(total_fees),
            "average_late_minutes": round(sum(late_minutes) / len(late_minutes), 1) if late_minutes else 0.0,
        }
