"""
Front-desk reports.

Each report flattens booking rooms, payment ledgers, cancellations, room
blocks or transfers into plain rows plus a summary. Amounts come out of
``summarize_payments`` so every report agrees on advance, receipt and
outstanding totals. Database failures surface as ReportQueryError.
"""

from collections import OrderedDict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from frontdesk.core.exceptions import ReportQueryError, ValidationError
from frontdesk.models.booking import BookingRoom, CancelledBooking, RoomTransfer
from frontdesk.models.enums import BookingRoomStatus, PaymentMethod, RoomStatus, TransactionType
from frontdesk.models.payment import BookingPaymentBreakdown, PaymentTransaction
from frontdesk.models.room import BlockedRoom
from frontdesk.repositories.report_repository import ReportRepository
from frontdesk.repositories.room_repository import RoomRepository
from frontdesk.services.base import BaseService
from frontdesk.services.payment.payment_summary import summarize_payments
from frontdesk.services.reports.status_buckets import bucket_rows
from frontdesk.utils.date_utils import daterange, end_of_day, format_display_date, start_of_day
from frontdesk.utils.formatters import ZERO, money_float, to_decimal

T = TypeVar("T")

NOT_AVAILABLE = "N/A"

# Arrivals and departures further than this from the plan are reported
EARLY_LATE_THRESHOLD_HOURS = 2

COLLECTION_METHODS = tuple(method.transaction_method for method in PaymentMethod)


def _booking_room_base(leg: BookingRoom) -> Dict[str, Any]:
    """Columns shared by every per-room report row."""
    booking = leg.booking
    guest = booking.guest
    return {
        "id": f"{booking.id}_{leg.id}",
        "booking_id": booking.id,
        "booking_number": booking.booking_number,
        "status": booking.status.value,
        "arrival_type": booking.arrival_type.value if booking.arrival_type else None,
        "company_ota_agent": booking.ota_company or NOT_AVAILABLE,
        "number_of_guests": booking.number_of_guests,
        "child_guests": booking.child_guests,
        "extra_guests": booking.extra_guests,
        "bill_number": booking.bill_number,
        "guest_name": guest.name if guest else NOT_AVAILABLE,
        "guest_phone": (guest.phone if guest else None) or NOT_AVAILABLE,
        "room_number": leg.room.number if leg.room else NOT_AVAILABLE,
        "room_type": leg.room_type or NOT_AVAILABLE,
        "staff_name": booking.staff.name if booking.staff else NOT_AVAILABLE,
        "room_check_in": leg.check_in_date,
        "room_check_out": leg.check_out_date,
        "room_actual_check_in": leg.actual_check_in,
        "room_actual_check_out": leg.actual_check_out,
        "room_status": leg.room_status.value,
    }


def _sort_key(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return start_of_day(value)


class ReportService(BaseService):

    def __init__(self, db, settings=None):
        super().__init__(db, settings)
        self.reports = ReportRepository(db)
        self.rooms = RoomRepository(db)

    def _query(self, report: str, fetch: Callable[[], T]) -> T:
        try:
            return fetch()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(f"{report} report query failed: {e}", exc_info=True)
            raise ReportQueryError(str(e)) from e

    # ==================== Check-in / check-out ====================

    def _checkin_row(self, leg: BookingRoom) -> Dict[str, Any]:
        totals = summarize_payments(leg.booking.payment_breakdown)
        row = _booking_room_base(leg)
        row.update({
            "checkin_time": leg.actual_check_in or leg.check_in_date,
            "expected_checkout": leg.check_out_date,
            "planned_nights": leg.booking.planned_nights,
            "advance_cash": money_float(totals.advance_cash),
            "advance_card": money_float(totals.advance_card),
            "advance_upi": money_float(totals.advance_upi),
            "advance_bank": money_float(totals.advance_bank),
            "advance_total": money_float(totals.advance_total),
        })
        return row

    def _checkout_row(self, leg: BookingRoom) -> Dict[str, Any]:
        breakdown = leg.booking.payment_breakdown
        totals = summarize_payments(breakdown)
        row = _booking_room_base(leg)
        row.update({
            "checkout_time": leg.actual_check_out or leg.check_out_date,
            "actual_nights": leg.booking.actual_nights,
            "full_payment": money_float(totals.total_amount),
            "receipt_cash": money_float(totals.receipt_cash),
            "receipt_card": money_float(totals.receipt_card),
            "receipt_upi": money_float(totals.receipt_upi),
            "receipt_bank": money_float(totals.receipt_bank),
            "receipt_total": money_float(totals.receipt_total),
            "outstanding_amount": money_float(totals.outstanding),
            "price_adjustment": money_float(getattr(breakdown, "price_adjustment", None)),
            "checkout_notes": leg.booking.checkout_notes or "",
        })
        return row

    def checkin_checkout(self, start: date, end: date) -> Dict[str, Any]:
        """
        Arrivals and departures in the range, newest first.

        A room counts by its actual timestamp when it has one and by its
        scheduled date otherwise.
        """
        def fetch():
            checkins = self.reports.actual_checkins(start, end) + self.reports.scheduled_checkins(start, end)
            checkouts = self.reports.actual_checkouts(start, end) + self.reports.scheduled_checkouts(start, end)
            return checkins, checkouts

        checkins, checkouts = self._query("checkin-checkout", fetch)
        checkins.sort(key=lambda leg: _sort_key(leg.actual_check_in or leg.check_in_date), reverse=True)
        checkouts.sort(key=lambda leg: _sort_key(leg.actual_check_out or leg.check_out_date), reverse=True)

        return {
            "checkins": bucket_rows([self._checkin_row(leg) for leg in checkins]),
            "checkouts": bucket_rows([self._checkout_row(leg) for leg in checkouts]),
        }

    def expected_checkout(self, start: date, end: date) -> Dict[str, Any]:
        legs = self._query("expected-checkout", lambda: self.reports.expected_checkouts(start, end))
        data = []
        for leg in legs:
            row = _booking_room_base(leg)
            row.update({
                "checkin_date": leg.actual_check_in or leg.check_in_date,
                "expected_checkout": leg.check_out_date,
                "planned_nights": leg.booking.planned_nights,
                "outstanding_amount": money_float(summarize_payments(leg.booking.payment_breakdown).outstanding),
            })
            data.append(row)
        return {"total": len(data), "data": data}

    # ==================== Money ====================

    def high_balance(
        self,
        threshold: Optional[Decimal] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Dict[str, Any]:
        """Bookings whose outstanding balance is above the threshold."""
        threshold = self.settings.HIGH_BALANCE_THRESHOLD if threshold is None else to_decimal(threshold)
        if threshold < 0:
            raise ValidationError("threshold cannot be negative", field_errors={"threshold": ["must be >= 0"]})

        ledgers: List[BookingPaymentBreakdown] = self._query(
            "high-balance",
            lambda: self.reports.high_balances(threshold, start, end),
        )
        data = []
        for ledger in ledgers:
            totals = summarize_payments(ledger)
            booking = ledger.booking
            data.append({
                "booking_id": ledger.booking_id,
                "booking_number": booking.booking_number,
                "guest_name": booking.guest.name if booking.guest else NOT_AVAILABLE,
                "guest_phone": booking.guest.phone if booking.guest else None,
                "status": booking.status.value,
                "created_at": booking.created_at,
                "total_amount": money_float(totals.total_amount),
                "paid_total": money_float(totals.paid_total),
                "outstanding_amount": money_float(ledger.outstanding_amount),
            })
        return {
            "total": len(data),
            "data": data,
            "summary": {
                "threshold": money_float(threshold),
                "total_outstanding": money_float(sum((to_decimal(row["outstanding_amount"]) for row in data), ZERO)),
            },
        }

    def collection(self, start: date, end: date) -> Dict[str, Any]:
        transactions: List[PaymentTransaction] = self._query(
            "collection",
            lambda: self.reports.transactions(start_of_day(start), end_of_day(end)),
        )
        by_method: Dict[str, Decimal] = OrderedDict()
        by_type: Dict[str, Decimal] = OrderedDict()
        total = ZERO
        for txn in transactions:
            amount = to_decimal(txn.amount)
            total += amount
            method = txn.payment_method or "unknown"
            by_method[method] = by_method.get(method, ZERO) + amount
            by_type[txn.transaction_type.value] = by_type.get(txn.transaction_type.value, ZERO) + amount

        return {
            "total_transactions": len(transactions),
            "total_amount": money_float(total),
            "by_method": {method: money_float(amount) for method, amount in by_method.items()},
            "by_type": {kind: money_float(amount) for kind, amount in by_type.items()},
            "data": [
                {
                    "id": txn.id,
                    "booking_id": txn.booking_id,
                    "amount": money_float(txn.amount),
                    "payment_method": txn.payment_method,
                    "transaction_type": txn.transaction_type.value,
                    "reference": txn.reference,
                    "created_at": txn.created_at,
                }
                for txn in transactions
            ],
            "summary": {"period": f"{format_display_date(start)} to {format_display_date(end)}"},
        }

    def day_settlement(self, start: date, end: date) -> Dict[str, Any]:
        """
        One settlement record per day.

        Revenue and advances come from bookings created that day,
        collections from payment transactions made that day. Occupancy
        is the current room status snapshot.
        """
        def fetch():
            return (
                self.reports.bookings_created(start_of_day(start), end_of_day(end)),
                self.reports.transactions(start_of_day(start), end_of_day(end)),
                self.reports.stay_activity(start, end),
                self.rooms.count(),
                self.rooms.count_by_status(RoomStatus.OCCUPIED),
            )

        bookings, transactions, activity, room_count, occupied = self._query("day-settlement", fetch)
        total_rooms = room_count or self.settings.TOTAL_ROOMS
        occupancy_rate = round(occupied / total_rooms * 100, 2) if total_rooms else 0.0

        records = []
        for day in daterange(start, end):
            day_bookings = [b for b in bookings if b.created_at.date() == day]
            day_transactions = [t for t in transactions if t.created_at.date() == day]

            room_revenue = sum(
                (to_decimal(leg.room_total) for b in day_bookings for leg in b.rooms),
                ZERO,
            )
            service_revenue = sum(
                (to_decimal(item.total_amount) for b in day_bookings for item in b.charge_items),
                ZERO,
            )
            advances = ZERO
            outstanding = ZERO
            for booking in day_bookings:
                totals = summarize_payments(booking.payment_breakdown)
                advances += totals.advance_total
                outstanding += to_decimal(getattr(booking.payment_breakdown, "outstanding_amount", None))

            collections = OrderedDict((method, ZERO) for method in COLLECTION_METHODS)
            for txn in day_transactions:
                if txn.transaction_type == TransactionType.REFUND:
                    continue
                collections[txn.payment_method] = collections.get(txn.payment_method, ZERO) + to_decimal(txn.amount)
            total_collections = sum(collections.values(), ZERO)

            record = {
                "id": f"settlement-{day.isoformat()}",
                "date": day,
                "total_revenue": money_float(room_revenue + service_revenue),
                "room_revenue": money_float(room_revenue),
                "service_revenue": money_float(service_revenue),
                "advance_collections": money_float(advances),
                "outstanding": money_float(outstanding),
                "collections": {method: money_float(amount) for method, amount in collections.items()},
                "total_collections": money_float(total_collections),
                "occupancy": {"occupied": occupied, "total": total_rooms, "rate": occupancy_rate},
                "average_room_rate": money_float(room_revenue / occupied) if occupied else 0.0,
                "checkins": sum(
                    1 for leg in activity if leg.actual_check_in and leg.actual_check_in.date() == day
                ),
                "checkouts": sum(
                    1 for leg in activity if leg.actual_check_out and leg.actual_check_out.date() == day
                ),
                "bookings": len(day_bookings),
            }
            records.append(record)

        return {
            "total": len(records),
            "data": records,
            "summary": {
                "total_revenue": money_float(sum((to_decimal(r["total_revenue"]) for r in records), ZERO)),
                "total_collections": money_float(sum((to_decimal(r["total_collections"]) for r in records), ZERO)),
                "total_outstanding": money_float(sum((to_decimal(r["outstanding"]) for r in records), ZERO)),
                "average_occupancy": occupancy_rate,
                "period": f"{format_display_date(start)} to {format_display_date(end)}",
            },
        }

    # ==================== Exceptions to plan ====================

    def cancelled_checkin(self, start: date, end: date) -> Dict[str, Any]:
        cancellations: List[CancelledBooking] = self._query(
            "cancelled-checkin",
            lambda: self.reports.cancellations(start, end),
        )
        data = []
        for index, cancellation in enumerate(cancellations, 1):
            booking = cancellation.booking
            legs = booking.rooms
            first = legs[0] if legs else None
            nights = (first.check_out_date - first.check_in_date).days if first else booking.planned_nights
            data.append({
                "id": cancellation.id,
                "s_no": index,
                "booking_id": booking.booking_number,
                "number_of_rooms": len(legs),
                "expected_checkin_date": first.check_in_date if first else booking.check_in,
                "expected_checkout_date": first.check_out_date if first else booking.expected_checkout,
                "number_of_nights": nights,
                "cancellation_reason": cancellation.cancellation_reason or "No reason provided",
                "cancel_date": cancellation.cancel_date,
                "staff_name": cancellation.cancelled_by.name if cancellation.cancelled_by else "Unknown Staff",
                "staff_id": cancellation.cancelled_by_staff_id,
                "refund_amount": money_float(cancellation.refund_amount),
                "refund_processed": bool(cancellation.refund_processed),
                "refund_processed_date": cancellation.refund_processed_date,
                "cancellation_notes": cancellation.notes,
                "rooms": [
                    {"room_number": leg.room_number or "Unknown", "room_type": leg.room_type or "Unknown"}
                    for leg in legs
                ],
            })

        reasons: Dict[str, int] = {}
        staff: Dict[str, int] = {}
        for row in data:
            reasons[row["cancellation_reason"]] = reasons.get(row["cancellation_reason"], 0) + 1
            staff[row["staff_name"]] = staff.get(row["staff_name"], 0) + 1

        return {
            "success": True,
            "data": data,
            "summary": {
                "total_cancelled": len(data),
                "total_rooms_cancelled": sum(row["number_of_rooms"] for row in data),
                "total_nights_cancelled": sum(row["number_of_nights"] for row in data),
                "total_refund_amount": money_float(sum((to_decimal(row["refund_amount"]) for row in data), ZERO)),
                "refunds_processed": sum(1 for row in data if row["refund_processed"]),
                "refunds_pending": sum(1 for row in data if not row["refund_processed"]),
                "cancellation_reasons": reasons,
                "cancelled_by_staff": staff,
            },
        }

    def early_checkin_late_checkout(self, start: date, end: date) -> Dict[str, Any]:
        """
        Rooms checked in more than two hours before midnight of the planned
        arrival date, or checked out more than two hours after the
        standard checkout time on the planned departure date.
        """
        legs = self._query("early-checkin-late-checkout", lambda: self.reports.stay_activity(start, end))
        threshold = timedelta(hours=EARLY_LATE_THRESHOLD_HOURS)
        checkout_time = self.settings.checkout_time()

        data = []
        for leg in legs:
            base = _booking_room_base(leg)

            if leg.actual_check_in is not None:
                planned = start_of_day(leg.check_in_date)
                difference = leg.actual_check_in - planned
                if difference < -threshold:
                    row = dict(base)
                    row.update({
                        "id": f"{base['id']}-early-checkin",
                        "type": "early_checkin",
                        "checkin_time": leg.actual_check_in,
                        "checkout_time": None,
                        "planned_checkin": planned,
                        "planned_checkout": None,
                        "checkin_difference_hours": round(difference.total_seconds() / 3600, 2),
                        "checkout_difference_hours": 0,
                    })
                    data.append(row)

            if leg.actual_check_out is not None:
                planned = datetime.combine(leg.check_out_date, checkout_time)
                difference = leg.actual_check_out - planned
                if difference > threshold:
                    row = dict(base)
                    row.update({
                        "id": f"{base['id']}-late-checkout",
                        "type": "late_checkout",
                        "checkin_time": None,
                        "checkout_time": leg.actual_check_out,
                        "planned_checkin": None,
                        "planned_checkout": planned,
                        "checkin_difference_hours": 0,
                        "checkout_difference_hours": round(difference.total_seconds() / 3600, 2),
                    })
                    data.append(row)

        return {
            "total": len(data),
            "data": data,
            "summary": {
                "early_checkins": sum(1 for row in data if row["type"] == "early_checkin"),
                "late_checkouts": sum(1 for row in data if row["type"] == "late_checkout"),
                "total_difference_hours": round(
                    sum(abs(row["checkin_difference_hours"] or row["checkout_difference_hours"]) for row in data),
                    2,
                ),
            },
        }

    # ==================== Rooms ====================

    def arrival(self, start: date, end: date) -> Dict[str, Any]:
        """One row per booking with rooms checked in during the range."""
        legs = self._query("arrival-report", lambda: self.reports.arrivals(start, end))

        rows: Dict[str, Dict[str, Any]] = OrderedDict()
        for leg in legs:
            booking = leg.booking
            row = rows.get(booking.id)
            if row is None:
                totals = summarize_payments(booking.payment_breakdown)
                row = rows[booking.id] = {
                    "id": booking.id,
                    "booking_number": booking.booking_number,
                    "guest_name": booking.guest.name if booking.guest else NOT_AVAILABLE,
                    "guest_phone": (booking.guest.phone if booking.guest else None) or NOT_AVAILABLE,
                    "arrival_type": booking.arrival_type.value if booking.arrival_type else None,
                    "ota_company": booking.ota_company or NOT_AVAILABLE,
                    "arrival_date": leg.actual_check_in,
                    "departure_date": booking.expected_checkout,
                    "planned_nights": 0,
                    "pax": booking.number_of_guests,
                    "child_pax": booking.child_guests,
                    "total_rooms": 0,
                    "rooms": [],
                    "room_types": {},
                    "advance_paid": money_float(totals.advance_total),
                    "total_amount": money_float(totals.total_amount),
                    "outstanding_amount": money_float(totals.outstanding),
                    "staff_name": booking.staff.name if booking.staff else NOT_AVAILABLE,
                }
            row["arrival_date"] = min(row["arrival_date"], leg.actual_check_in)
            row["planned_nights"] = max(row["planned_nights"], (leg.check_out_date - leg.check_in_date).days, 1)
            row["total_rooms"] += 1
            row["rooms"].append(leg.room_number or NOT_AVAILABLE)
            room_type = leg.room_type or NOT_AVAILABLE
            row["room_types"][room_type] = row["room_types"].get(room_type, 0) + 1

        data = list(rows.values())
        by_arrival_type: Dict[str, int] = {}
        for row in data:
            row["room_numbers"] = ", ".join(row["rooms"])
            kind = row["arrival_type"] or NOT_AVAILABLE
            by_arrival_type[kind] = by_arrival_type.get(kind, 0) + 1

        return {
            "total": len(data),
            "data": data,
            "summary": {
                "total_arrivals": len(data),
                "total_rooms": sum(row["total_rooms"] for row in data),
                "total_pax": sum(row["pax"] for row in data),
                "by_arrival_type": by_arrival_type,
            },
        }

    def occupancy(self, start: date, end: date, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Rooms occupied per night across the range.

        A room counts from its arrival date up to, but not including, its
        departure date, preferring actual timestamps to planned dates.
        Rooms still in house count until tomorrow at least.
        """
        today = today or date.today()

        def fetch():
            return self.reports.stays_overlapping(start, end), self.rooms.count()

        legs, room_count = self._query("occupancy-analysis", fetch)
        total_rooms = room_count or self.settings.TOTAL_ROOMS

        stays = []
        for leg in legs:
            first = leg.actual_check_in.date() if leg.actual_check_in else leg.check_in_date
            last = leg.actual_check_out.date() if leg.actual_check_out else leg.check_out_date
            if leg.actual_check_out is None and leg.room_status == BookingRoomStatus.CHECKED_IN:
                last = max(last, today + timedelta(days=1))
            if last <= first:
                last = first + timedelta(days=1)
            stays.append((leg.room_id, first, last))

        data = []
        for day in daterange(start, end):
            occupied = len({room_id for room_id, first, last in stays if first <= day < last})
            data.append({
                "id": f"occupancy-{day.isoformat()}",
                "date": day,
                "occupied_rooms": occupied,
                "total_rooms": total_rooms,
                "occupancy_percentage": round(occupied / total_rooms * 100, 2) if total_rooms else 0.0,
            })

        average = round(sum(row["occupancy_percentage"] for row in data) / len(data), 2) if data else 0.0
        return {
            "total": len(data),
            "data": data,
            "summary": {
                "average_occupancy": average,
                "peak_occupied_rooms": max((row["occupied_rooms"] for row in data), default=0),
                "period": f"{format_display_date(start)} to {format_display_date(end)}",
            },
        }

    def blocked_rooms(self, start: date, end: date) -> Dict[str, Any]:
        blocks: List[BlockedRoom] = self._query("blocked-rooms", lambda: self.reports.blocked_rooms(start, end))
        data = []
        for index, block in enumerate(blocks, 1):
            room = block.room
            data.append({
                "id": block.id,
                "s_no": index,
                "room_number": room.number if room else NOT_AVAILABLE,
                "room_type": (room.room_type_name if room else None) or NOT_AVAILABLE,
                "blocked_date": block.blocked_date,
                "room_status": "Blocked" if block.is_active else "Unblocked",
                "blocked_from": block.blocked_from_date,
                "blocked_to": block.blocked_to_date,
                "reason": block.reason or "No reason provided",
                "staff_blocked_by": block.blocked_by.name if block.blocked_by else "Unknown Staff",
                "unblocked_date": block.unblocked_date,
                "unblocked_by": block.unblocked_by.name if block.unblocked_by else None,
                "unblock_reason": block.unblock_reason,
                "notes": block.notes,
            })

        by_staff: Dict[str, int] = {}
        by_reason: Dict[str, int] = {}
        for row in data:
            by_staff[row["staff_blocked_by"]] = by_staff.get(row["staff_blocked_by"], 0) + 1
            by_reason[row["reason"]] = by_reason.get(row["reason"], 0) + 1

        currently_blocked = sum(1 for row in data if row["room_status"] == "Blocked")
        return {
            "total": len(data),
            "data": data,
            "summary": {
                "total_blocked": len(data),
                "currently_blocked": currently_blocked,
                "unblocked": len(data) - currently_blocked,
                "blocked_by_staff": by_staff,
                "blocked_by_reason": by_reason,
            },
        }

    def room_transfers(self, start: date, end: date) -> Dict[str, Any]:
        transfers: List[RoomTransfer] = self._query(
            "rooms-transfers",
            lambda: self.reports.room_transfers(start, end),
        )
        data = []
        for index, transfer in enumerate(transfers, 1):
            booking = transfer.booking
            data.append({
                "id": transfer.id,
                "s_no": index,
                "booking_id": transfer.booking_id,
                "booking_number": booking.booking_number,
                "guest_name": booking.guest.name if booking.guest else NOT_AVAILABLE,
                "from_room": transfer.from_room_number or NOT_AVAILABLE,
                "to_room": transfer.to_room_number or NOT_AVAILABLE,
                "transfer_date": transfer.transfer_date,
                "reason": transfer.reason,
                "transfer_by": transfer.transfer_staff_name or "Unknown Staff",
                "status": booking.status.value,
            })

        by_reason: Dict[str, int] = {}
        for row in data:
            by_reason[row["reason"]] = by_reason.get(row["reason"], 0) + 1

        return {
            "total": len(data),
            "data": data,
            "summary": {"total_transfers": len(data), "transfers_by_reason": by_reason},
        }

    # ==================== Dispatch ====================

    def generate(self, report: str, start: date, end: date, **params: Any) -> Dict[str, Any]:
        """Run a report by its URL name."""
        handlers = {
            "checkin-checkout": self.checkin_checkout,
            "expected-checkout": self.expected_checkout,
            "collection": self.collection,
            "day-settlement": self.day_settlement,
            "cancelled-checkin": self.cancelled_checkin,
            "early-checkin-late-checkout": self.early_checkin_late_checkout,
            "arrival-report": self.arrival,
            "occupancy-analysis": self.occupancy,
            "blocked-rooms": self.blocked_rooms,
            "rooms-transfers": self.room_transfers,
        }
        if report == "high-balance":
            return self.high_balance(params.get("threshold"), start, end)
        if report not in handlers:
            raise ValidationError(f"Unknown report: {report}", field_errors={"report": [report]})
        return handlers[report](start, end)
