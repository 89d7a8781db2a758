from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from frontdesk.core.exceptions import ReportQueryError, ValidationError
from frontdesk.models.enums import PaymentMethod
from frontdesk.repositories.report_repository import ReportRepository
from frontdesk.schemas.booking import PaymentCreate
from frontdesk.schemas.checkout import CheckoutRequest
from frontdesk.schemas.room import RoomBlockCreate, RoomUnblock
from frontdesk.services.checkout.checkout_service import CheckoutService
from frontdesk.services.reports.report_export_service import (
    ExportFormat,
    ReportExportService,
    export_filename,
    format_cell,
)
from frontdesk.services.reports.report_service import ReportService
from frontdesk.services.room.room_service import RoomService

TODAY = date.today()
URL = "/api/v1/reports"


def display(d: date) -> str:
    return d.strftime("%d/%m/%Y")


@pytest.fixture
def report_service(db_session, settings) -> ReportService:
    return ReportService(db_session, settings)


class TestDaySettlement:
    def test_revenue_collections_and_occupancy(self, report_service, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id, rooms[1].id], advance_cash=Decimal("1000"))
        booking_service.record_payment(booking.id, PaymentCreate(amount=Decimal("500"), method=PaymentMethod.CARD))
        booking_service.check_in(booking.id)

        result = report_service.day_settlement(TODAY, TODAY)
        record = result["data"][0]

        assert result["total"] == 1
        assert record["date"] == TODAY
        assert record["room_revenue"] == 6000.0
        assert record["total_revenue"] == 6000.0
        assert record["advance_collections"] == 1000.0
        assert record["collections"] == {"cash": 1000.0, "card": 500.0, "upi": 0.0, "bank_transfer": 0.0}
        assert record["total_collections"] == 1500.0
        assert record["outstanding"] == 4500.0
        assert record["occupancy"] == {"occupied": 2, "total": 3, "rate": 66.67}
        assert record["checkins"] == 2

    def test_one_record_per_day(self, report_service):
        result = report_service.day_settlement(TODAY - timedelta(days=2), TODAY)
        assert [record["date"] for record in result["data"]] == [
            TODAY - timedelta(days=2),
            TODAY - timedelta(days=1),
            TODAY,
        ]
        assert result["summary"]["total_revenue"] == 0.0


class TestOtherReports:
    def test_high_balance_uses_threshold(self, report_service, make_booking, rooms):
        big = make_booking([rooms[0].id, rooms[1].id])
        make_booking([rooms[2].id])

        result = report_service.high_balance()
        assert [row["booking_id"] for row in result["data"]] == [big.id]
        assert result["summary"] == {"threshold": 5000.0, "total_outstanding": 6000.0}

        assert report_service.high_balance(Decimal("1000"))["total"] == 2

    def test_negative_threshold(self, report_service):
        with pytest.raises(ValidationError, match="threshold cannot be negative"):
            report_service.high_balance(Decimal("-1"))

    def test_checkin_checkout_buckets(self, report_service, booking_service, make_booking, rooms):
        make_booking([rooms[0].id])
        cancelled = make_booking([rooms[1].id])
        booking_service.cancel_booking(cancelled.id)

        result = report_service.checkin_checkout(TODAY, TODAY)
        checkins = result["checkins"]
        assert checkins["total"] == 2
        assert [row["room_number"] for row in checkins["primary"]] == ["101"]
        assert [row["room_number"] for row in checkins["cancelled"]] == ["102"]

    def test_collection(self, report_service, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id], advance_cash=Decimal("700"))
        booking_service.record_payment(booking.id, PaymentCreate(amount=Decimal("300"), method=PaymentMethod.BANK))

        result = report_service.collection(TODAY, TODAY)
        assert result["total_transactions"] == 2
        assert result["total_amount"] == 1000.0
        assert result["by_method"] == {"cash": 700.0, "bank_transfer": 300.0}
        assert result["by_type"] == {"advance": 700.0, "receipt": 300.0}

    def test_cancelled_checkin(self, report_service, booking_service, make_booking, rooms, staff_member):
        booking = make_booking([rooms[0].id, rooms[1].id], advance_cash=Decimal("500"))
        booking_service.cancel_booking(booking.id, "Flight cancelled", staff_member.id, Decimal("200"))

        result = report_service.cancelled_checkin(TODAY, TODAY)
        row = result["data"][0]
        assert row["booking_id"] == booking.booking_number
        assert row["number_of_rooms"] == 2
        assert row["number_of_nights"] == 3
        assert row["staff_name"] == "Ravi Kumar"
        assert result["summary"]["total_refund_amount"] == 200.0
        assert result["summary"]["cancellation_reasons"] == {"Flight cancelled": 1}
        assert result["summary"]["refunds_pending"] == 1

    def test_early_checkin_and_late_checkout(self, report_service, booking_service, make_booking, rooms, db_session, settings):
        yesterday = TODAY - timedelta(days=1)
        booking = make_booking([rooms[0].id], check_in=yesterday, nights=1)
        booking_service.check_in(booking.id, checked_in_at=datetime.combine(yesterday - timedelta(days=1), time(20)))
        CheckoutService(db_session, settings).process_checkout(CheckoutRequest(
            booking_id=booking.id,
            actual_check_out=datetime.combine(TODAY, time(15)),
        ))

        result = report_service.early_checkin_late_checkout(TODAY - timedelta(days=2), TODAY)
        by_type = {row["type"]: row for row in result["data"]}
        assert by_type["early_checkin"]["checkin_difference_hours"] == -4.0
        assert by_type["late_checkout"]["checkout_difference_hours"] == 3.0
        assert result["summary"] == {"early_checkins": 1, "late_checkouts": 1, "total_difference_hours": 7.0}

    def test_unknown_report(self, report_service):
        with pytest.raises(ValidationError, match="Unknown report: police-report"):
            report_service.generate("police-report", TODAY, TODAY)

    def test_query_failure(self, report_service, monkeypatch):
        def broken(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(ReportRepository, "transactions", broken)
        with pytest.raises(ReportQueryError) as exc:
            report_service.collection(TODAY, TODAY)
        assert exc.value.to_dict()["error"] == "Failed to fetch report data"
        assert "database is locked" in exc.value.to_dict()["details"]


class TestRoomReports:
    def test_arrival_groups_rooms_by_booking(self, report_service, booking_service, make_booking, rooms):
        booking = make_booking([rooms[0].id, rooms[1].id], advance_cash=Decimal("500"))
        booking_service.check_in(booking.id)
        make_booking([rooms[2].id])

        result = report_service.arrival(TODAY, TODAY)
        row = result["data"][0]

        assert result["total"] == 1
        assert row["booking_number"] == booking.booking_number
        assert row["total_rooms"] == 2
        assert sorted(row["rooms"]) == ["101", "102"]
        assert row["room_types"] == {"Deluxe": 2}
        assert row["planned_nights"] == 3
        assert row["advance_paid"] == 500.0
        assert row["total_amount"] == 6000.0
        assert row["outstanding_amount"] == 5500.0
        assert result["summary"]["by_arrival_type"] == {"walk_in": 1}

    def test_occupancy_counts_nights(self, report_service, booking_service, make_booking, rooms):
        yesterday = TODAY - timedelta(days=1)
        stayed = make_booking([rooms[0].id], check_in=yesterday, nights=2)
        booking_service.check_in(stayed.id, checked_in_at=datetime.combine(yesterday, time(14)))
        make_booking([rooms[1].id], nights=2)
        cancelled = make_booking([rooms[2].id])
        booking_service.cancel_booking(cancelled.id)

        result = report_service.occupancy(yesterday, TODAY + timedelta(days=1), today=TODAY)

        assert [row["occupied_rooms"] for row in result["data"]] == [1, 2, 1]
        assert [row["occupancy_percentage"] for row in result["data"]] == [33.33, 66.67, 33.33]
        assert result["summary"]["average_occupancy"] == 44.44
        assert result["summary"]["peak_occupied_rooms"] == 2

    def test_occupancy_follows_early_departure(self, report_service, booking_service, make_booking, rooms, db_session, settings):
        yesterday = TODAY - timedelta(days=1)
        booking = make_booking([rooms[0].id], check_in=yesterday, nights=3)
        booking_service.check_in(booking.id, checked_in_at=datetime.combine(yesterday, time(14)))
        CheckoutService(db_session, settings).process_checkout(CheckoutRequest(
            booking_id=booking.id,
            actual_check_out=datetime.combine(TODAY, time(10)),
            early_checkout_reason="Guest request",
        ))

        result = report_service.occupancy(yesterday, TODAY + timedelta(days=1), today=TODAY)
        assert [row["occupied_rooms"] for row in result["data"]] == [1, 0, 0]

    def test_blocked_rooms(self, report_service, db_session, settings, rooms, staff_member):
        room_service = RoomService(db_session, settings)
        room_service.block_room(rooms[1].id, RoomBlockCreate(), blocked_at=datetime.combine(TODAY, time(9)))
        room_service.block_room(
            rooms[2].id,
            RoomBlockCreate(reason="Renovation", staff_id=staff_member.id),
            blocked_at=datetime.combine(TODAY, time(10)),
        )
        room_service.unblock_room(rooms[1].id, RoomUnblock(reason="Fixed"))

        result = report_service.blocked_rooms(TODAY, TODAY)
        first, second = result["data"]

        assert (first["room_number"], first["room_status"], first["staff_blocked_by"]) == ("103", "Blocked", "Ravi Kumar")
        assert (second["room_number"], second["room_status"], second["reason"]) == (
            "102", "Unblocked", "No reason provided",
        )
        assert second["unblock_reason"] == "Fixed"
        assert result["summary"] == {
            "total_blocked": 2,
            "currently_blocked": 1,
            "unblocked": 1,
            "blocked_by_staff": {"Ravi Kumar": 1, "Unknown Staff": 1},
            "blocked_by_reason": {"Renovation": 1, "No reason provided": 1},
        }

    def test_room_transfers(self, report_service, booking_service, make_booking, rooms, staff_member):
        booking = make_booking([rooms[0].id])
        booking_service.transfer_room(booking.id, booking.rooms[0].id, rooms[1].id, "Noise complaint", staff_member.id)

        result = report_service.room_transfers(TODAY, TODAY)
        row = result["data"][0]

        assert row["booking_number"] == booking.booking_number
        assert (row["from_room"], row["to_room"]) == ("101", "102")
        assert row["transfer_by"] == "Ravi Kumar"
        assert row["status"] == "confirmed"
        assert result["summary"] == {"total_transfers": 1, "transfers_by_reason": {"Noise complaint": 1}}

    @pytest.mark.parametrize("report,total", [
        ("arrival-report", 0),
        ("occupancy-analysis", 1),
        ("blocked-rooms", 0),
        ("rooms-transfers", 0),
    ])
    def test_generate_knows_room_reports(self, report_service, report, total):
        assert report_service.generate(report, TODAY, TODAY)["total"] == total


class TestExport:
    def test_filename(self):
        assert export_filename("collection", date(2024, 1, 1), date(2024, 1, 31), ExportFormat.XLSX) == (
            "collection_2024-01-01_2024-01-31.xlsx"
        )

    def test_format_cell(self):
        assert format_cell(None) == ""
        assert format_cell(date(2024, 3, 9)) == "09/03/2024"
        assert format_cell(datetime(2024, 3, 9, 14, 5)) == "09/03/2024 14:05"
        assert format_cell(True) == "Yes"
        assert format_cell(12.5) == 12.5

    def test_csv_has_bom_and_headers(self, settings, report_service, make_booking, rooms):
        make_booking([rooms[0].id, rooms[1].id])
        result = report_service.high_balance()
        exported = ReportExportService(settings).export("high-balance", result, ExportFormat.CSV, TODAY, TODAY)

        text = exported.content.decode("utf-8")
        assert text.startswith("\ufeffBooking No,Guest,Phone")
        assert "Asha Rao" in text
        assert exported.media_type.startswith("text/csv")

    @pytest.mark.parametrize("export_format,magic", [
        (ExportFormat.XLSX, b"PK"),
        (ExportFormat.PDF, b"%PDF"),
        (ExportFormat.HTML, b"<!DOCTYPE html>"),
    ])
    def test_binary_formats(self, settings, report_service, export_format, magic):
        result = report_service.day_settlement(TODAY, TODAY)
        exported = ReportExportService(settings).export("day-settlement", result, export_format, TODAY, TODAY)
        assert exported.content.lstrip().startswith(magic)


class TestReportEndpoints:
    def test_missing_dates(self, client):
        response = client.get(f"{URL}/collection")
        assert response.status_code == 400
        assert response.json() == {"error": "fromDate and toDate parameters are required"}

    def test_invalid_date(self, client):
        response = client.get(f"{URL}/collection", params={"fromDate": "2024/13/45", "toDate": "01/01/2024"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid date format. Please use DD/MM/YYYY format"}

    def test_reversed_range(self, client):
        response = client.get(f"{URL}/collection", params={"fromDate": "10/01/2024", "toDate": "01/01/2024"})
        assert response.status_code == 400
        assert response.json() == {"error": "fromDate cannot be after toDate"}

    def test_report_ok(self, client, make_booking, rooms):
        make_booking([rooms[0].id], advance_cash=Decimal("250"))
        response = client.get(f"{URL}/collection", params={"fromDate": display(TODAY), "toDate": display(TODAY)})
        assert response.status_code == 200
        assert response.json()["total_amount"] == 250.0

    def test_high_balance_without_dates(self, client):
        response = client.get(f"{URL}/high-balance", params={"threshold": "100"})
        assert response.status_code == 200
        assert response.json()["summary"]["threshold"] == 100.0

    def test_unknown_report(self, client):
        response = client.get(f"{URL}/police-report", params={"fromDate": display(TODAY), "toDate": display(TODAY)})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Unknown report: police-report"

    def test_query_failure_body(self, client, monkeypatch):
        def broken(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("no such table"))

        monkeypatch.setattr(ReportRepository, "transactions", broken)
        response = client.get(f"{URL}/collection", params={"fromDate": display(TODAY), "toDate": display(TODAY)})
        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to fetch report data"
        assert "no such table" in body["details"]

    def test_export_attachment(self, client):
        response = client.get(
            f"{URL}/day-settlement/export",
            params={"fromDate": "01/01/2024", "toDate": "02/01/2024", "format": "csv"},
        )
        assert response.status_code == 200
        assert response.headers["content-disposition"] == (
            'attachment; filename="day-settlement_2024-01-01_2024-01-02.csv"'
        )
        assert response.content.startswith(b"\xef\xbb\xbf")

    def test_high_balance_export_defaults_to_today(self, client):
        response = client.get(f"{URL}/high-balance/export", params={"format": "xlsx"})
        assert response.status_code == 200
        iso = TODAY.isoformat()
        assert f'filename="high-balance_{iso}_{iso}.xlsx"' in response.headers["content-disposition"]

    def test_send_day_settlement_without_whatsapp(self, client):
        response = client.post(
            f"{URL}/day-settlement/send",
            json={"date": TODAY.isoformat(), "phone": "9876543210"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["delivery"]["error"] == "WhatsApp is not configured"
        assert body["record"]["date"] == TODAY.isoformat()
