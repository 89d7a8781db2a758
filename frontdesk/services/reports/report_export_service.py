"""
Report exports as CSV, HTML, Excel and PDF attachments.
"""

import csv
import io
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from jinja2 import Environment

from frontdesk.config.settings import Settings
from frontdesk.core.exceptions import ValidationError
from frontdesk.core.logging import get_logger
from frontdesk.services.notification.email_service import build_template_environment
from frontdesk.services.reports.status_buckets import ReportBucket
from frontdesk.utils.date_utils import format_display_date
from frontdesk.utils.excel_utils import ExcelGenerator
from frontdesk.utils.pdf_utils import PDFGenerator

logger = get_logger(__name__)


class ExportFormat(str, Enum):
    CSV = "csv"
    HTML = "html"
    XLSX = "xlsx"
    PDF = "pdf"


MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv; charset=utf-8",
    ExportFormat.HTML: "text/html; charset=utf-8",
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.PDF: "application/pdf",
}

# (header, row key) per report
Columns = Sequence[Tuple[str, str]]

REPORT_TITLES = {
    "checkin-checkout": "Check-in / Check-out Report",
    "expected-checkout": "Expected Checkout Report",
    "high-balance": "High Balance Report",
    "collection": "Collection Report",
    "day-settlement": "Day Settlement Report",
    "cancelled-checkin": "Cancelled Check-in Report",
    "early-checkin-late-checkout": "Early Check-in / Late Checkout Report",
    "arrival-report": "Arrival Report",
    "occupancy-analysis": "Occupancy Analysis",
    "blocked-rooms": "Blocked Rooms Report",
    "rooms-transfers": "Room Transfer Report",
}

REPORT_COLUMNS: Dict[str, Columns] = {
    "checkin-checkout": (
        ("Movement", "movement"),
        ("Booking No", "booking_number"),
        ("Guest", "guest_name"),
        ("Phone", "guest_phone"),
        ("Room", "room_number"),
        ("Room Type", "room_type"),
        ("Time", "time"),
        ("Status", "status"),
        ("Arrival", "arrival_type"),
        ("Advance", "advance_total"),
        ("Receipts", "receipt_total"),
        ("Outstanding", "outstanding_amount"),
        ("Staff", "staff_name"),
    ),
    "expected-checkout": (
        ("Booking No", "booking_number"),
        ("Guest", "guest_name"),
        ("Phone", "guest_phone"),
        ("Room", "room_number"),
        ("Room Type", "room_type"),
        ("Check-in", "checkin_date"),
        ("Expected Checkout", "expected_checkout"),
        ("Nights", "planned_nights"),
        ("Outstanding", "outstanding_amount"),
    ),
    "high-balance": (
        ("Booking No", "booking_number"),
        ("Guest", "guest_name"),
        ("Phone", "guest_phone"),
        ("Status", "status"),
        ("Created", "created_at"),
        ("Total", "total_amount"),
        ("Paid", "paid_total"),
        ("Outstanding", "outstanding_amount"),
    ),
    "collection": (
        ("Date", "created_at"),
        ("Booking", "booking_id"),
        ("Type", "transaction_type"),
        ("Method", "payment_method"),
        ("Reference", "reference"),
        ("Amount", "amount"),
    ),
    "day-settlement": (
        ("Date", "date"),
        ("Room Revenue", "room_revenue"),
        ("Service Revenue", "service_revenue"),
        ("Total Revenue", "total_revenue"),
        ("Advances", "advance_collections"),
        ("Cash", "cash"),
        ("Card", "card"),
        ("UPI", "upi"),
        ("Bank Transfer", "bank_transfer"),
        ("Total Collections", "total_collections"),
        ("Outstanding", "outstanding"),
        ("Occupancy %", "occupancy_rate"),
        ("Check-ins", "checkins"),
        ("Check-outs", "checkouts"),
    ),
    "cancelled-checkin": (
        ("S.No", "s_no"),
        ("Booking No", "booking_id"),
        ("Rooms", "number_of_rooms"),
        ("Expected Check-in", "expected_checkin_date"),
        ("Expected Checkout", "expected_checkout_date"),
        ("Nights", "number_of_nights"),
        ("Reason", "cancellation_reason"),
        ("Cancelled On", "cancel_date"),
        ("Staff", "staff_name"),
        ("Refund", "refund_amount"),
        ("Refund Processed", "refund_processed"),
    ),
    "early-checkin-late-checkout": (
        ("Type", "type"),
        ("Booking No", "booking_number"),
        ("Guest", "guest_name"),
        ("Room", "room_number"),
        ("Room Type", "room_type"),
        ("Check-in", "checkin_time"),
        ("Planned Check-in", "planned_checkin"),
        ("Checkout", "checkout_time"),
        ("Planned Checkout", "planned_checkout"),
        ("Check-in Diff (h)", "checkin_difference_hours"),
        ("Checkout Diff (h)", "checkout_difference_hours"),
        ("Staff", "staff_name"),
    ),
    "arrival-report": (
        ("Booking No", "booking_number"),
        ("Guest", "guest_name"),
        ("Phone", "guest_phone"),
        ("Arrival", "arrival_type"),
        ("Company/OTA", "ota_company"),
        ("Arrived", "arrival_date"),
        ("Departure", "departure_date"),
        ("Nights", "planned_nights"),
        ("Pax", "pax"),
        ("Children", "child_pax"),
        ("Rooms", "total_rooms"),
        ("Room Numbers", "room_numbers"),
        ("Advance", "advance_paid"),
        ("Total", "total_amount"),
        ("Outstanding", "outstanding_amount"),
        ("Staff", "staff_name"),
    ),
    "occupancy-analysis": (
        ("Date", "date"),
        ("Occupied", "occupied_rooms"),
        ("Total Rooms", "total_rooms"),
        ("Occupancy %", "occupancy_percentage"),
    ),
    "blocked-rooms": (
        ("S.No", "s_no"),
        ("Room", "room_number"),
        ("Room Type", "room_type"),
        ("Blocked On", "blocked_date"),
        ("Status", "room_status"),
        ("From", "blocked_from"),
        ("To", "blocked_to"),
        ("Reason", "reason"),
        ("Blocked By", "staff_blocked_by"),
        ("Unblocked On", "unblocked_date"),
        ("Unblocked By", "unblocked_by"),
        ("Unblock Reason", "unblock_reason"),
        ("Notes", "notes"),
    ),
    "rooms-transfers": (
        ("S.No", "s_no"),
        ("Booking No", "booking_number"),
        ("Guest", "guest_name"),
        ("From Room", "from_room"),
        ("To Room", "to_room"),
        ("Transferred On", "transfer_date"),
        ("Reason", "reason"),
        ("Transferred By", "transfer_by"),
        ("Status", "status"),
    ),
}


@dataclass
class ReportTable:
    title: str
    headers: List[str]
    rows: List[List[Any]]
    summary: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ExportedFile:
    content: bytes
    media_type: str
    filename: str


def export_filename(report: str, start: date, end: date, export_format: ExportFormat) -> str:
    return f"{report}_{start.isoformat()}_{end.isoformat()}.{export_format.value}"


def format_cell(value: Any) -> Any:
    """Render dates the front-desk way; numbers stay numeric."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y %H:%M")
    if isinstance(value, date):
        return format_display_date(value)
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, Enum):
        return value.value
    return value


def _movement_rows(grouped: Dict[str, Any], movement: str, time_key: str) -> List[Dict[str, Any]]:
    rows = []
    for bucket in ReportBucket:
        for row in grouped.get(bucket.value, []):
            rows.append(dict(row, movement=movement, time=row.get(time_key)))
    return rows


def _report_rows(report: str, result: Dict[str, Any]) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
    """Flatten a report payload to table rows and a printable summary."""
    if report == "checkin-checkout":
        checkins, checkouts = result["checkins"], result["checkouts"]
        rows = _movement_rows(checkins, "Check-in", "checkin_time") + _movement_rows(
            checkouts, "Check-out", "checkout_time"
        )
        return rows, {"Check-ins": checkins["total"], "Check-outs": checkouts["total"]}

    if report == "day-settlement":
        rows = [
            dict(record, occupancy_rate=record["occupancy"]["rate"], **record["collections"])
            for record in result["data"]
        ]
        return rows, result.get("summary", {})

    if report == "collection":
        summary = {"Transactions": result["total_transactions"], "Total": result["total_amount"]}
        summary.update({f"By {method}": amount for method, amount in result["by_method"].items()})
        return result["data"], summary

    summary = {
        key: value
        for key, value in result.get("summary", {}).items()
        if not isinstance(value, (dict, list))
    }
    return result["data"], summary


class ReportExportService:
    """Turns report payloads into downloadable files."""

    def __init__(self, settings: Settings, templates: Optional[Environment] = None):
        self.settings = settings
        self.templates = templates or build_template_environment()

    def build_table(self, report: str, result: Dict[str, Any]) -> ReportTable:
        if report not in REPORT_COLUMNS:
            raise ValidationError(f"Report {report} cannot be exported", field_errors={"report": [report]})
        columns = REPORT_COLUMNS[report]
        rows, summary = _report_rows(report, result)
        return ReportTable(
            title=REPORT_TITLES[report],
            headers=[header for header, _ in columns],
            rows=[[format_cell(row.get(key)) for _, key in columns] for row in rows],
            summary=summary,
        )

    def to_csv(self, table: ReportTable) -> bytes:
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(table.headers)
        writer.writerows(table.rows)
        # BOM so Excel opens UTF-8 (rupee signs, names) correctly
        return ("\ufeff" + buffer.getvalue()).encode("utf-8")

    def to_html(self, table: ReportTable, period: str) -> bytes:
        template = self.templates.get_template("report.html")
        html = template.render(
            hotel_name=self.settings.HOTEL_NAME,
            title=table.title,
            period=period,
            generated_at=datetime.now().strftime("%d/%m/%Y %H:%M"),
            summary=table.summary,
            headers=table.headers,
            rows=table.rows,
        )
        return html.encode("utf-8")

    def to_xlsx(self, table: ReportTable, period: str) -> bytes:
        generator = ExcelGenerator()
        summary = {"Period": period}
        summary.update(table.summary)
        generator.add_worksheet(table.title, table.headers, table.rows, title=table.title, summary=summary)
        return generator.to_bytes()

    def to_pdf(self, table: ReportTable, period: str) -> bytes:
        header_info = {"Hotel": self.settings.HOTEL_NAME, "Period": period}
        header_info.update(table.summary)
        return PDFGenerator().generate_report(table.title, table.headers, table.rows, header_info)

    def export(
        self,
        report: str,
        result: Dict[str, Any],
        export_format: ExportFormat,
        start: date,
        end: date,
    ) -> ExportedFile:
        table = self.build_table(report, result)
        period = f"{format_display_date(start)} to {format_display_date(end)}"

        if export_format == ExportFormat.CSV:
            content = self.to_csv(table)
        elif export_format == ExportFormat.HTML:
            content = self.to_html(table, period)
        elif export_format == ExportFormat.XLSX:
            content = self.to_xlsx(table, period)
        else:
            content = self.to_pdf(table, period)

        logger.info(f"Exported {report} ({len(table.rows)} rows) as {export_format.value}")
        return ExportedFile(
            content=content,
            media_type=MEDIA_TYPES[export_format],
            filename=export_filename(report, start, end, export_format),
        )
