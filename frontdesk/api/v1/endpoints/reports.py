"""
Report endpoints.

Every report takes ``fromDate``/``toDate`` as DD/MM/YYYY or ISO dates.
Parameter problems return 400 and query failures 500, both with a flat
``{"error": ...}`` body.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Response

from frontdesk.api import deps
from frontdesk.core.logging import get_logger
from frontdesk.schemas.report import DaySettlementSend, DaySettlementSendResponse
from frontdesk.services.notification import WhatsAppService
from frontdesk.services.reports.report_export_service import ExportFormat, ReportExportService
from frontdesk.services.reports.report_service import ReportService
from frontdesk.utils.date_utils import parse_report_range

logger = get_logger(__name__)

router = APIRouter(prefix="/reports")

# Reports whose date range is an optional filter
OPTIONAL_RANGE_REPORTS = ("high-balance",)


def _report_range(report: str, from_date: Optional[str], to_date: Optional[str]):
    if report in OPTIONAL_RANGE_REPORTS and not from_date and not to_date:
        return None, None
    return parse_report_range(from_date, to_date)


@router.post("/day-settlement/send", response_model=DaySettlementSendResponse)
def send_day_settlement(
    data: DaySettlementSend,
    service: ReportService = Depends(deps.get_report_service),
    whatsapp: WhatsAppService = Depends(deps.get_whatsapp_service),
):
    """
    Send one day's settlement summary as a WhatsApp message.

    A failed delivery is reported in the response body, the request
    itself still succeeds.
    """
    result = service.day_settlement(data.day, data.day)
    record = result["data"][0]
    delivery = whatsapp.send_day_settlement(record, data.phone)
    if not delivery.success:
        logger.warning(f"Day settlement for {data.day.isoformat()} was not delivered: {delivery.error}")
    return DaySettlementSendResponse(success=delivery.success, record=record, delivery=delivery.to_dict())


@router.get("/{report}")
def get_report(
    report: str,
    from_date: Optional[str] = Query(default=None, alias="fromDate"),
    to_date: Optional[str] = Query(default=None, alias="toDate"),
    threshold: Optional[Decimal] = None,
    service: ReportService = Depends(deps.get_report_service),
) -> Dict[str, Any]:
    start, end = _report_range(report, from_date, to_date)
    return service.generate(report, start, end, threshold=threshold)


@router.get("/{report}/export")
def export_report(
    report: str,
    from_date: Optional[str] = Query(default=None, alias="fromDate"),
    to_date: Optional[str] = Query(default=None, alias="toDate"),
    export_format: ExportFormat = Query(default=ExportFormat.CSV, alias="format"),
    threshold: Optional[Decimal] = None,
    service: ReportService = Depends(deps.get_report_service),
    exporter: ReportExportService = Depends(deps.get_report_export_service),
):
    """Download a report as a CSV, HTML, Excel or PDF attachment."""
    start, end = _report_range(report, from_date, to_date)
    result = service.generate(report, start, end, threshold=threshold)

    period_start = start or date.today()
    period_end = end or period_start
    exported = exporter.export(report, result, export_format, period_start, period_end)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
