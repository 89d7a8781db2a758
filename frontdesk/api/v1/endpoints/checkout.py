from datetime import date
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query

from frontdesk.api import deps
from frontdesk.schemas.checkout import (
    CheckoutPreviewRequest,
    CheckoutRequest,
    DismissRequest,
    NotificationResponse,
)
from frontdesk.services.checkout.checkout_service import CheckoutService

router = APIRouter(prefix="/checkout")


@router.post("/{booking_id}/preview")
def preview_checkout(
    booking_id: str,
    data: CheckoutPreviewRequest,
    service: CheckoutService = Depends(deps.get_checkout_service),
) -> Dict[str, Any]:
    """Price adjustment, late fee and balance for a checkout, without saving anything."""
    return service.preview_checkout(booking_id, data.actual_check_out, data.room_id)


@router.post("")
def process_checkout(
    data: CheckoutRequest,
    service: CheckoutService = Depends(deps.get_checkout_service),
) -> Dict[str, Any]:
    """
    Check out a whole booking or one of its rooms.

    Early checkouts need a reason. A late fee applies once the grace
    period after the standard checkout time has passed. Rooms are
    released and a cleaning task is scheduled for each.
    """
    return service.process_checkout(data)


@router.post("/notifications/process")
def process_notifications(service: CheckoutService = Depends(deps.get_checkout_service)) -> Dict[str, Any]:
    result = service.process_automated_notifications()
    result["notifications"] = [
        NotificationResponse.model_validate(notification) for notification in result["notifications"]
    ]
    return result


@router.get("/alerts", response_model=List[NotificationResponse])
def get_active_alerts(service: CheckoutService = Depends(deps.get_checkout_service)):
    return service.get_active_alerts()


@router.post("/alerts/{notification_id}/dismiss", response_model=NotificationResponse)
def dismiss_alert(
    notification_id: str,
    data: DismissRequest,
    service: CheckoutService = Depends(deps.get_checkout_service),
):
    return service.dismiss_notification(notification_id, data.staff_id)


@router.get("/statistics")
def get_checkout_statistics(
    from_date: date = Query(..., alias="fromDate"),
    to_date: date = Query(..., alias="toDate"),
    service: CheckoutService = Depends(deps.get_checkout_service),
) -> Dict[str, Any]:
    return service.get_checkout_statistics(from_date, to_date)
