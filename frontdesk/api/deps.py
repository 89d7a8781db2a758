"""
Request dependencies.

The application factory stores settings, the session factory and the
outbound notification clients on ``app.state``; these callables hand
them to route functions as services bound to the request's session.

Example usage in a router:
    from fastapi import Depends, APIRouter
    from frontdesk.api import deps

    router = APIRouter()

    @router.get("/rooms")
    def list_rooms(service: RoomService = Depends(deps.get_room_service)):
        return service.list_rooms()
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from frontdesk.config.settings import Settings
from frontdesk.db.session import get_db
from frontdesk.services.booking.booking_service import BookingService
from frontdesk.services.checkout.checkout_service import CheckoutService
from frontdesk.services.guest.guest_service import GuestService
from frontdesk.services.housekeeping.housekeeping_service import HousekeepingService
from frontdesk.services.notification import EmailService, WhatsAppService
from frontdesk.services.reports.report_export_service import ReportExportService
from frontdesk.services.reports.report_service import ReportService
from frontdesk.services.room.room_service import RoomService
from frontdesk.services.staff.staff_service import StaffService


# --- Application state ---------------------------------------------------------

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_whatsapp_service(request: Request) -> WhatsAppService:
    return request.app.state.whatsapp_service


# --- Domain services -----------------------------------------------------------

def get_room_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> RoomService:
    return RoomService(db, settings)


def get_guest_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> GuestService:
    return GuestService(db, settings)


def get_staff_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    email_service: EmailService = Depends(get_email_service),
) -> StaffService:
    return StaffService(db, settings, email_service)


def get_booking_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    email_service: EmailService = Depends(get_email_service),
) -> BookingService:
    return BookingService(db, settings, email_service)


def get_checkout_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    email_service: EmailService = Depends(get_email_service),
) -> CheckoutService:
    return CheckoutService(db, settings, email_service)


def get_housekeeping_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> HousekeepingService:
    return HousekeepingService(db, settings)


def get_report_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> ReportService:
    return ReportService(db, settings)


def get_report_export_service(settings: Settings = Depends(get_app_settings)) -> ReportExportService:
    return ReportExportService(settings)


__all__ = [
    "get_db",
    "get_app_settings",
    "get_email_service",
    "get_whatsapp_service",
    "get_room_service",
    "get_guest_service",
    "get_staff_service",
    "get_booking_service",
    "get_checkout_service",
    "get_housekeeping_service",
    "get_report_service",
    "get_report_export_service",
]
