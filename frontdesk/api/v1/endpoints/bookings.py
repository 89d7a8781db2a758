from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from frontdesk.api import deps
from frontdesk.models.booking import Booking
from frontdesk.models.enums import BookingStatus
from frontdesk.schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingUpdate,
    BookingUpdateResponse,
    CancelRequest,
    ChargeCreate,
    ChargeResponse,
    CheckInRequest,
    NoShowRequest,
    PaymentCreate,
    PaymentSummaryResponse,
    RoomTransferRequest,
    RoomTransferResponse,
    TransactionResponse,
)
from frontdesk.schemas.common import PaginatedResponse
from frontdesk.schemas.room import RoomResponse
from frontdesk.services.booking.booking_service import BookingService, payment_overview

router = APIRouter(prefix="/bookings")


def to_booking_response(booking: Booking) -> BookingResponse:
    """Serialize a booking with its payment overview filled in."""
    payment = PaymentSummaryResponse(**payment_overview(booking.payment_breakdown))
    return BookingResponse.model_validate(booking).model_copy(update={"payment": payment})


@router.get("", response_model=PaginatedResponse[BookingResponse])
def list_bookings(
    booking_status: Optional[BookingStatus] = Query(default=None, alias="status"),
    from_date: Optional[date] = Query(default=None, alias="fromDate"),
    to_date: Optional[date] = Query(default=None, alias="toDate"),
    search: Optional[str] = Query(default=None, max_length=100),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=200),
    service: BookingService = Depends(deps.get_booking_service),
):
    bookings, total = service.list_bookings(booking_status, from_date, to_date, search, page, page_size)
    return PaginatedResponse[BookingResponse].create(
        items=[to_booking_response(booking) for booking in bookings],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/stats")
def get_booking_stats(service: BookingService = Depends(deps.get_booking_service)) -> Dict[str, Any]:
    return service.get_booking_stats()


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(data: BookingCreate, service: BookingService = Depends(deps.get_booking_service)):
    """
    Create a booking for one or more rooms.

    Rooms must be free for the whole stay. Advance payments are recorded
    in the payment breakdown and as transactions.
    """
    return to_booking_response(service.create_booking(data))


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(booking_id: str, service: BookingService = Depends(deps.get_booking_service)):
    return to_booking_response(service.get_booking(booking_id))


@router.patch("/{booking_id}", response_model=BookingUpdateResponse)
def update_booking(
    booking_id: str,
    data: BookingUpdate,
    service: BookingService = Depends(deps.get_booking_service),
):
    booking, room_errors = service.update_booking(booking_id, data)
    return BookingUpdateResponse(booking=to_booking_response(booking), room_errors=room_errors)


# ============ Status transitions ============

@router.post("/{booking_id}/check-in", response_model=BookingResponse)
def check_in(
    booking_id: str,
    data: CheckInRequest,
    service: BookingService = Depends(deps.get_booking_service),
):
    return to_booking_response(service.check_in(booking_id, data.staff_id, data.room_ids))


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    booking_id: str,
    data: CancelRequest,
    service: BookingService = Depends(deps.get_booking_service),
):
    booking = service.cancel_booking(booking_id, data.reason, data.staff_id, data.refund_amount, data.notes)
    return to_booking_response(booking)


@router.post("/{booking_id}/no-show", response_model=BookingResponse)
def mark_no_show(
    booking_id: str,
    data: NoShowRequest,
    service: BookingService = Depends(deps.get_booking_service),
):
    return to_booking_response(service.mark_no_show(booking_id, data.staff_id))


# ============ Room transfers ============

@router.get("/{booking_id}/transfer-rooms", response_model=List[RoomResponse])
def get_transfer_rooms(
    booking_id: str,
    booking_room_id: str = Query(...),
    service: BookingService = Depends(deps.get_booking_service),
):
    """Rooms free for the rest of the booking room's stay."""
    return service.get_transfer_rooms(booking_id, booking_room_id)


@router.get("/{booking_id}/transfers", response_model=List[RoomTransferResponse])
def get_transfer_history(booking_id: str, service: BookingService = Depends(deps.get_booking_service)):
    return service.get_transfer_history(booking_id)


@router.post("/{booking_id}/transfer")
def transfer_room(
    booking_id: str,
    data: RoomTransferRequest,
    service: BookingService = Depends(deps.get_booking_service),
):
    booking, transfer = service.transfer_room(
        booking_id, data.booking_room_id, data.new_room_id, data.reason, data.staff_id,
    )
    return {
        "booking": to_booking_response(booking),
        "transfer": RoomTransferResponse.model_validate(transfer),
    }


# ============ Money ============

@router.post("/{booking_id}/payments", status_code=status.HTTP_201_CREATED)
def record_payment(
    booking_id: str,
    data: PaymentCreate,
    service: BookingService = Depends(deps.get_booking_service),
):
    transaction, overview = service.record_payment(booking_id, data)
    return {
        "transaction": TransactionResponse.model_validate(transaction),
        "payment": PaymentSummaryResponse(**overview),
    }


@router.get("/{booking_id}/transactions", response_model=List[TransactionResponse])
def get_transactions(booking_id: str, service: BookingService = Depends(deps.get_booking_service)):
    return service.get_transactions(booking_id)


@router.post("/{booking_id}/charges", status_code=status.HTTP_201_CREATED)
def add_charge(
    booking_id: str,
    data: ChargeCreate,
    service: BookingService = Depends(deps.get_booking_service),
):
    item, overview = service.add_charge(booking_id, data)
    return {
        "charge": ChargeResponse.model_validate(item),
        "payment": PaymentSummaryResponse(**overview),
    }
