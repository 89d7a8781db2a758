"""
Booking request and response schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator

from frontdesk.models.enums import (
    ArrivalType,
    BookingRoomStatus,
    BookingStatus,
    PaymentMethod,
    TransactionType,
)
from frontdesk.schemas.common import BaseSchema
from frontdesk.schemas.guest import GuestCreate, GuestResponse


class AdvancePayment(BaseSchema):
    method: PaymentMethod
    amount: Decimal = Field(..., gt=0)
    reference: Optional[str] = None


class BookingCreate(BaseSchema):
    """
    New booking for one or more rooms.

    Either ``guest_id`` or an inline ``guest`` is required. An inline
    guest whose phone matches an existing guest reuses that record.
    """

    guest_id: Optional[str] = None
    guest: Optional[GuestCreate] = None
    room_ids: List[str] = Field(..., min_length=1)
    check_in: date
    check_out: date
    number_of_guests: int = Field(default=1, ge=1)
    child_guests: int = Field(default=0, ge=0)
    extra_guests: int = Field(default=0, ge=0)
    arrival_type: ArrivalType = ArrivalType.WALK_IN
    ota_company: Optional[str] = None
    bill_number: Optional[str] = None
    special_requests: Optional[str] = None
    status: BookingStatus = BookingStatus.CONFIRMED
    tax_amount: Decimal = Field(default=Decimal("0"), ge=0)
    advance_payments: List[AdvancePayment] = Field(default_factory=list)
    staff_id: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_initial_status(cls, v: BookingStatus) -> BookingStatus:
        if v not in (BookingStatus.RESERVED, BookingStatus.CONFIRMED, BookingStatus.PENDING):
            raise ValueError("New bookings must be reserved, confirmed or pending")
        return v

    @model_validator(mode="after")
    def validate_booking(self) -> "BookingCreate":
        if self.check_out < self.check_in:
            raise ValueError("check_out cannot be before check_in")
        if not self.guest_id and self.guest is None:
            raise ValueError("Either guest_id or guest details are required")
        if len(set(self.room_ids)) != len(self.room_ids):
            raise ValueError("room_ids must not contain duplicates")
        return self


class BookingRoomUpdate(BaseSchema):
    """
    One entry of BookingUpdate.rooms.

    Entries with ``id`` modify an existing booking room; entries without
    add ``room_id`` to the booking.
    """

    id: Optional[str] = None
    room_id: Optional[str] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    room_status: Optional[BookingRoomStatus] = None
    room_rate: Optional[Decimal] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def validate_room(self) -> "BookingRoomUpdate":
        if not self.id and not self.room_id:
            raise ValueError("Either id or room_id is required")
        if self.check_in_date and self.check_out_date and self.check_out_date < self.check_in_date:
            raise ValueError("check_out_date cannot be before check_in_date")
        return self


class BookingUpdate(BaseSchema):
    """
    Partial booking update.

    ``rooms`` is kept as raw dictionaries so a malformed entry is reported
    per room instead of rejecting the whole request.
    """

    check_in: Optional[date] = None
    check_out: Optional[date] = None
    number_of_guests: Optional[int] = Field(default=None, ge=1)
    child_guests: Optional[int] = Field(default=None, ge=0)
    extra_guests: Optional[int] = Field(default=None, ge=0)
    arrival_type: Optional[ArrivalType] = None
    ota_company: Optional[str] = None
    bill_number: Optional[str] = None
    special_requests: Optional[str] = None
    status: Optional[BookingStatus] = None
    tax_amount: Optional[Decimal] = Field(default=None, ge=0)
    rooms: Optional[List[Dict[str, Any]]] = None
    staff_id: Optional[str] = None


class CheckInRequest(BaseSchema):
    staff_id: Optional[str] = None
    room_ids: Optional[List[str]] = None


class CancelRequest(BaseSchema):
    reason: Optional[str] = None
    staff_id: Optional[str] = None
    refund_amount: Decimal = Field(default=Decimal("0"), ge=0)
    notes: Optional[str] = None


class NoShowRequest(BaseSchema):
    staff_id: Optional[str] = None


class PaymentCreate(BaseSchema):
    amount: Decimal = Field(..., gt=0)
    method: PaymentMethod
    transaction_type: TransactionType = TransactionType.RECEIPT
    reference: Optional[str] = None
    notes: Optional[str] = None
    staff_id: Optional[str] = None

    @field_validator("transaction_type")
    @classmethod
    def validate_type(cls, v: TransactionType) -> TransactionType:
        if v not in (TransactionType.ADVANCE, TransactionType.RECEIPT):
            raise ValueError("Only advance and receipt payments can be recorded")
        return v


class ChargeCreate(BaseSchema):
    description: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(default=1, ge=1)
    unit_price: Decimal = Field(..., ge=0)
    staff_id: Optional[str] = None


class RoomTransferRequest(BaseSchema):
    booking_room_id: str
    new_room_id: str
    reason: str = Field(..., min_length=1, max_length=255)
    staff_id: Optional[str] = None


class RoomTransferResponse(BaseSchema):
    id: str
    booking_id: str
    booking_room_id: str
    from_room_id: str
    from_room_number: Optional[str] = None
    to_room_id: str
    to_room_number: Optional[str] = None
    reason: str
    transfer_date: datetime
    transfer_staff_id: Optional[str] = None
    transfer_staff_name: Optional[str] = None


class BookingRoomResponse(BaseSchema):
    id: str
    room_id: str
    room_number: Optional[str] = None
    room_type: Optional[str] = None
    check_in_date: date
    check_out_date: date
    actual_check_in: Optional[datetime] = None
    actual_check_out: Optional[datetime] = None
    room_status: BookingRoomStatus
    room_rate: Decimal
    room_total: Decimal


class PaymentSummaryResponse(BaseSchema):
    total_amount: float
    advance_total: float
    receipt_total: float
    outstanding_amount: float
    price_adjustment: float = 0.0


class BookingResponse(BaseSchema):
    id: str
    booking_number: str
    status: BookingStatus
    guest_id: str
    guest: Optional[GuestResponse] = None
    staff_id: Optional[str] = None
    check_in: date
    expected_checkout: date
    actual_check_in: Optional[datetime] = None
    actual_check_out: Optional[datetime] = None
    planned_nights: int
    actual_nights: Optional[int] = None
    number_of_guests: int
    child_guests: int
    extra_guests: int
    arrival_type: ArrivalType
    ota_company: Optional[str] = None
    bill_number: Optional[str] = None
    special_requests: Optional[str] = None
    early_checkout_reason: Optional[str] = None
    rooms: List[BookingRoomResponse] = Field(default_factory=list)
    payment: Optional[PaymentSummaryResponse] = None
    created_at: datetime


class BookingUpdateResponse(BaseSchema):
    booking: BookingResponse
    room_errors: List[Dict[str, Any]] = Field(default_factory=list)


class TransactionResponse(BaseSchema):
    id: str
    booking_id: str
    amount: Decimal
    payment_method: str
    transaction_type: TransactionType
    reference: Optional[str] = None
    created_at: datetime


class ChargeResponse(BaseSchema):
    id: str
    booking_id: str
    description: str
    quantity: int
    unit_price: Decimal
    total_amount: Decimal
    created_at: datetime
