"""
Checkout schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from frontdesk.models.enums import NotificationType, PaymentMethod
from frontdesk.schemas.common import BaseSchema


class CheckoutPreviewRequest(BaseSchema):
    actual_check_out: Optional[datetime] = None
    room_id: Optional[str] = None


class CheckoutRequest(BaseSchema):
    booking_id: str
    actual_check_out: Optional[datetime] = None
    room_id: Optional[str] = None
    early_checkout_reason: Optional[str] = None
    custom_reason: Optional[str] = None
    collect_amount: Decimal = Field(default=Decimal("0"), ge=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: Optional[str] = None
    staff_id: Optional[str] = None
    send_receipt: bool = True


class DismissRequest(BaseSchema):
    staff_id: Optional[str] = None


class NotificationResponse(BaseSchema):
    id: str
    booking_id: str
    guest_name: str
    room_number: str
    checkout_time: datetime
    notification_type: NotificationType
    message: str
    is_active: bool
    dismissed_by: Optional[str] = None
    dismissed_at: Optional[datetime] = None
    created_at: datetime
