"""
Checkout alert and late-fee models.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from frontdesk.models.base import BaseModel, enum_column
from frontdesk.models.enums import NotificationType

__all__ = ["CheckoutNotification", "LateCheckoutCharge"]


class CheckoutNotification(BaseModel):
    """Front-desk alert about an approaching, overdue or late checkout."""

    __tablename__ = "checkout_notifications"

    booking_id: Mapped[str] = mapped_column(ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    guest_name: Mapped[str] = mapped_column(String(200), nullable=False)
    room_number: Mapped[str] = mapped_column(String(20), nullable=False)
    checkout_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    notification_type: Mapped[NotificationType] = mapped_column(
        enum_column(NotificationType),
        nullable=False,
        index=True,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    dismissed_by: Mapped[Optional[str]] = mapped_column(ForeignKey("staff.id", ondelete="SET NULL"), nullable=True)
    dismissed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now, index=True)


class LateCheckoutCharge(BaseModel):
    """Late fee applied after the grace period on the checkout day."""

    __tablename__ = "late_checkout_charges"

    booking_id: Mapped[str] = mapped_column(ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    scheduled_checkout: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    actual_checkout: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    late_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    grace_period_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    hours_charged: Mapped[int] = mapped_column(Integer, nullable=False)
    fee_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now, index=True)
