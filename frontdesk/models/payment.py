"""
Payment ledger models.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from frontdesk.models.base import BaseModel, TimestampModel, enum_column
from frontdesk.models.enums import TransactionType

if TYPE_CHECKING:
    from frontdesk.models.booking import Booking

__all__ = ["BookingPaymentBreakdown", "PaymentTransaction", "ChargeItem"]


def _money(comment: Optional[str] = None):
    return mapped_column(Numeric(10, 2), nullable=True, default=Decimal("0.00"), comment=comment)


class BookingPaymentBreakdown(TimestampModel):
    """
    Per-booking monetary ledger.

    Advance and receipt amounts are split by instrument. Any of the
    amount columns may be NULL in imported data and is then read as zero.
    """

    __tablename__ = "booking_payment_breakdown"

    booking_id: Mapped[str] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    total_amount: Mapped[Optional[Decimal]] = _money("Room and charge total before tax")
    total_tax_amount: Mapped[Optional[Decimal]] = _money()
    taxed_total_amount: Mapped[Optional[Decimal]] = _money("Total including tax")
    price_adjustment: Mapped[Optional[Decimal]] = _money("Early/late checkout adjustment")
    outstanding_amount: Mapped[Optional[Decimal]] = _money()

    advance_cash: Mapped[Optional[Decimal]] = _money()
    advance_card: Mapped[Optional[Decimal]] = _money()
    advance_upi: Mapped[Optional[Decimal]] = _money()
    advance_bank: Mapped[Optional[Decimal]] = _money()

    receipt_cash: Mapped[Optional[Decimal]] = _money()
    receipt_card: Mapped[Optional[Decimal]] = _money()
    receipt_upi: Mapped[Optional[Decimal]] = _money()
    receipt_bank: Mapped[Optional[Decimal]] = _money()

    booking: Mapped["Booking"] = relationship(back_populates="payment_breakdown")


class PaymentTransaction(BaseModel):
    """Individual payment movement, used by the collection reports."""

    __tablename__ = "payment_transactions"

    booking_id: Mapped[str] = mapped_column(ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    transaction_type: Mapped[TransactionType] = mapped_column(
        enum_column(TransactionType),
        nullable=False,
        default=TransactionType.RECEIPT,
    )
    reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    collected_by: Mapped[Optional[str]] = mapped_column(ForeignKey("staff.id", ondelete="SET NULL"), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now, index=True)

    booking: Mapped["Booking"] = relationship(back_populates="transactions")


class ChargeItem(BaseModel):
    """Extra services billed to a booking (food, laundry, ...)."""

    __tablename__ = "charge_items"

    booking_id: Mapped[str] = mapped_column(ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now, index=True)

    booking: Mapped["Booking"] = relationship(back_populates="charge_items")
