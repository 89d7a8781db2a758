"""
Payment ledger data access.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from frontdesk.models.payment import BookingPaymentBreakdown, PaymentTransaction
from frontdesk.repositories.base import BaseRepository


class PaymentBreakdownRepository(BaseRepository[BookingPaymentBreakdown]):
    def __init__(self, db: Session):
        super().__init__(BookingPaymentBreakdown, db)

    def find_by_booking(self, booking_id: str) -> Optional[BookingPaymentBreakdown]:
        stmt = select(BookingPaymentBreakdown).where(BookingPaymentBreakdown.booking_id == booking_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_or_create(self, booking_id: str) -> BookingPaymentBreakdown:
        breakdown = self.find_by_booking(booking_id)
        if breakdown is None:
            breakdown = self.create(BookingPaymentBreakdown(booking_id=booking_id))
        return breakdown


class PaymentTransactionRepository(BaseRepository[PaymentTransaction]):
    def __init__(self, db: Session):
        super().__init__(PaymentTransaction, db)

    def for_booking(self, booking_id: str) -> List[PaymentTransaction]:
        stmt = (
            select(PaymentTransaction)
            .where(PaymentTransaction.booking_id == booking_id)
            .order_by(PaymentTransaction.created_at)
        )
        return list(self.db.execute(stmt).scalars().all())
