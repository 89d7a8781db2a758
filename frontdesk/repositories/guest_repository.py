"""
Guest data access.
"""

from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from frontdesk.core.exceptions import GuestNotFoundError
from frontdesk.models.booking import Booking
from frontdesk.models.guest import Guest
from frontdesk.models.payment import BookingPaymentBreakdown
from frontdesk.repositories.base import BaseRepository

SORTABLE_FIELDS = {"name", "created_at", "email", "phone"}


class GuestRepository(BaseRepository[Guest]):
    not_found_error = GuestNotFoundError

    def __init__(self, db: Session):
        super().__init__(Guest, db)

    def find_by_phone(self, phone: str) -> Optional[Guest]:
        stmt = select(Guest).where(Guest.phone == phone).order_by(Guest.created_at.desc()).limit(1)
        return self.db.execute(stmt).scalars().first()

    def _search_clause(self, term: str):
        pattern = f"%{term.strip()}%"
        return or_(Guest.name.ilike(pattern), Guest.email.ilike(pattern), Guest.phone.ilike(pattern))

    def list_guests(
        self,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        descending: bool = True,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Guest], int]:
        """Return one page of guests and the total matching count."""
        stmt = select(Guest)
        count_stmt = select(func.count()).select_from(Guest)
        if search:
            clause = self._search_clause(search)
            stmt = stmt.where(clause)
            count_stmt = count_stmt.where(clause)

        column = getattr(Guest, sort_by if sort_by in SORTABLE_FIELDS else "created_at")
        stmt = stmt.order_by(column.desc() if descending else column.asc()).offset(offset).limit(limit)

        total = self.db.execute(count_stmt).scalar_one()
        return list(self.db.execute(stmt).scalars().all()), total

    def search(self, term: str, limit: int = 10) -> List[Guest]:
        stmt = select(Guest).where(self._search_clause(term)).order_by(Guest.name).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def booking_count(self, guest_id: str) -> int:
        stmt = select(func.count()).select_from(Booking).where(Booking.guest_id == guest_id)
        return self.db.execute(stmt).scalar_one()

    def total_billed(self, guest_id: str) -> Decimal:
        stmt = (
            select(
                func.coalesce(
                    func.sum(
                        func.coalesce(
                            BookingPaymentBreakdown.taxed_total_amount,
                            BookingPaymentBreakdown.total_amount,
                            0,
                        )
                    ),
                    0,
                )
            )
            .join(Booking, Booking.id == BookingPaymentBreakdown.booking_id)
            .where(Booking.guest_id == guest_id)
        )
        return Decimal(str(self.db.execute(stmt).scalar_one()))
