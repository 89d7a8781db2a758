"""
Checkout alert and late-fee data access.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from frontdesk.core.exceptions import NotificationNotFoundError
from frontdesk.models.checkout import CheckoutNotification, LateCheckoutCharge
from frontdesk.models.enums import NotificationType
from frontdesk.repositories.base import BaseRepository


class CheckoutNotificationRepository(BaseRepository[CheckoutNotification]):
    not_found_error = NotificationNotFoundError

    def __init__(self, db: Session):
        super().__init__(CheckoutNotification, db)

    def find_active(self, booking_id: str, notification_type: NotificationType) -> Optional[CheckoutNotification]:
        stmt = select(CheckoutNotification).where(
            CheckoutNotification.booking_id == booking_id,
            CheckoutNotification.notification_type == notification_type,
            CheckoutNotification.is_active.is_(True),
        )
        return self.db.execute(stmt).scalars().first()

    def list_active(self) -> List[CheckoutNotification]:
        stmt = (
            select(CheckoutNotification)
            .where(CheckoutNotification.is_active.is_(True))
            .order_by(CheckoutNotification.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def deactivate_for_booking(self, booking_id: str) -> None:
        stmt = select(CheckoutNotification).where(
            CheckoutNotification.booking_id == booking_id,
            CheckoutNotification.is_active.is_(True),
            CheckoutNotification.notification_type != NotificationType.LATE_CHARGES,
        )
        for notification in self.db.execute(stmt).scalars():
            notification.is_active = False
        self.db.flush()

    def in_range(self, start: datetime, end: datetime) -> List[CheckoutNotification]:
        stmt = select(CheckoutNotification).where(
            CheckoutNotification.created_at >= start,
            CheckoutNotification.created_at <= end,
        )
        return list(self.db.execute(stmt).scalars().all())


class LateCheckoutChargeRepository(BaseRepository[LateCheckoutCharge]):
    def __init__(self, db: Session):
        super().__init__(LateCheckoutCharge, db)

    def in_range(self, start: datetime, end: datetime) -> List[LateCheckoutCharge]:
        stmt = select(LateCheckoutCharge).where(
            LateCheckoutCharge.actual_checkout >= start,
            LateCheckoutCharge.actual_checkout <= end,
        )
        return list(self.db.execute(stmt).scalars().all())
