"""
Staff and staff log data access.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from frontdesk.core.exceptions import StaffNotFoundError
from frontdesk.models.booking import Booking
from frontdesk.models.enums import BookingStatus, HousekeepingStatus, StaffStatus
from frontdesk.models.housekeeping import HousekeepingTask
from frontdesk.models.staff import Staff, StaffLog
from frontdesk.repositories.base import BaseRepository

ACTIVE_BOOKING_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN)
OPEN_TASK_STATUSES = (HousekeepingStatus.PENDING, HousekeepingStatus.ASSIGNED, HousekeepingStatus.IN_PROGRESS)


class StaffRepository(BaseRepository[Staff]):
    not_found_error = StaffNotFoundError

    def __init__(self, db: Session):
        super().__init__(Staff, db)

    def find_by_email(self, email: str) -> Optional[Staff]:
        stmt = select(Staff).where(func.lower(Staff.email) == email.lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def list_staff(self, status: Optional[StaffStatus] = None, role: Optional[str] = None) -> List[Staff]:
        stmt = select(Staff).order_by(Staff.name)
        if status is not None:
            stmt = stmt.where(Staff.status == status)
        if role:
            stmt = stmt.where(Staff.role == role)
        return list(self.db.execute(stmt).scalars().all())

    def count_active_bookings(self, staff_id: str) -> int:
        stmt = select(func.count()).select_from(Booking).where(
            Booking.staff_id == staff_id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        )
        return self.db.execute(stmt).scalar_one()

    def count_open_tasks(self, staff_id: str) -> int:
        stmt = select(func.count()).select_from(HousekeepingTask).where(
            HousekeepingTask.assigned_to == staff_id,
            HousekeepingTask.status.in_(OPEN_TASK_STATUSES),
        )
        return self.db.execute(stmt).scalar_one()


class StaffLogRepository(BaseRepository[StaffLog]):
    def __init__(self, db: Session):
        super().__init__(StaffLog, db)

    def add(
        self,
        action: str,
        staff_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        booking_id: Optional[str] = None,
        room_id: Optional[str] = None,
    ) -> StaffLog:
        return self.create(
            StaffLog(
                staff_id=staff_id,
                action=action,
                details=details,
                booking_id=booking_id,
                room_id=room_id,
            )
        )

    def latest(self, limit: int, staff_id: Optional[str] = None, action: Optional[str] = None) -> List[StaffLog]:
        stmt = select(StaffLog).options(selectinload(StaffLog.staff)).order_by(StaffLog.created_at.desc()).limit(limit)
        if staff_id:
            stmt = stmt.where(StaffLog.staff_id == staff_id)
        if action:
            stmt = stmt.where(StaffLog.action == action)
        return list(self.db.execute(stmt).scalars().all())
