"""
Staff administration and the staff activity log.
"""

from typing import Any, Dict, List, Optional

from frontdesk.core.exceptions import DuplicateEntryError, ResourceInUseError
from frontdesk.models.enums import StaffStatus
from frontdesk.models.staff import Staff, StaffLog
from frontdesk.repositories.staff_repository import StaffLogRepository, StaffRepository
from frontdesk.schemas.staff import StaffCreate, StaffUpdate
from frontdesk.services.base import BaseService


class StaffService(BaseService):
    """
    Staff CRUD.

    Creating a member attempts an invitation email when an EmailService
    is supplied; a failed send is logged and does not undo the creation.
    """

    def __init__(self, db, settings=None, email_service=None):
        super().__init__(db, settings)
        self.staff = StaffRepository(db)
        self.logs = StaffLogRepository(db)
        self.email_service = email_service

    def list_staff(self, status: Optional[StaffStatus] = None, role: Optional[str] = None) -> List[Staff]:
        return self.staff.list_staff(status=status, role=role)

    def get_staff(self, staff_id: str) -> Staff:
        return self.staff.get_by_id(staff_id)

    def _ensure_unique_email(self, email: str, current_id: Optional[str] = None) -> None:
        existing = self.staff.find_by_email(email)
        if existing is not None and existing.id != current_id:
            raise DuplicateEntryError(f"Staff member with email {email} already exists", field="email")

    def create_staff(self, data: StaffCreate, created_by: Optional[str] = None) -> Staff:
        self._ensure_unique_email(data.email)
        values = data.model_dump(exclude={"send_invitation"})
        values["email"] = values["email"].lower()

        with self.transaction("create staff"):
            member = self.staff.create(Staff(**values))
            self.logs.add(
                "CREATE_STAFF",
                staff_id=created_by,
                details={"staff_id": member.id, "email": member.email, "role": member.role},
            )
        self._logger.info(f"Created staff member {member.email}")

        if data.send_invitation and self.email_service is not None:
            if not self.email_service.send_staff_invitation(member):
                self._logger.warning(f"Invitation email to {member.email} was not delivered")
        return member

    def update_staff(self, staff_id: str, data: StaffUpdate, updated_by: Optional[str] = None) -> Staff:
        member = self.staff.get_by_id(staff_id)
        values = data.model_dump(exclude_unset=True)
        if values.get("email"):
            values["email"] = values["email"].lower()
            self._ensure_unique_email(values["email"], current_id=member.id)

        with self.transaction("update staff"):
            self.staff.update(member, **values)
            self.logs.add(
                "UPDATE_STAFF",
                staff_id=updated_by,
                details={"staff_id": member.id, "fields": sorted(values)},
            )
        return member

    def delete_staff(self, staff_id: str, deleted_by: Optional[str] = None) -> None:
        """
        Remove a staff member.

        Raises:
            ResourceInUseError: If the member has confirmed/checked-in
                bookings or open housekeeping tasks
        """
        member = self.staff.get_by_id(staff_id)
        active_bookings = self.staff.count_active_bookings(member.id)
        open_tasks = self.staff.count_open_tasks(member.id)
        if active_bookings or open_tasks:
            raise ResourceInUseError(
                "Staff member has active bookings or open tasks",
                details={"active_bookings": active_bookings, "open_tasks": open_tasks},
            )

        with self.transaction("delete staff"):
            self.logs.add(
                "DELETE_STAFF",
                staff_id=deleted_by,
                details={"staff_id": member.id, "email": member.email},
            )
            self.staff.delete(member)
        self._logger.info(f"Deleted staff member {member.email}")

    def log_action(
        self,
        action: str,
        staff_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        booking_id: Optional[str] = None,
        room_id: Optional[str] = None,
    ) -> StaffLog:
        if staff_id:
            self.staff.get_by_id(staff_id)
        with self.transaction("log staff action"):
            entry = self.logs.add(action, staff_id, details, booking_id, room_id)
        return entry

    def get_staff_logs(self, staff_id: Optional[str] = None, action: Optional[str] = None) -> List[StaffLog]:
        return self.logs.latest(self.settings.STAFF_LOG_LIMIT, staff_id=staff_id, action=action)
