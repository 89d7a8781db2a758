"""
Staff and staff activity log models.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from frontdesk.models.base import BaseModel, TimestampModel, enum_column
from frontdesk.models.enums import StaffStatus

__all__ = ["Staff", "StaffLog"]


class Staff(TimestampModel):
    """Front-desk, housekeeping and management staff."""

    __tablename__ = "staff"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="front_desk")
    department: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    status: Mapped[StaffStatus] = mapped_column(
        enum_column(StaffStatus),
        nullable=False,
        default=StaffStatus.ACTIVE,
    )

    logs: Mapped[List["StaffLog"]] = relationship(back_populates="staff")


class StaffLog(BaseModel):
    """Audit trail of staff actions such as CHECK_IN or CANCEL_BOOKING."""

    __tablename__ = "staff_logs"

    staff_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    details: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    booking_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    room_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.now,
        index=True,
    )

    staff: Mapped[Optional["Staff"]] = relationship(back_populates="logs")

    @property
    def staff_name(self) -> Optional[str]:
        return self.staff.name if self.staff else None
