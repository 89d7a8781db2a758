"""
Housekeeping task model.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from frontdesk.models.base import TimestampModel, enum_column
from frontdesk.models.enums import HousekeepingStatus, TaskPriority

if TYPE_CHECKING:
    from frontdesk.models.room import Room
    from frontdesk.models.staff import Staff

__all__ = ["HousekeepingTask"]


class HousekeepingTask(TimestampModel):
    """Cleaning or maintenance work for a room."""

    __tablename__ = "housekeeping_tasks"

    task_number: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    room_id: Mapped[str] = mapped_column(ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    booking_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("bookings.id", ondelete="SET NULL"),
        nullable=True,
    )
    task_type: Mapped[str] = mapped_column(String(50), nullable=False, default="cleaning")
    status: Mapped[HousekeepingStatus] = mapped_column(
        enum_column(HousekeepingStatus),
        nullable=False,
        default=HousekeepingStatus.PENDING,
        index=True,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        enum_column(TaskPriority),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )
    assigned_to: Mapped[Optional[str]] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    estimated_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    scheduled_for: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    room: Mapped["Room"] = relationship()
    assignee: Mapped[Optional["Staff"]] = relationship()

    @property
    def room_number(self) -> Optional[str]:
        return self.room.number if self.room else None

    @property
    def assignee_name(self) -> Optional[str]:
        return self.assignee.name if self.assignee else None
