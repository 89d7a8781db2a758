"""
Housekeeping task schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from frontdesk.models.enums import HousekeepingStatus, RoomStatus, TaskPriority
from frontdesk.schemas.common import BaseSchema


class TaskCreate(BaseSchema):
    room_id: str
    booking_id: Optional[str] = None
    task_type: str = Field(default="cleaning", max_length=50)
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: Optional[str] = None
    notes: Optional[str] = None
    estimated_minutes: Optional[int] = Field(default=None, ge=1)
    scheduled_for: Optional[datetime] = None


class TaskUpdate(BaseSchema):
    task_type: Optional[str] = Field(default=None, max_length=50)
    priority: Optional[TaskPriority] = None
    status: Optional[HousekeepingStatus] = None
    notes: Optional[str] = None
    estimated_minutes: Optional[int] = Field(default=None, ge=1)
    scheduled_for: Optional[datetime] = None


class TaskAssign(BaseSchema):
    staff_id: str


class TaskComplete(BaseSchema):
    notes: Optional[str] = None
    room_status: RoomStatus = RoomStatus.AVAILABLE


class TaskResponse(BaseSchema):
    id: str
    task_number: str
    room_id: str
    room_number: Optional[str] = None
    booking_id: Optional[str] = None
    task_type: str
    status: HousekeepingStatus
    priority: TaskPriority
    assigned_to: Optional[str] = None
    assignee_name: Optional[str] = None
    notes: Optional[str] = None
    estimated_minutes: Optional[int] = None
    scheduled_for: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
