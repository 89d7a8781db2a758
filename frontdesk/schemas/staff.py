"""
Staff schemas.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import EmailStr, Field

from frontdesk.models.enums import StaffStatus
from frontdesk.schemas.common import BaseSchema


class StaffCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = None
    role: str = "front_desk"
    department: Optional[str] = None
    status: StaffStatus = StaffStatus.ACTIVE
    send_invitation: bool = True


class StaffUpdate(BaseSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    status: Optional[StaffStatus] = None


class StaffResponse(BaseSchema):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    department: Optional[str] = None
    status: StaffStatus
    created_at: datetime


class StaffLogResponse(BaseSchema):
    id: str
    staff_id: Optional[str] = None
    staff_name: Optional[str] = None
    action: str
    details: Optional[Dict[str, Any]] = None
    booking_id: Optional[str] = None
    room_id: Optional[str] = None
    created_at: datetime
