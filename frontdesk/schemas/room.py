"""
Room and room type schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from frontdesk.models.enums import RoomStatus
from frontdesk.schemas.common import BaseSchema


class RoomTypeCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    base_price: Decimal = Field(..., ge=0, description="Nightly rate")
    max_occupancy: int = Field(default=2, ge=1)


class RoomTypeResponse(BaseSchema):
    id: str
    name: str
    description: Optional[str] = None
    base_price: Decimal
    max_occupancy: int


class RoomCreate(BaseSchema):
    number: str = Field(..., min_length=1, max_length=20)
    room_type_id: str
    floor: Optional[int] = None
    status: RoomStatus = RoomStatus.AVAILABLE


class RoomStatusUpdate(BaseSchema):
    status: RoomStatus
    staff_id: Optional[str] = None


class RoomResponse(BaseSchema):
    id: str
    number: str
    floor: Optional[int] = None
    room_type_id: str
    room_type_name: Optional[str] = None
    status: RoomStatus
    updated_at: Optional[datetime] = None


class RoomBlockCreate(BaseSchema):
    """Dates default to a block for today only."""

    reason: Optional[str] = Field(default=None, max_length=255)
    blocked_from_date: Optional[date] = None
    blocked_to_date: Optional[date] = None
    notes: Optional[str] = None
    staff_id: Optional[str] = None


class RoomUnblock(BaseSchema):
    reason: Optional[str] = None
    staff_id: Optional[str] = None


class BlockedRoomResponse(BaseSchema):
    id: str
    room_id: str
    blocked_date: datetime
    blocked_from_date: date
    blocked_to_date: date
    reason: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    blocked_by_staff_id: Optional[str] = None
    unblocked_date: Optional[datetime] = None
    unblock_reason: Optional[str] = None
    unblocked_by_staff_id: Optional[str] = None
