"""
Guest schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import EmailStr, Field

from frontdesk.schemas.common import BaseSchema


class GuestBase(BaseSchema):
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=30)
    address: Optional[str] = None
    nationality: Optional[str] = None
    id_type: Optional[str] = None
    id_number: Optional[str] = None
    notes: Optional[str] = None


class GuestCreate(GuestBase):
    pass


class GuestUpdate(BaseSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=30)
    address: Optional[str] = None
    nationality: Optional[str] = None
    id_type: Optional[str] = None
    id_number: Optional[str] = None
    notes: Optional[str] = None


class GuestResponse(GuestBase):
    id: str
    email: Optional[str] = None
    created_at: datetime


class GuestDetailResponse(GuestResponse):
    booking_count: int = 0
    total_spent: Decimal = Decimal("0")
