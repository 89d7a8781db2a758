"""
SQLAlchemy models for the front-desk service.
"""

from frontdesk.models.base import BaseModel, TimestampModel
from frontdesk.models.booking import Booking, BookingRoom, CancelledBooking, RoomTransfer
from frontdesk.models.checkout import CheckoutNotification, LateCheckoutCharge
from frontdesk.models.guest import Guest
from frontdesk.models.housekeeping import HousekeepingTask
from frontdesk.models.payment import BookingPaymentBreakdown, ChargeItem, PaymentTransaction
from frontdesk.models.room import BlockedRoom, Room, RoomType
from frontdesk.models.staff import Staff, StaffLog

__all__ = [
    "BaseModel",
    "TimestampModel",
    "Booking",
    "BookingRoom",
    "CancelledBooking",
    "RoomTransfer",
    "CheckoutNotification",
    "LateCheckoutCharge",
    "Guest",
    "HousekeepingTask",
    "BookingPaymentBreakdown",
    "ChargeItem",
    "PaymentTransaction",
    "BlockedRoom",
    "Room",
    "RoomType",
    "Staff",
    "StaffLog",
]
