"""
Database enums shared by models and schemas.
"""

import enum


class BookingStatus(str, enum.Enum):
    """Booking lifecycle status."""
    RESERVED = "reserved"
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class BookingRoomStatus(str, enum.Enum):
    """Status of a single room leg within a booking."""
    RESERVED = "reserved"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"


class RoomStatus(str, enum.Enum):
    """Physical room availability."""
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    BLOCKED = "blocked"
    CLEANING = "cleaning"
    MAINTENANCE = "maintenance"


class PaymentMethod(str, enum.Enum):
    """Payment instruments tracked in the payment breakdown."""
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    BANK = "bank"

    @property
    def transaction_method(self) -> str:
        """Name recorded on payment transactions."""
        return "bank_transfer" if self is PaymentMethod.BANK else self.value


class TransactionType(str, enum.Enum):
    ADVANCE = "advance"
    RECEIPT = "receipt"
    REFUND = "refund"
    LATE_FEE = "late_fee"


class HousekeepingStatus(str, enum.Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class NotificationType(str, enum.Enum):
    """Checkout alert categories."""
    APPROACHING = "approaching"
    OVERDUE = "overdue"
    GRACE_PERIOD = "grace_period"
    LATE_CHARGES = "late_charges"


class ArrivalType(str, enum.Enum):
    WALK_IN = "walk_in"
    PHONE = "phone"
    ONLINE = "online"
    OTA = "ota"
    CORPORATE = "corporate"


class StaffStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class EarlyCheckoutReason(str, enum.Enum):
    """Reasons offered when a guest leaves before the scheduled date."""
    GUEST_REQUEST = "Guest request"
    EMERGENCY = "Emergency"
    CHANGE_OF_PLANS = "Change of plans"
    DISSATISFACTION = "Dissatisfaction"
    HEALTH_REASONS = "Health reasons"
    OTHER = "Other"
