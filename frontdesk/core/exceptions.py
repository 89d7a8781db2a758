"""
Custom Exceptions for the Front Desk Application

This module defines custom exception classes used throughout the application
for better error handling and debugging.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    OPERATION_FAILED = "OPERATION_FAILED"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    REPORT_QUERY_FAILED = "REPORT_QUERY_FAILED"

    # Business logic errors
    INVALID_STATE = "INVALID_STATE"
    ROOM_UNAVAILABLE = "ROOM_UNAVAILABLE"
    RESOURCE_IN_USE = "RESOURCE_IN_USE"

    # Entity specific errors
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    GUEST_NOT_FOUND = "GUEST_NOT_FOUND"
    STAFF_NOT_FOUND = "STAFF_NOT_FOUND"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"

    # External service errors
    EMAIL_SERVICE_ERROR = "EMAIL_SERVICE_ERROR"
    WHATSAPP_SERVICE_ERROR = "WHATSAPP_SERVICE_ERROR"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# General Application Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when request data or parameters fail validation"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        status_code: int = 400
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details, status_code)
        self.field_errors = field_errors or {}


class ReportParameterError(ValidationError):
    """Exception raised for missing or malformed report query parameters"""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_FORMAT):
        super().__init__(message, error_code=error_code)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class NotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    resource_name = "Resource"
    default_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, resource_id: Any = None, message: Optional[str] = None):
        if message is None:
            message = f"{self.resource_name} not found"
            if resource_id is not None:
                message = f"{self.resource_name} with id '{resource_id}' not found"
        super().__init__(
            message,
            self.default_code,
            {"resource_id": str(resource_id)} if resource_id is not None else None,
            404,
        )
        self.resource_id = resource_id


class BookingNotFoundError(NotFoundError):
    resource_name = "Booking"
    default_code = ErrorCode.BOOKING_NOT_FOUND


class GuestNotFoundError(NotFoundError):
    resource_name = "Guest"
    default_code = ErrorCode.GUEST_NOT_FOUND


class StaffNotFoundError(NotFoundError):
    resource_name = "Staff member"
    default_code = ErrorCode.STAFF_NOT_FOUND


class RoomNotFoundError(NotFoundError):
    resource_name = "Room"
    default_code = ErrorCode.ROOM_NOT_FOUND


class TaskNotFoundError(NotFoundError):
    resource_name = "Housekeeping task"
    default_code = ErrorCode.TASK_NOT_FOUND


class NotificationNotFoundError(NotFoundError):
    resource_name = "Checkout notification"


# ========================================
# Business Logic Exceptions
# ========================================

class ConflictError(BaseAppException):
    """Exception raised when an operation conflicts with existing data"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.OPERATION_FAILED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 409)


class InvalidStateError(ConflictError):
    """Exception raised when an entity's status does not allow the operation"""

    def __init__(self, message: str, current_status: Optional[str] = None):
        details = {"current_status": current_status} if current_status else None
        super().__init__(message, ErrorCode.INVALID_STATE, details)
        self.current_status = current_status


class RoomUnavailableError(ConflictError):
    """Exception raised when a room cannot be booked or occupied"""

    def __init__(self, room_number: str, reason: str):
        super().__init__(
            f"Room {room_number} is not available: {reason}",
            ErrorCode.ROOM_UNAVAILABLE,
            {"room_number": room_number, "reason": reason},
        )


class DuplicateEntryError(ConflictError):
    """Exception raised when a unique field already exists"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, ErrorCode.DUPLICATE_ENTRY, {"field": field} if field else None)


class ResourceInUseError(ConflictError):
    """Exception raised when a resource cannot be removed because it is referenced"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.RESOURCE_IN_USE, details)


# ========================================
# Database Exceptions
# ========================================

class DatabaseError(BaseAppException):
    """Exception raised for database operation failures"""

    def __init__(
        self,
        message: str = "Database operation failed",
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 500)


class ReportQueryError(DatabaseError):
    """Exception raised when a report query fails"""

    def __init__(self, details: str):
        super().__init__(
            "Failed to fetch report data",
            ErrorCode.REPORT_QUERY_FAILED,
            {"reason": details},
        )
        self.reason = details

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.reason}


# ========================================
# External Service Exceptions
# ========================================

class NotificationError(BaseAppException):
    """Exception raised when an outbound notification cannot be delivered"""

    def __init__(
        self,
        message: str,
        channel: str,
        error_code: ErrorCode = ErrorCode.EMAIL_SERVICE_ERROR
    ):
        super().__init__(message, error_code, {"channel": channel}, 502)
        self.channel = channel
