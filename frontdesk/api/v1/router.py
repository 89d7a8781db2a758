"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints for the front-desk service
"""
from fastapi import APIRouter

from frontdesk.api.v1.endpoints import (
    bookings,
    checkout,
    guests,
    health,
    housekeeping,
    reports,
    rooms,
    staff,
)

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(health.router)
router.include_router(rooms.router, tags=["Room Management"])
router.include_router(guests.router, tags=["Guest Management"])
router.include_router(staff.router, tags=["Staff Management"])
router.include_router(bookings.router, tags=["Booking Management"])
router.include_router(checkout.router, tags=["Check-out"])
router.include_router(housekeeping.router, tags=["Housekeeping"])
router.include_router(reports.router, tags=["Analytics & Reporting"])
