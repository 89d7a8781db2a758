from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from frontdesk.api import deps
from frontdesk.models.enums import RoomStatus
from frontdesk.schemas.room import (
    BlockedRoomResponse,
    RoomBlockCreate,
    RoomCreate,
    RoomResponse,
    RoomStatusUpdate,
    RoomTypeCreate,
    RoomTypeResponse,
    RoomUnblock,
)
from frontdesk.services.room.room_service import RoomService

router = APIRouter(prefix="/rooms")


# ============ Room types ============

@router.post("/types", response_model=RoomTypeResponse, status_code=status.HTTP_201_CREATED)
def create_room_type(data: RoomTypeCreate, service: RoomService = Depends(deps.get_room_service)):
    return service.create_room_type(data)


@router.get("/types", response_model=List[RoomTypeResponse])
def list_room_types(service: RoomService = Depends(deps.get_room_service)):
    return service.list_room_types()


# ============ Rooms ============

@router.get("", response_model=List[RoomResponse])
def list_rooms(
    room_status: Optional[RoomStatus] = Query(default=None, alias="status"),
    service: RoomService = Depends(deps.get_room_service),
):
    return service.list_rooms(room_status)


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(data: RoomCreate, service: RoomService = Depends(deps.get_room_service)):
    return service.create_room(data)


@router.get("/available", response_model=List[RoomResponse])
def get_available_rooms(
    check_in: date = Query(...),
    check_out: date = Query(...),
    service: RoomService = Depends(deps.get_room_service),
):
    """Rooms free of overlapping bookings and not blocked or in maintenance."""
    return service.get_available_rooms(check_in, check_out)


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: str, service: RoomService = Depends(deps.get_room_service)):
    return service.get_room(room_id)


@router.patch("/{room_id}/status", response_model=RoomResponse)
def update_room_status(
    room_id: str,
    data: RoomStatusUpdate,
    service: RoomService = Depends(deps.get_room_service),
):
    return service.update_room_status(room_id, data.status, data.staff_id)


# ============ Blocks ============

@router.post("/{room_id}/block", response_model=BlockedRoomResponse, status_code=status.HTTP_201_CREATED)
def block_room(
    room_id: str,
    data: RoomBlockCreate,
    service: RoomService = Depends(deps.get_room_service),
):
    """Take a room out of service; rooms with bookings in the period are refused."""
    return service.block_room(room_id, data)


@router.post("/{room_id}/unblock", response_model=BlockedRoomResponse)
def unblock_room(
    room_id: str,
    data: RoomUnblock,
    service: RoomService = Depends(deps.get_room_service),
):
    return service.unblock_room(room_id, data)
