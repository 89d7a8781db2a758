"""
Room inventory service.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional

from frontdesk.core.exceptions import (
    DuplicateEntryError,
    InvalidStateError,
    RoomUnavailableError,
    ValidationError,
)
from frontdesk.models.enums import RoomStatus
from frontdesk.models.room import BlockedRoom, Room, RoomType
from frontdesk.repositories.room_repository import (
    BlockedRoomRepository,
    RoomRepository,
    RoomTypeRepository,
)
from frontdesk.repositories.staff_repository import StaffLogRepository
from frontdesk.schemas.room import RoomBlockCreate, RoomCreate, RoomTypeCreate, RoomUnblock
from frontdesk.services.base import BaseService


class RoomService(BaseService):
    """Room types, rooms, availability and blocks."""

    def __init__(self, db, settings=None):
        super().__init__(db, settings)
        self.room_types = RoomTypeRepository(db)
        self.rooms = RoomRepository(db)
        self.blocks = BlockedRoomRepository(db)
        self.logs = StaffLogRepository(db)

    def create_room_type(self, data: RoomTypeCreate) -> RoomType:
        if self.room_types.find_by_name(data.name):
            raise DuplicateEntryError(f"Room type '{data.name}' already exists", field="name")
        with self.transaction("create room type"):
            room_type = self.room_types.create(RoomType(**data.model_dump()))
        self._logger.info(f"Created room type {room_type.name}")
        return room_type

    def list_room_types(self) -> List[RoomType]:
        return self.room_types.list_all()

    def create_room(self, data: RoomCreate) -> Room:
        if self.rooms.find_by_number(data.number):
            raise DuplicateEntryError(f"Room {data.number} already exists", field="number")
        if self.room_types.find_by_id(data.room_type_id) is None:
            raise ValidationError(
                "Unknown room type",
                field_errors={"room_type_id": [f"no room type with id {data.room_type_id}"]},
            )
        with self.transaction("create room"):
            room = self.rooms.create(Room(**data.model_dump()))
        self._logger.info(f"Created room {room.number}")
        return room

    def get_room(self, room_id: str) -> Room:
        return self.rooms.get_by_id(room_id)

    def list_rooms(self, status: Optional[RoomStatus] = None) -> List[Room]:
        return self.rooms.list_rooms(status)

    def update_room_status(self, room_id: str, status: RoomStatus, staff_id: Optional[str] = None) -> Room:
        room = self.rooms.get_by_id(room_id)
        previous = room.status
        with self.transaction("update room status"):
            self.rooms.update(room, status=status)
            self.logs.add(
                "UPDATE_ROOM_STATUS",
                staff_id=staff_id,
                details={"room_number": room.number, "from": previous.value, "to": status.value},
                room_id=room.id,
            )
        self._logger.info(f"Room {room.number} status {previous.value} -> {status.value}")
        return room

    def get_available_rooms(self, check_in: date, check_out: date) -> List[Room]:
        if check_out < check_in:
            raise ValidationError(
                "check_out cannot be before check_in",
                field_errors={"check_out": ["must be on or after check_in"]},
            )
        return self.rooms.find_available(check_in, check_out)

    # ==================== Blocking ====================

    def block_room(
        self,
        room_id: str,
        data: RoomBlockCreate,
        blocked_at: Optional[datetime] = None,
    ) -> BlockedRoom:
        """
        Take a room out of service.

        Raises:
            InvalidStateError: Room is occupied or already blocked
            RoomUnavailableError: Room has bookings inside the block period
        """
        room = self.rooms.get_by_id(room_id)
        if room.status == RoomStatus.OCCUPIED:
            raise InvalidStateError(f"Room {room.number} is occupied and cannot be blocked", room.status.value)
        if room.status == RoomStatus.BLOCKED or self.blocks.active_for_room(room.id) is not None:
            raise InvalidStateError(f"Room {room.number} is already blocked", room.status.value)

        now = blocked_at or datetime.now()
        blocked_from = data.blocked_from_date or now.date()
        blocked_to = data.blocked_to_date or blocked_from
        if blocked_to < blocked_from:
            raise ValidationError(
                "blocked_to_date cannot be before blocked_from_date",
                field_errors={"blocked_to_date": ["must be on or after blocked_from_date"]},
            )
        if self.rooms.find_conflicts(room.id, blocked_from, blocked_to + timedelta(days=1)):
            raise RoomUnavailableError(room.number, "it has bookings during the block period")

        with self.transaction("block room"):
            block = self.blocks.create(
                BlockedRoom(
                    room_id=room.id,
                    blocked_date=now,
                    blocked_from_date=blocked_from,
                    blocked_to_date=blocked_to,
                    reason=data.reason,
                    notes=data.notes,
                    blocked_by_staff_id=data.staff_id,
                )
            )
            self.rooms.update(room, status=RoomStatus.BLOCKED)
            self.logs.add(
                "BLOCK_ROOM",
                staff_id=data.staff_id,
                details={
                    "room_number": room.number,
                    "reason": data.reason,
                    "from": blocked_from.isoformat(),
                    "to": blocked_to.isoformat(),
                },
                room_id=room.id,
            )
        self._logger.info(f"Blocked room {room.number} from {blocked_from} to {blocked_to}")
        return block

    def unblock_room(
        self,
        room_id: str,
        data: RoomUnblock,
        unblocked_at: Optional[datetime] = None,
    ) -> BlockedRoom:
        room = self.rooms.get_by_id(room_id)
        block = self.blocks.active_for_room(room.id)
        if block is None:
            raise InvalidStateError(f"Room {room.number} is not blocked", room.status.value)

        with self.transaction("unblock room"):
            self.blocks.update(
                block,
                is_active=False,
                unblocked_date=unblocked_at or datetime.now(),
                unblock_reason=data.reason,
                unblocked_by_staff_id=data.staff_id,
            )
            self.rooms.update(room, status=RoomStatus.AVAILABLE)
            self.logs.add(
                "UNBLOCK_ROOM",
                staff_id=data.staff_id,
                details={"room_number": room.number, "reason": data.reason},
                room_id=room.id,
            )
        self._logger.info(f"Unblocked room {room.number}")
        return block
