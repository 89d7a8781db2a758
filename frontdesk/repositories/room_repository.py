"""
Room and room type data access.
"""

from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from frontdesk.core.exceptions import RoomNotFoundError
from frontdesk.models.booking import BookingRoom
from frontdesk.models.enums import BookingRoomStatus, RoomStatus
from frontdesk.models.room import BlockedRoom, Room, RoomType
from frontdesk.repositories.base import BaseRepository

ACTIVE_ROOM_STATUSES = (BookingRoomStatus.RESERVED, BookingRoomStatus.CHECKED_IN)


class RoomTypeRepository(BaseRepository[RoomType]):
    def __init__(self, db: Session):
        super().__init__(RoomType, db)

    def find_by_name(self, name: str) -> Optional[RoomType]:
        return self.db.execute(select(RoomType).where(RoomType.name == name)).scalar_one_or_none()

    def list_all(self) -> List[RoomType]:
        return list(self.db.execute(select(RoomType).order_by(RoomType.name)).scalars().all())


class RoomRepository(BaseRepository[Room]):
    not_found_error = RoomNotFoundError

    def __init__(self, db: Session):
        super().__init__(Room, db)

    def find_by_number(self, number: str) -> Optional[Room]:
        return self.db.execute(select(Room).where(Room.number == number)).scalar_one_or_none()

    def list_rooms(self, status: Optional[RoomStatus] = None) -> List[Room]:
        stmt = select(Room).options(selectinload(Room.room_type)).order_by(Room.number)
        if status is not None:
            stmt = stmt.where(Room.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def count_by_status(self, status: RoomStatus) -> int:
        stmt = select(func.count()).select_from(Room).where(Room.status == status)
        return self.db.execute(stmt).scalar_one()

    def find_conflicts(
        self,
        room_id: str,
        check_in: date,
        check_out: date,
        exclude_leg_ids: Iterable[str] = (),
    ) -> List[BookingRoom]:
        """
        Active booking rooms for the room whose dates overlap the range.

        Ranges are half-open: a stay ending on a date does not clash with
        one starting that date.
        """
        stmt = select(BookingRoom).where(
            BookingRoom.room_id == room_id,
            BookingRoom.room_status.in_(ACTIVE_ROOM_STATUSES),
            BookingRoom.check_in_date < check_out,
            BookingRoom.check_out_date > check_in,
        )
        excluded = list(exclude_leg_ids)
        if excluded:
            stmt = stmt.where(BookingRoom.id.not_in(excluded))
        return list(self.db.execute(stmt).scalars().all())

    def find_available(self, check_in: date, check_out: date) -> List[Room]:
        """Rooms that are bookable and free for the whole range."""
        busy = select(BookingRoom.room_id).where(
            BookingRoom.room_status.in_(ACTIVE_ROOM_STATUSES),
            BookingRoom.check_in_date < check_out,
            BookingRoom.check_out_date > check_in,
        )
        stmt = (
            select(Room)
            .options(selectinload(Room.room_type))
            .where(
                Room.status.not_in((RoomStatus.BLOCKED, RoomStatus.MAINTENANCE)),
                Room.id.not_in(busy),
            )
            .order_by(Room.number)
        )
        return list(self.db.execute(stmt).scalars().all())


class BlockedRoomRepository(BaseRepository[BlockedRoom]):
    def __init__(self, db: Session):
        super().__init__(BlockedRoom, db)

    def active_for_room(self, room_id: str) -> Optional[BlockedRoom]:
        stmt = (
            select(BlockedRoom)
            .where(BlockedRoom.room_id == room_id, BlockedRoom.is_active.is_(True))
            .order_by(BlockedRoom.blocked_date.desc())
        )
        return self.db.execute(stmt).scalars().first()
