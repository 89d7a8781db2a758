"""
Guest service.
"""

from typing import Any, Dict, List, Optional, Tuple

from frontdesk.core.exceptions import ResourceInUseError
from frontdesk.models.guest import Guest
from frontdesk.repositories.guest_repository import GuestRepository
from frontdesk.schemas.guest import GuestCreate, GuestUpdate
from frontdesk.services.base import BaseService


class GuestService(BaseService):

    def __init__(self, db, settings=None):
        super().__init__(db, settings)
        self.guests = GuestRepository(db)

    def list_guests(
        self,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> Tuple[List[Guest], int]:
        return self.guests.list_guests(
            search=search,
            sort_by=sort_by,
            descending=descending,
            offset=(page - 1) * page_size,
            limit=page_size,
        )

    def get_guest(self, guest_id: str) -> Dict[str, Any]:
        """Guest with visit count and total billed."""
        guest = self.guests.get_by_id(guest_id)
        return {
            "guest": guest,
            "booking_count": self.guests.booking_count(guest.id),
            "total_spent": self.guests.total_billed(guest.id),
        }

    def create_guest(self, data: GuestCreate) -> Guest:
        with self.transaction("create guest"):
            guest = self.guests.create(Guest(**data.model_dump()))
        self._logger.info(f"Created guest {guest.id}")
        return guest

    def update_guest(self, guest_id: str, data: GuestUpdate) -> Guest:
        guest = self.guests.get_by_id(guest_id)
        with self.transaction("update guest"):
            self.guests.update(guest, **data.model_dump(exclude_unset=True))
        return guest

    def delete_guest(self, guest_id: str) -> None:
        guest = self.guests.get_by_id(guest_id)
        bookings = self.guests.booking_count(guest.id)
        if bookings:
            raise ResourceInUseError(
                "Guest has bookings and cannot be deleted",
                details={"booking_count": bookings},
            )
        with self.transaction("delete guest"):
            self.guests.delete(guest)
        self._logger.info(f"Deleted guest {guest_id}")

    def search_guests(self, term: str, limit: int = 10) -> List[Guest]:
        if not term or not term.strip():
            return []
        return self.guests.search(term, limit)
