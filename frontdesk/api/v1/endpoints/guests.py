from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from frontdesk.api import deps
from frontdesk.schemas.common import PaginatedResponse
from frontdesk.schemas.guest import GuestCreate, GuestDetailResponse, GuestResponse, GuestUpdate
from frontdesk.services.guest.guest_service import GuestService

router = APIRouter(prefix="/guests")


@router.get("", response_model=PaginatedResponse[GuestResponse])
def list_guests(
    search: Optional[str] = Query(default=None, max_length=100),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    sort_by: str = Query(default="created_at"),
    descending: bool = Query(default=True),
    service: GuestService = Depends(deps.get_guest_service),
):
    guests, total = service.list_guests(search, page, page_size, sort_by, descending)
    return PaginatedResponse[GuestResponse].create(
        items=[GuestResponse.model_validate(guest) for guest in guests],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/search", response_model=List[GuestResponse])
def search_guests(
    q: str = Query(..., min_length=1),
    limit: int = Query(default=10, ge=1, le=50),
    service: GuestService = Depends(deps.get_guest_service),
):
    """Quick lookup by name, phone or email for the booking form."""
    return service.search_guests(q, limit)


@router.get("/{guest_id}", response_model=GuestDetailResponse)
def get_guest(guest_id: str, service: GuestService = Depends(deps.get_guest_service)):
    result = service.get_guest(guest_id)
    return GuestDetailResponse(
        **GuestResponse.model_validate(result["guest"]).model_dump(),
        booking_count=result["booking_count"],
        total_spent=result["total_spent"],
    )


@router.post("", response_model=GuestResponse, status_code=status.HTTP_201_CREATED)
def create_guest(data: GuestCreate, service: GuestService = Depends(deps.get_guest_service)):
    return service.create_guest(data)


@router.patch("/{guest_id}", response_model=GuestResponse)
def update_guest(guest_id: str, data: GuestUpdate, service: GuestService = Depends(deps.get_guest_service)):
    return service.update_guest(guest_id, data)


@router.delete("/{guest_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_guest(guest_id: str, service: GuestService = Depends(deps.get_guest_service)):
    service.delete_guest(guest_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
