from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from frontdesk.api import deps
from frontdesk.models.enums import StaffStatus
from frontdesk.schemas.staff import StaffCreate, StaffLogResponse, StaffResponse, StaffUpdate
from frontdesk.services.staff.staff_service import StaffService

router = APIRouter(prefix="/staff")


@router.get("", response_model=List[StaffResponse])
def list_staff(
    staff_status: Optional[StaffStatus] = Query(default=None, alias="status"),
    role: Optional[str] = None,
    service: StaffService = Depends(deps.get_staff_service),
):
    return service.list_staff(staff_status, role)


@router.get("/logs", response_model=List[StaffLogResponse])
def get_staff_logs(
    staff_id: Optional[str] = None,
    action: Optional[str] = None,
    service: StaffService = Depends(deps.get_staff_service),
):
    """Most recent activity log entries, newest first."""
    return service.get_staff_logs(staff_id, action)


@router.get("/{staff_id}", response_model=StaffResponse)
def get_staff(staff_id: str, service: StaffService = Depends(deps.get_staff_service)):
    return service.get_staff(staff_id)


@router.post("", response_model=StaffResponse, status_code=status.HTTP_201_CREATED)
def create_staff(
    data: StaffCreate,
    created_by: Optional[str] = None,
    service: StaffService = Depends(deps.get_staff_service),
):
    return service.create_staff(data, created_by)


@router.patch("/{staff_id}", response_model=StaffResponse)
def update_staff(
    staff_id: str,
    data: StaffUpdate,
    updated_by: Optional[str] = None,
    service: StaffService = Depends(deps.get_staff_service),
):
    return service.update_staff(staff_id, data, updated_by)


@router.delete("/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_staff(
    staff_id: str,
    deleted_by: Optional[str] = None,
    service: StaffService = Depends(deps.get_staff_service),
):
    service.delete_staff(staff_id, deleted_by)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
