from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from frontdesk.api import deps
from frontdesk.models.enums import HousekeepingStatus, TaskPriority
from frontdesk.schemas.housekeeping import (
    TaskAssign,
    TaskComplete,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from frontdesk.services.housekeeping.housekeeping_service import HousekeepingService

router = APIRouter(prefix="/housekeeping")


@router.get("/tasks", response_model=List[TaskResponse])
def list_tasks(
    task_status: Optional[HousekeepingStatus] = Query(default=None, alias="status"),
    priority: Optional[TaskPriority] = None,
    room_id: Optional[str] = None,
    assigned_to: Optional[str] = None,
    service: HousekeepingService = Depends(deps.get_housekeeping_service),
):
    return service.list_tasks(task_status, priority, room_id, assigned_to)


@router.get("/stats")
def get_stats(service: HousekeepingService = Depends(deps.get_housekeeping_service)) -> Dict[str, Any]:
    return service.get_stats()


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    data: TaskCreate,
    created_by: Optional[str] = None,
    service: HousekeepingService = Depends(deps.get_housekeeping_service),
):
    return service.create_task(data, created_by)


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, service: HousekeepingService = Depends(deps.get_housekeeping_service)):
    return service.get_task(task_id)


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    data: TaskUpdate,
    service: HousekeepingService = Depends(deps.get_housekeeping_service),
):
    return service.update_task(task_id, data)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, service: HousekeepingService = Depends(deps.get_housekeeping_service)):
    service.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============ Workflow ============

@router.post("/tasks/{task_id}/assign", response_model=TaskResponse)
def assign_task(
    task_id: str,
    data: TaskAssign,
    service: HousekeepingService = Depends(deps.get_housekeeping_service),
):
    return service.assign_task(task_id, data.staff_id)


@router.post("/tasks/{task_id}/start", response_model=TaskResponse)
def start_task(task_id: str, service: HousekeepingService = Depends(deps.get_housekeeping_service)):
    return service.start_task(task_id)


@router.post("/tasks/{task_id}/complete", response_model=TaskResponse)
def complete_task(
    task_id: str,
    data: TaskComplete,
    service: HousekeepingService = Depends(deps.get_housekeeping_service),
):
    """Finish a task. The room becomes available unless another status is given."""
    return service.complete_task(task_id, data.notes, data.room_status)
