"""
Housekeeping task workflow.

Tasks move pending -> assigned -> in_progress -> completed. Any task
that is not completed may be cancelled.
"""

import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from frontdesk.core.exceptions import InvalidStateError, ValidationError
from frontdesk.models.enums import HousekeepingStatus, RoomStatus, StaffStatus, TaskPriority
from frontdesk.models.housekeeping import HousekeepingTask
from frontdesk.models.room import Room
from frontdesk.repositories.housekeeping_repository import HousekeepingTaskRepository
from frontdesk.repositories.room_repository import RoomRepository
from frontdesk.repositories.staff_repository import StaffLogRepository, StaffRepository
from frontdesk.schemas.housekeeping import TaskCreate, TaskUpdate
from frontdesk.services.base import BaseService

ALLOWED_TRANSITIONS = {
    HousekeepingStatus.PENDING: {HousekeepingStatus.ASSIGNED, HousekeepingStatus.CANCELLED},
    HousekeepingStatus.ASSIGNED: {
        HousekeepingStatus.ASSIGNED,
        HousekeepingStatus.IN_PROGRESS,
        HousekeepingStatus.CANCELLED,
    },
    HousekeepingStatus.IN_PROGRESS: {HousekeepingStatus.COMPLETED, HousekeepingStatus.CANCELLED},
    HousekeepingStatus.COMPLETED: set(),
    HousekeepingStatus.CANCELLED: set(),
}

CHECKOUT_CLEANING = "checkout_cleaning"


def task_number_for(timestamp_ms: int) -> str:
    """HK followed by the last eight digits of a millisecond timestamp."""
    return f"HK{str(timestamp_ms)[-8:]}"


class HousekeepingService(BaseService):

    def __init__(self, db, settings=None):
        super().__init__(db, settings)
        self.tasks = HousekeepingTaskRepository(db)
        self.rooms = RoomRepository(db)
        self.staff = StaffRepository(db)
        self.logs = StaffLogRepository(db)

    def _next_task_number(self) -> str:
        timestamp_ms = int(time.time() * 1000)
        number = task_number_for(timestamp_ms)
        while self.tasks.task_number_exists(number):
            timestamp_ms += 1
            number = task_number_for(timestamp_ms)
        return number

    def _active_staff(self, staff_id: str):
        member = self.staff.get_by_id(staff_id)
        if member.status != StaffStatus.ACTIVE:
            raise ValidationError(
                f"Staff member {member.name} is not active",
                field_errors={"staff_id": ["staff member is inactive"]},
            )
        return member

    def _transition(self, task: HousekeepingTask, target: HousekeepingStatus) -> None:
        if target not in ALLOWED_TRANSITIONS[task.status]:
            raise InvalidStateError(
                f"Cannot move task {task.task_number} from {task.status.value} to {target.value}",
                task.status.value,
            )
        task.status = target
        if target == HousekeepingStatus.IN_PROGRESS:
            task.started_at = datetime.now()
        elif target == HousekeepingStatus.COMPLETED:
            task.completed_at = datetime.now()

    # ==================== Queries ====================

    def get_task(self, task_id: str) -> HousekeepingTask:
        return self.tasks.get_by_id(task_id)

    def list_tasks(
        self,
        status: Optional[HousekeepingStatus] = None,
        priority: Optional[TaskPriority] = None,
        room_id: Optional[str] = None,
        assigned_to: Optional[str] = None,
    ) -> List[HousekeepingTask]:
        return self.tasks.list_tasks(status=status, priority=priority, room_id=room_id, assigned_to=assigned_to)

    def get_stats(self) -> Dict[str, Any]:
        by_status = self.tasks.count_by_status()
        by_priority = self.tasks.count_by_priority()
        status_counts = {status.value: by_status.get(status.value, 0) for status in HousekeepingStatus}
        return {
            "total": sum(status_counts.values()),
            "open": sum(
                status_counts[status.value]
                for status in (HousekeepingStatus.PENDING, HousekeepingStatus.ASSIGNED, HousekeepingStatus.IN_PROGRESS)
            ),
            "by_status": status_counts,
            "by_priority": {priority.value: by_priority.get(priority.value, 0) for priority in TaskPriority},
        }

    # ==================== Commands ====================

    def schedule_checkout_cleaning(self, room: Room, booking_id: Optional[str] = None) -> HousekeepingTask:
        """Queue a high priority cleaning task; the caller commits."""
        return self.tasks.create(
            HousekeepingTask(
                task_number=self._next_task_number(),
                room_id=room.id,
                booking_id=booking_id,
                task_type=CHECKOUT_CLEANING,
                priority=TaskPriority.HIGH,
                status=HousekeepingStatus.PENDING,
                notes=f"Clean room {room.number} after checkout",
            )
        )

    def create_task(self, data: TaskCreate, created_by: Optional[str] = None) -> HousekeepingTask:
        room = self.rooms.get_by_id(data.room_id)
        if data.assigned_to:
            self._active_staff(data.assigned_to)

        with self.transaction("create housekeeping task"):
            task = self.tasks.create(
                HousekeepingTask(
                    task_number=self._next_task_number(),
                    status=HousekeepingStatus.ASSIGNED if data.assigned_to else HousekeepingStatus.PENDING,
                    **data.model_dump(),
                )
            )
            self.logs.add(
                "CREATE_TASK",
                staff_id=created_by,
                details={"task_number": task.task_number, "room_number": room.number, "task_type": task.task_type},
                room_id=room.id,
            )
        self._logger.info(f"Created housekeeping task {task.task_number} for room {room.number}")
        return task

    def assign_task(self, task_id: str, staff_id: str) -> HousekeepingTask:
        task = self.tasks.get_by_id(task_id)
        member = self._active_staff(staff_id)
        with self.transaction("assign housekeeping task"):
            self._transition(task, HousekeepingStatus.ASSIGNED)
            task.assigned_to = member.id
            self.db.flush()
        self._logger.info(f"Task {task.task_number} assigned to {member.name}")
        return task

    def start_task(self, task_id: str) -> HousekeepingTask:
        task = self.tasks.get_by_id(task_id)
        with self.transaction("start housekeeping task"):
            self._transition(task, HousekeepingStatus.IN_PROGRESS)
            self.db.flush()
        return task

    def complete_task(
        self,
        task_id: str,
        notes: Optional[str] = None,
        room_status: RoomStatus = RoomStatus.AVAILABLE,
    ) -> HousekeepingTask:
        """Finish a task and set the room status, available by default."""
        task = self.tasks.get_by_id(task_id)
        room = self.rooms.get_by_id(task.room_id)
        with self.transaction("complete housekeeping task"):
            self._transition(task, HousekeepingStatus.COMPLETED)
            if notes:
                task.notes = f"{task.notes}\n{notes}" if task.notes else notes
            room.status = room_status
            self.db.flush()
        self._logger.info(f"Task {task.task_number} completed, room {room.number} is {room_status.value}")
        return task

    def update_task(self, task_id: str, data: TaskUpdate) -> HousekeepingTask:
        task = self.tasks.get_by_id(task_id)
        values = data.model_dump(exclude_unset=True)
        status = values.pop("status", None)

        with self.transaction("update housekeeping task"):
            if status is not None and status != task.status:
                self._transition(task, status)
                if status == HousekeepingStatus.COMPLETED:
                    self.rooms.get_by_id(task.room_id).status = RoomStatus.AVAILABLE
            self.tasks.update(task, **values)
        return task

    def delete_task(self, task_id: str) -> None:
        task = self.tasks.get_by_id(task_id)
        if task.status == HousekeepingStatus.IN_PROGRESS:
            raise InvalidStateError("Cannot delete a task that is in progress", task.status.value)
        with self.transaction("delete housekeeping task"):
            self.tasks.delete(task)
        self._logger.info(f"Deleted housekeeping task {task.task_number}")
