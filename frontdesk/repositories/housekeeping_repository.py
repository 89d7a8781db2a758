"""
Housekeeping task data access.
"""

from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from frontdesk.core.exceptions import TaskNotFoundError
from frontdesk.models.enums import HousekeepingStatus, TaskPriority
from frontdesk.models.housekeeping import HousekeepingTask
from frontdesk.repositories.base import BaseRepository


class HousekeepingTaskRepository(BaseRepository[HousekeepingTask]):
    not_found_error = TaskNotFoundError

    def __init__(self, db: Session):
        super().__init__(HousekeepingTask, db)

    def list_tasks(
        self,
        status: Optional[HousekeepingStatus] = None,
        priority: Optional[TaskPriority] = None,
        room_id: Optional[str] = None,
        assigned_to: Optional[str] = None,
    ) -> List[HousekeepingTask]:
        stmt = (
            select(HousekeepingTask)
            .options(selectinload(HousekeepingTask.room), selectinload(HousekeepingTask.assignee))
            .order_by(HousekeepingTask.created_at.desc())
        )
        if status is not None:
            stmt = stmt.where(HousekeepingTask.status == status)
        if priority is not None:
            stmt = stmt.where(HousekeepingTask.priority == priority)
        if room_id:
            stmt = stmt.where(HousekeepingTask.room_id == room_id)
        if assigned_to:
            stmt = stmt.where(HousekeepingTask.assigned_to == assigned_to)
        return list(self.db.execute(stmt).scalars().all())

    def task_number_exists(self, task_number: str) -> bool:
        stmt = select(func.count()).select_from(HousekeepingTask).where(HousekeepingTask.task_number == task_number)
        return self.db.execute(stmt).scalar_one() > 0

    def count_by_status(self) -> Dict[str, int]:
        rows = self.db.execute(
            select(HousekeepingTask.status, func.count()).group_by(HousekeepingTask.status)
        ).all()
        return {status.value: count for status, count in rows}

    def count_by_priority(self) -> Dict[str, int]:
        rows = self.db.execute(
            select(HousekeepingTask.priority, func.count()).group_by(HousekeepingTask.priority)
        ).all()
        return {priority.value: count for priority, count in rows}
