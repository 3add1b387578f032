"""Task maintenance: overdue marking, daily duplication and reset, deletion."""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.core.exceptions import NotFoundError
from timedesk.crud.task import task as task_crud
from timedesk.crud.time_record import time_record as time_record_crud
from timedesk.localization.helpers import get_translation
from timedesk.models.task import Task, TaskStatus, TaskType
from timedesk.schemas.task import TaskCreate
from timedesk.services.duration import utcnow
from timedesk.services.session_service import work_date

logger = logging.getLogger(__name__)


class TaskService:
    """Operations that touch many tasks or several tables at once."""

    async def create_task(self, db: AsyncSession, payload: TaskCreate) -> Task:
        new_task = await task_crud.create(db, obj_in=payload)
        logger.info(f"Created task {new_task.id} '{new_task.title}' for {new_task.assignee_id}")
        return new_task

    async def set_status(self, db: AsyncSession, task_obj: Task, status: TaskStatus) -> Task:
        """Change task status; completion is timestamped, reopening clears it."""
        task_obj.status = status
        task_obj.completed_at = utcnow() if status == TaskStatus.COMPLETED else None
        db.add(task_obj)
        await db.commit()
        await db.refresh(task_obj)
        return task_obj

    async def update_overdue_tasks(self, db: AsyncSession, *, today: Optional[date] = None) -> int:
        """Mark open tasks past their due date as overdue. Returns the count."""
        today = today or work_date(utcnow())
        candidates = await task_crud.list_overdue_candidates(db, today=today)
        for item in candidates:
            item.status = TaskStatus.OVERDUE
            db.add(item)
        await db.commit()
        logger.info(f"Marked {len(candidates)} tasks overdue as of {today}")
        return len(candidates)

    async def list_overdue_tasks(
        self,
        db: AsyncSession,
        *,
        assignee_id: Optional[UUID] = None,
        today: Optional[date] = None,
    ) -> List[Dict]:
        today = today or work_date(utcnow())
        tasks = await task_crud.list_overdue(db, assignee_id=assignee_id)
        return [
            {
                "id": item.id,
                "title": item.title,
                "description": item.description,
                "priority": item.priority,
                "task_type": item.task_type,
                "due_date": item.due_date,
                "department": item.department,
                "days_overdue": (today - item.due_date).days,
            }
            for item in tasks
            if item.due_date is not None
        ]

    async def get_overdue_stats(self, db: AsyncSession, *, today: Optional[date] = None) -> Dict:
        today = today or work_date(utcnow())
        tasks = [item for item in await task_crud.list_overdue(db) if item.due_date is not None]
        days = [(today - item.due_date).days for item in tasks]
        return {
            "total_overdue": len(tasks),
            "overdue_urgent": sum(1 for item in tasks if item.task_type == TaskType.URGENT),
            "overdue_long_term": sum(1 for item in tasks if item.task_type == TaskType.LONG_TERM),
            "days_overdue_avg": round(sum(days) / len(days), 2) if days else 0.0,
        }

    async def duplicate_daily_tasks(
        self,
        db: AsyncSession,
        *,
        today: Optional[date] = None,
    ) -> List[Task]:
        """Copy each daily template task onto tomorrow unless already copied."""
        today = today or work_date(utcnow())
        tomorrow = today + timedelta(days=1)
        templates = await task_crud.list_daily_templates(db)
        logger.info(f"Found {len(templates)} daily tasks for duplication")

        created: List[Task] = []
        for template in templates:
            existing = await task_crud.find_daily_copy(
                db,
                title=template.title,
                assignee_id=template.assignee_id,
                start_date=tomorrow,
            )
            if existing is not None:
                continue
            copy = Task(
                title=template.title,
                description=template.description,
                assignee_id=template.assignee_id,
                creator_id=template.creator_id,
                priority=template.priority,
                task_type=TaskType.DAILY,
                department=template.department,
                start_date=tomorrow,
                due_date=tomorrow,
                status=TaskStatus.PENDING,
            )
            db.add(copy)
            created.append(copy)

        if created:
            await db.commit()
            for copy in created:
                await db.refresh(copy)
        logger.info(f"Created {len(created)} daily tasks for {tomorrow}")
        return created

    async def reset_daily_tasks(self, db: AsyncSession) -> int:
        """Return completed daily tasks to pending."""
        tasks = await task_crud.list_completed_daily(db)
        for item in tasks:
            item.status = TaskStatus.PENDING
            item.completed_at = None
            db.add(item)
        await db.commit()
        logger.info(f"Reset {len(tasks)} daily tasks to pending")
        return len(tasks)

    async def delete_task(self, db: AsyncSession, task_id: UUID, *, locale: str = "en") -> None:
        """Delete a task with its comments, documents and time records atomically."""
        task_obj = await task_crud.get(db, id=task_id)
        if task_obj is None:
            raise NotFoundError(get_translation("errors.task_not_found", locale), locale=locale)

        try:
            await task_crud.delete_dependents(db, task_id=task_id)
            await time_record_crud.delete_for_task(db, task_id=task_id)
            await db.delete(task_obj)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Failed to delete task {task_id}; nothing was removed")
            raise
        logger.info(f"Deleted task {task_id}")


task_service = TaskService()
