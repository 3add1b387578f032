"""Task CRUD operations."""
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.crud.base import CRUDBase
from timedesk.models.task import Task, TaskComment, TaskDocument, TaskStatus, TaskType
from timedesk.schemas.task import TaskCreate, TaskUpdate


class CRUDTask(CRUDBase[Task, TaskCreate, TaskUpdate]):
    """CRUD operations for Task."""

    async def list_for_assignee(
        self,
        db: AsyncSession,
        *,
        assignee_id: UUID,
        statuses: Optional[Iterable[TaskStatus]] = None,
        include_archived: bool = False,
    ) -> List[Task]:
        query = select(Task).where(Task.assignee_id == assignee_id)
        if statuses is not None:
            query = query.where(Task.status.in_(list(statuses)))
        if not include_archived:
            query = query.where(Task.archived.is_(False))
        result = await db.execute(query.order_by(Task.due_date, Task.created_at))
        return list(result.scalars().all())

    async def list_filtered(
        self,
        db: AsyncSession,
        *,
        assignee_id: Optional[UUID] = None,
        status: Optional[TaskStatus] = None,
        task_type: Optional[TaskType] = None,
        include_archived: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Task]:
        query = select(Task)
        if assignee_id is not None:
            query = query.where(Task.assignee_id == assignee_id)
        if status is not None:
            query = query.where(Task.status == status)
        if task_type is not None:
            query = query.where(Task.task_type == task_type)
        if not include_archived:
            query = query.where(Task.archived.is_(False))
        result = await db.execute(
            query.order_by(Task.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def list_overdue_candidates(self, db: AsyncSession, *, today: date) -> List[Task]:
        """Open, non-archived tasks whose due date has passed."""
        result = await db.execute(
            select(Task).where(
                Task.due_date.is_not(None),
                Task.due_date < today,
                Task.status.in_([TaskStatus.PENDING, TaskStatus.IN_PROGRESS]),
                Task.archived.is_(False),
            )
        )
        return list(result.scalars().all())

    async def list_overdue(
        self,
        db: AsyncSession,
        *,
        assignee_id: Optional[UUID] = None,
    ) -> List[Task]:
        query = select(Task).where(
            Task.status == TaskStatus.OVERDUE,
            Task.archived.is_(False),
        )
        if assignee_id is not None:
            query = query.where(Task.assignee_id == assignee_id)
        result = await db.execute(query.order_by(Task.due_date))
        return list(result.scalars().all())

    async def list_daily_templates(self, db: AsyncSession) -> List[Task]:
        """Daily tasks without a date range, used as duplication templates."""
        result = await db.execute(
            select(Task).where(
                Task.task_type == TaskType.DAILY,
                (Task.due_date.is_(None)) | (Task.start_date.is_(None)),
            )
        )
        return list(result.scalars().all())

    async def find_daily_copy(
        self,
        db: AsyncSession,
        *,
        title: str,
        assignee_id: Optional[UUID],
        start_date: date,
    ) -> Optional[Task]:
        query = select(Task).where(
            Task.title == title,
            Task.task_type == TaskType.DAILY,
            Task.start_date == start_date,
        )
        if assignee_id is None:
            query = query.where(Task.assignee_id.is_(None))
        else:
            query = query.where(Task.assignee_id == assignee_id)
        result = await db.execute(query.limit(1))
        return result.scalars().first()

    async def list_completed_daily(self, db: AsyncSession) -> List[Task]:
        result = await db.execute(
            select(Task).where(
                Task.task_type == TaskType.DAILY,
                Task.status == TaskStatus.COMPLETED,
            )
        )
        return list(result.scalars().all())

    async def delete_dependents(self, db: AsyncSession, *, task_id: UUID) -> None:
        """Delete comments and documents of a task without committing."""
        await db.execute(delete(TaskComment).where(TaskComment.task_id == task_id))
        await db.execute(delete(TaskDocument).where(TaskDocument.task_id == task_id))


task = CRUDTask(Task)
