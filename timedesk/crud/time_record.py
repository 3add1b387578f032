"""Time record CRUD operations."""
from __future__ import annotations

from datetime import date
from typing import List, Optional, Set
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.crud.base import CRUDBase
from timedesk.models.time_record import ACTIVE_STATUSES, TimePause, TimeRecord


class CRUDTimeRecord(CRUDBase[TimeRecord, dict, dict]):
    """Queries over time records and their pause history."""

    async def get_for_employee(
        self,
        db: AsyncSession,
        *,
        record_id: UUID,
        employee_id: UUID,
    ) -> Optional[TimeRecord]:
        result = await db.execute(
            select(TimeRecord).where(
                TimeRecord.id == record_id,
                TimeRecord.employee_id == employee_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_shift(
        self,
        db: AsyncSession,
        *,
        employee_id: UUID,
        on_date: date,
    ) -> Optional[TimeRecord]:
        """Task-less daily record of an employee."""
        result = await db.execute(
            select(TimeRecord)
            .where(
                TimeRecord.employee_id == employee_id,
                TimeRecord.date == on_date,
                TimeRecord.task_id.is_(None),
            )
            .order_by(TimeRecord.created_at)
            .limit(1)
        )
        return result.scalars().first()

    async def list_active_task_records(
        self,
        db: AsyncSession,
        *,
        employee_id: UUID,
        on_date: date,
        task_id: Optional[UUID] = None,
    ) -> List[TimeRecord]:
        query = select(TimeRecord).where(
            TimeRecord.employee_id == employee_id,
            TimeRecord.date == on_date,
            TimeRecord.status.in_(ACTIVE_STATUSES),
            TimeRecord.task_id.is_not(None),
        )
        if task_id is not None:
            query = query.where(TimeRecord.task_id == task_id)
        result = await db.execute(query.order_by(TimeRecord.start_time))
        return list(result.scalars().all())

    async def active_task_ids(
        self,
        db: AsyncSession,
        *,
        employee_id: UUID,
        on_date: date,
    ) -> Set[UUID]:
        result = await db.execute(
            select(TimeRecord.task_id).where(
                TimeRecord.employee_id == employee_id,
                TimeRecord.date == on_date,
                TimeRecord.status.in_(ACTIVE_STATUSES),
                TimeRecord.task_id.is_not(None),
            )
        )
        return {task_id for task_id in result.scalars().all() if task_id is not None}

    async def list_in_range(
        self,
        db: AsyncSession,
        *,
        employee_id: UUID,
        start: date,
        end: date,
    ) -> List[TimeRecord]:
        result = await db.execute(
            select(TimeRecord)
            .where(
                TimeRecord.employee_id == employee_id,
                TimeRecord.date >= start,
                TimeRecord.date <= end,
            )
            .order_by(TimeRecord.date, TimeRecord.created_at)
        )
        return list(result.scalars().all())

    async def get_open_pause(self, db: AsyncSession, *, record_id: UUID) -> Optional[TimePause]:
        result = await db.execute(
            select(TimePause)
            .where(
                TimePause.time_record_id == record_id,
                TimePause.pause_end.is_(None),
            )
            .order_by(TimePause.pause_start.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def list_pauses(self, db: AsyncSession, *, record_id: UUID) -> List[TimePause]:
        result = await db.execute(
            select(TimePause)
            .where(TimePause.time_record_id == record_id)
            .order_by(TimePause.pause_start)
        )
        return list(result.scalars().all())

    async def delete_for_task(self, db: AsyncSession, *, task_id: UUID) -> None:
        """Delete records of a task and their pauses without committing."""
        record_ids = select(TimeRecord.id).where(TimeRecord.task_id == task_id)
        await db.execute(delete(TimePause).where(TimePause.time_record_id.in_(record_ids)))
        await db.execute(delete(TimeRecord).where(TimeRecord.task_id == task_id))


time_record = CRUDTimeRecord(TimeRecord)
