"""Work session transitions: accept/start, pause, resume, finish."""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.config import settings
from timedesk.core.context import ActorContext
from timedesk.core.exceptions import ConflictError, InvalidTransitionError, NotFoundError
from timedesk.crud.task import task as task_crud
from timedesk.crud.time_record import time_record as time_record_crud
from timedesk.localization.helpers import get_translation
from timedesk.middleware.metrics import session_transitions_total
from timedesk.models.task import Task, TaskStatus
from timedesk.models.time_record import TimePause, TimeRecord, TimeRecordStatus
from timedesk.services.duration import (
    MS_PER_HOUR,
    MS_PER_SECOND,
    as_naive_utc,
    format_duration,
    hours_from_ms,
    pause_minutes_after_resume,
    utcnow,
    worked_ms,
)

logger = logging.getLogger(__name__)

ACCEPTABLE_TASK_STATUSES = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)


def work_date(now: datetime) -> date:
    """Calendar day of a naive UTC instant in the configured timezone."""
    aware = as_naive_utc(now).replace(tzinfo=timezone.utc)
    return aware.astimezone(ZoneInfo(settings.TIMEZONE)).date()


class SessionService:
    """State machine over time records.

    ``not-started -> working -> paused <-> working -> finished``. Each
    transition is committed as one transaction, including the task status
    change that accompanies accept and finish.
    """

    async def _commit(self, db: AsyncSession, action: str, record_id: Any) -> None:
        try:
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(f"Failed to {action} time record {record_id}")
            raise
        session_transitions_total.labels(action).inc()

    async def get_record(self, db: AsyncSession, ctx: ActorContext, record_id: UUID) -> TimeRecord:
        record = await time_record_crud.get_for_employee(
            db, record_id=record_id, employee_id=ctx.employee.id
        )
        if record is None:
            raise NotFoundError(
                get_translation("errors.record_not_found", ctx.locale), locale=ctx.locale
            )
        return record

    async def open_shift(
        self,
        db: AsyncSession,
        ctx: ActorContext,
        *,
        now: Optional[datetime] = None,
    ) -> TimeRecord:
        """Return today's task-less record, creating a not-started one if needed."""
        now = as_naive_utc(now or utcnow())
        today = work_date(now)
        record = await time_record_crud.get_shift(db, employee_id=ctx.employee.id, on_date=today)
        if record is not None:
            return record

        record = TimeRecord(
            employee_id=ctx.employee.id,
            task_id=None,
            date=today,
            status=TimeRecordStatus.NOT_STARTED,
            login_time=now,
            pause_duration=0,
        )
        db.add(record)
        await self._commit(db, "open", "shift")
        await db.refresh(record)
        logger.info(f"Opened shift record {record.id} for employee {ctx.employee.id} on {today}")
        return record

    async def start_shift(
        self,
        db: AsyncSession,
        ctx: ActorContext,
        *,
        now: Optional[datetime] = None,
    ) -> TimeRecord:
        """Begin the daily shift: not-started -> working."""
        now = as_naive_utc(now or utcnow())
        record = await self.open_shift(db, ctx, now=now)
        if record.status != TimeRecordStatus.NOT_STARTED:
            raise InvalidTransitionError(record.status.value, "start", locale=ctx.locale)

        record.start_time = now
        record.status = TimeRecordStatus.WORKING
        record.pause_duration = 0
        record.pause_started_at = None
        db.add(record)
        await self._commit(db, "start", record.id)
        await db.refresh(record)
        logger.info(f"Employee {ctx.employee.id} started shift record {record.id}")
        return record

    async def list_available_tasks(
        self,
        db: AsyncSession,
        ctx: ActorContext,
        *,
        now: Optional[datetime] = None,
    ) -> List[Task]:
        """Assigned open tasks that are not being tracked today."""
        today = work_date(as_naive_utc(now or utcnow()))
        tasks = await task_crud.list_for_assignee(
            db,
            assignee_id=ctx.employee.id,
            statuses=ACCEPTABLE_TASK_STATUSES,
        )
        active_ids = await time_record_crud.active_task_ids(
            db, employee_id=ctx.employee.id, on_date=today
        )
        return [item for item in tasks if item.id not in active_ids]

    async def list_active_sessions(
        self,
        db: AsyncSession,
        ctx: ActorContext,
        *,
        now: Optional[datetime] = None,
    ) -> List[TimeRecord]:
        today = work_date(as_naive_utc(now or utcnow()))
        return await time_record_crud.list_active_task_records(
            db, employee_id=ctx.employee.id, on_date=today
        )

    async def accept_task(
        self,
        db: AsyncSession,
        ctx: ActorContext,
        task_id: UUID,
        *,
        now: Optional[datetime] = None,
    ) -> TimeRecord:
        """Start working on a task: new working record, task -> in-progress."""
        now = as_naive_utc(now or utcnow())
        today = work_date(now)

        task_obj = await task_crud.get(db, id=task_id)
        if task_obj is None or task_obj.assignee_id != ctx.employee.id:
            raise NotFoundError(get_translation("errors.task_not_found", ctx.locale), locale=ctx.locale)
        if task_obj.archived or task_obj.status not in ACCEPTABLE_TASK_STATUSES:
            raise ConflictError(
                get_translation("errors.task_not_available", ctx.locale), locale=ctx.locale
            )

        # Sequential double accepts are refused; concurrent ones are not serialized.
        active = await time_record_crud.list_active_task_records(
            db, employee_id=ctx.employee.id, on_date=today, task_id=task_id
        )
        if active:
            raise ConflictError(
                get_translation("errors.task_already_active", ctx.locale), locale=ctx.locale
            )

        record = TimeRecord(
            employee_id=ctx.employee.id,
            task_id=task_obj.id,
            date=today,
            status=TimeRecordStatus.WORKING,
            start_time=now,
            pause_duration=0,
        )
        record.task = task_obj
        task_obj.status = TaskStatus.IN_PROGRESS
        db.add(record)
        db.add(task_obj)
        await self._commit(db, "accept", task_id)
        await db.refresh(record)
        logger.info(f"Employee {ctx.employee.id} accepted task {task_id} (record {record.id})")
        return record

    async def pause(
        self,
        db: AsyncSession,
        ctx: ActorContext,
        record_id: UUID,
        *,
        now: Optional[datetime] = None,
    ) -> TimeRecord:
        """working -> paused; remembers when the pause began."""
        now = as_naive_utc(now or utcnow())
        record = await self.get_record(db, ctx, record_id)
        if record.status != TimeRecordStatus.WORKING:
            raise InvalidTransitionError(record.status.value, "pause", locale=ctx.locale)

        worked_before = worked_ms(now, record.start_time, record.pause_duration)
        record.status = TimeRecordStatus.PAUSED
        record.pause_started_at = now
        db.add(record)
        db.add(
            TimePause(
                time_record_id=record.id,
                pause_start=now,
                worked_seconds_before_pause=worked_before // MS_PER_SECOND,
            )
        )
        await self._commit(db, "pause", record.id)
        await db.refresh(record)
        logger.info(f"Time record {record.id} paused")
        return record

    async def _close_pause(self, db: AsyncSession, record: TimeRecord, now: datetime) -> None:
        open_pause = await time_record_crud.get_open_pause(db, record_id=record.id)
        if open_pause is not None:
            open_pause.pause_end = now
            db.add(open_pause)

    async def resume(
        self,
        db: AsyncSession,
        ctx: ActorContext,
        record_id: UUID,
        *,
        now: Optional[datetime] = None,
    ) -> TimeRecord:
        """paused -> working; folds the finished pause into pause_duration."""
        now = as_naive_utc(now or utcnow())
        record = await self.get_record(db, ctx, record_id)
        if record.status != TimeRecordStatus.PAUSED:
            raise InvalidTransitionError(record.status.value, "resume", locale=ctx.locale)

        if record.pause_started_at is not None:
            record.pause_duration = pause_minutes_after_resume(
                record.pause_duration, record.pause_started_at, now
            )
        record.pause_started_at = None
        record.status = TimeRecordStatus.WORKING
        db.add(record)
        await self._close_pause(db, record, now)
        await self._commit(db, "resume", record.id)
        await db.refresh(record)
        logger.info(f"Time record {record.id} resumed, pause total {record.pause_duration} min")
        return record

    async def finish(
        self,
        db: AsyncSession,
        ctx: ActorContext,
        record_id: UUID,
        *,
        now: Optional[datetime] = None,
    ) -> TimeRecord:
        """working|paused -> finished; completes the task if there is one."""
        now = as_naive_utc(now or utcnow())
        record = await self.get_record(db, ctx, record_id)
        if record.status not in (TimeRecordStatus.WORKING, TimeRecordStatus.PAUSED):
            raise InvalidTransitionError(record.status.value, "finish", locale=ctx.locale)

        total_ms = worked_ms(now, record.start_time, record.pause_duration, record.pause_started_at)
        if record.status == TimeRecordStatus.PAUSED and record.pause_started_at is not None:
            record.pause_duration = pause_minutes_after_resume(
                record.pause_duration, record.pause_started_at, now
            )
            await self._close_pause(db, record, now)

        record.pause_started_at = None
        record.end_time = now
        record.total_hours = hours_from_ms(total_ms)
        record.status = TimeRecordStatus.FINISHED
        db.add(record)

        if record.task_id is not None:
            task_obj = await task_crud.get(db, id=record.task_id)
            if task_obj is not None:
                task_obj.status = TaskStatus.COMPLETED
                task_obj.completed_at = now
                db.add(task_obj)

        await self._commit(db, "finish", record.id)
        await db.refresh(record)
        logger.info(
            f"Time record {record.id} finished after {format_duration(total_ms)} "
            f"({record.total_hours:.2f} h)"
        )
        return record

    @staticmethod
    def describe(record: TimeRecord, *, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Record plus its live worked time, shaped for SessionView."""
        now = as_naive_utc(now or utcnow())
        if record.status == TimeRecordStatus.FINISHED:
            total = int(round((record.total_hours or 0) * MS_PER_HOUR))
        else:
            total = worked_ms(now, record.start_time, record.pause_duration, record.pause_started_at)
        return {
            "record": record,
            "task": record.task if record.task_id is not None else None,
            "worked_ms": total,
            "worked_display": format_duration(total),
        }


session_service = SessionService()
