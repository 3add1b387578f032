"""Worked-hours aggregation for an employee."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.config import settings
from timedesk.core.exceptions import ValidationError
from timedesk.crud.time_record import time_record as time_record_crud
from timedesk.localization.helpers import get_translation
from timedesk.models.employee import Employee
from timedesk.models.time_record import TimeRecord, TimeRecordStatus
from timedesk.services.duration import (
    MS_PER_HOUR,
    as_naive_utc,
    format_hours_minutes,
    progress_percent,
    utcnow,
    worked_ms,
)
from timedesk.services.session_service import work_date

# Higher wins when several records share a day.
_STATUS_RANK = {
    TimeRecordStatus.NOT_STARTED: 0,
    TimeRecordStatus.FINISHED: 1,
    TimeRecordStatus.PAUSED: 2,
    TimeRecordStatus.WORKING: 3,
}


def _record_ms(record: TimeRecord, now: datetime) -> int:
    if record.status == TimeRecordStatus.FINISHED:
        return int(round((record.total_hours or 0) * MS_PER_HOUR))
    if record.status in (TimeRecordStatus.WORKING, TimeRecordStatus.PAUSED):
        return worked_ms(now, record.start_time, record.pause_duration, record.pause_started_at)
    return 0


def _finished_hours(records: Iterable[TimeRecord]) -> float:
    return sum(record.total_hours or 0 for record in records if record.total_hours is not None)


class HoursService:
    """Daily totals, period statistics and per-day calendars."""

    async def worked_today(
        self,
        db: AsyncSession,
        employee: Employee,
        *,
        now: Optional[datetime] = None,
        locale: str = "en",
    ) -> Dict:
        """Finished hours plus live time of open sessions for today."""
        now = as_naive_utc(now or utcnow())
        today = work_date(now)
        records = await time_record_crud.list_in_range(
            db, employee_id=employee.id, start=today, end=today
        )
        total = sum(_record_ms(record, now) for record in records)
        daily_hours = float(employee.daily_hours or settings.DEFAULT_DAILY_HOURS)
        return {
            "date": today,
            "total_ms": total,
            "formatted": format_hours_minutes(total, locale),
            "daily_hours": daily_hours,
            "progress_percent": progress_percent(total, daily_hours),
        }

    async def hours_stats(
        self,
        db: AsyncSession,
        employee: Employee,
        *,
        today: Optional[date] = None,
    ) -> Dict[str, float]:
        """Finished hours for today, this week (from Monday) and this month."""
        today = today or work_date(utcnow())
        week_start = today - timedelta(days=today.weekday())
        month_start = today.replace(day=1)
        range_start = min(week_start, month_start)

        records = await time_record_crud.list_in_range(
            db, employee_id=employee.id, start=range_start, end=today
        )
        finished = [record for record in records if record.total_hours is not None]

        month_records = [record for record in finished if record.date >= month_start]
        month_hours = _finished_hours(month_records)
        worked_days = {record.date for record in month_records}

        return {
            "today": round(_finished_hours(r for r in finished if r.date == today), 2),
            "this_week": round(_finished_hours(r for r in finished if r.date >= week_start), 2),
            "this_month": round(month_hours, 2),
            "daily_average": round(month_hours / len(worked_days), 2) if worked_days else 0.0,
        }

    async def hours_calendar(
        self,
        db: AsyncSession,
        employee: Employee,
        *,
        start: date,
        end: date,
        locale: str = "en",
    ) -> List[Dict]:
        """One entry per day in [start, end] with summed hours and status."""
        span = (end - start).days + 1
        if span < 1 or span > settings.MAX_CALENDAR_DAYS:
            raise ValidationError(
                get_translation("errors.calendar_range", locale, days=settings.MAX_CALENDAR_DAYS),
                locale=locale,
            )

        records = await time_record_crud.list_in_range(
            db, employee_id=employee.id, start=start, end=end
        )
        by_day: Dict[date, Dict] = {}
        for record in records:
            entry = by_day.setdefault(
                record.date, {"hours": 0.0, "status": TimeRecordStatus.NOT_STARTED}
            )
            entry["hours"] += record.total_hours or 0
            if _STATUS_RANK[record.status] > _STATUS_RANK[entry["status"]]:
                entry["status"] = record.status

        calendar = []
        for offset in range(span):
            day = start + timedelta(days=offset)
            entry = by_day.get(day, {"hours": 0.0, "status": TimeRecordStatus.NOT_STARTED})
            calendar.append(
                {"date": day, "hours": round(entry["hours"], 2), "status": entry["status"]}
            )
        return calendar


hours_service = HoursService()
