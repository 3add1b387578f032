"""Time tracking schemas."""
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from timedesk.models.time_record import TimeRecordStatus
from timedesk.schemas.task import TaskResponse


class TimeRecordResponse(BaseModel):
    """Persisted time record."""

    id: UUID
    employee_id: UUID
    task_id: Optional[UUID] = None
    date: date
    status: TimeRecordStatus
    login_time: Optional[datetime] = None
    start_time: Optional[datetime] = None
    pause_duration: int = 0
    pause_started_at: Optional[datetime] = None
    end_time: Optional[datetime] = None
    total_hours: Optional[float] = None

    class Config:
        from_attributes = True


class SessionView(BaseModel):
    """A time record with its live worked duration."""

    record: TimeRecordResponse
    task: Optional[TaskResponse] = None
    worked_ms: int
    worked_display: str


class WorkedToday(BaseModel):
    """Total worked time of an employee for one day."""

    date: date
    total_ms: int
    formatted: str
    daily_hours: float
    progress_percent: float


class HoursStats(BaseModel):
    """Finished hours per period."""

    today: float
    this_week: float
    this_month: float
    daily_average: float


class CalendarDay(BaseModel):
    """Hours worked on a single day."""

    date: date
    hours: float
    status: TimeRecordStatus
