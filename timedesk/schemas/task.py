"""Task schemas."""
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from timedesk.models.task import TaskPriority, TaskStatus, TaskType


class TaskBase(BaseModel):
    """Base task schema."""

    title: str
    description: Optional[str] = None
    assignee_id: Optional[UUID] = None
    department: str = "general"
    priority: TaskPriority = TaskPriority.MEDIUM
    task_type: TaskType = TaskType.REGULAR
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    planned_date: Optional[date] = None


class TaskCreate(TaskBase):
    """Task creation schema."""

    creator_id: Optional[UUID] = None
    status: TaskStatus = TaskStatus.PENDING


class TaskUpdate(BaseModel):
    """Partial task update."""

    title: Optional[str] = None
    description: Optional[str] = None
    assignee_id: Optional[UUID] = None
    priority: Optional[TaskPriority] = None
    task_type: Optional[TaskType] = None
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    planned_date: Optional[date] = None
    archived: Optional[bool] = None

    @field_validator("title", "priority", "task_type", "archived")
    @classmethod
    def not_null(cls, value):
        """Omit a field to keep it; these columns cannot be cleared."""
        if value is None:
            raise ValueError("must not be null")
        return value


class TaskStatusUpdate(BaseModel):
    """Status change request."""

    status: TaskStatus


class TaskResponse(TaskBase):
    """Task response schema."""

    id: UUID
    creator_id: Optional[UUID] = None
    status: TaskStatus
    completed_at: Optional[datetime] = None
    archived: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


class OverdueTaskResponse(BaseModel):
    """Overdue task with the number of days past its due date."""

    id: UUID
    title: str
    description: Optional[str] = None
    priority: TaskPriority
    task_type: TaskType
    due_date: date
    department: str
    days_overdue: int


class OverdueStats(BaseModel):
    """Aggregate overdue counters."""

    total_overdue: int
    overdue_urgent: int
    overdue_long_term: int
    days_overdue_avg: float


class MaintenanceResult(BaseModel):
    """Outcome of a task maintenance job."""

    success: bool = True
    message: str
    affected: int
