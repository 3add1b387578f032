"""Model modules."""
from timedesk.models.user import User, Role
from timedesk.models.employee import Employee
from timedesk.models.task import Task, TaskComment, TaskDocument, TaskPriority, TaskStatus, TaskType
from timedesk.models.time_record import ACTIVE_STATUSES, TimePause, TimeRecord, TimeRecordStatus

__all__ = [
    "User",
    "Role",
    "Employee",
    "Task",
    "TaskComment",
    "TaskDocument",
    "TaskPriority",
    "TaskStatus",
    "TaskType",
    "TimeRecord",
    "TimePause",
    "TimeRecordStatus",
    "ACTIVE_STATUSES",
]
