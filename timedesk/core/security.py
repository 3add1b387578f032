"""Security constants and permissions."""
from enum import Enum


class Permission(str, Enum):
    """Permission constants for RBAC."""

    # Own time tracking
    TRACKING_USE = "tracking.use"

    # Hours reporting
    HOURS_VIEW_OWN = "hours.view_own"
    HOURS_VIEW_ALL = "hours.view_all"

    # Tasks
    TASK_VIEW = "task.view"
    TASK_VIEW_ALL = "task.view_all"
    TASK_CREATE = "task.create"
    TASK_UPDATE = "task.update"
    TASK_DELETE = "task.delete"
    TASK_MAINTAIN = "task.maintain"

    # Employees
    EMPLOYEE_VIEW = "employee.view"
    EMPLOYEE_CREATE = "employee.create"
    EMPLOYEE_IMPERSONATE = "employee.impersonate"


# Role definitions with permissions
ROLE_PERMISSIONS = {
    "admin": [
        Permission.TRACKING_USE,
        Permission.HOURS_VIEW_OWN,
        Permission.HOURS_VIEW_ALL,
        Permission.TASK_VIEW,
        Permission.TASK_VIEW_ALL,
        Permission.TASK_CREATE,
        Permission.TASK_UPDATE,
        Permission.TASK_DELETE,
        Permission.TASK_MAINTAIN,
        Permission.EMPLOYEE_VIEW,
        Permission.EMPLOYEE_CREATE,
        Permission.EMPLOYEE_IMPERSONATE,
    ],
    "employee": [
        Permission.TRACKING_USE,
        Permission.HOURS_VIEW_OWN,
        Permission.TASK_VIEW,
        Permission.TASK_UPDATE,
        Permission.EMPLOYEE_VIEW,
    ],
}
