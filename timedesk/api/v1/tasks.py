"""Tasks API endpoints."""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.core.exceptions import ForbiddenError, NotFoundError
from timedesk.core.security import Permission
from timedesk.crud.employee import employee as employee_crud
from timedesk.crud.task import task as task_crud
from timedesk.database import get_db
from timedesk.dependencies import get_locale, require_permission
from timedesk.localization.helpers import get_translation
from timedesk.models.task import TaskStatus, TaskType
from timedesk.models.user import User
from timedesk.schemas.task import (
    MaintenanceResult,
    OverdueStats,
    OverdueTaskResponse,
    TaskCreate,
    TaskResponse,
    TaskStatusUpdate,
    TaskUpdate,
)
from timedesk.services.task_service import task_service
from timedesk.utils.permissions import has_permission

router = APIRouter()


async def _scope_assignee(
    db: AsyncSession, user: User, assignee_id: Optional[UUID], locale: str
) -> Optional[UUID]:
    """Callers without TASK_VIEW_ALL only ever see their own tasks."""
    if has_permission(user, Permission.TASK_VIEW_ALL):
        return assignee_id
    own = await employee_crud.get_by_user(db, user_id=user.id)
    if own is None:
        raise ForbiddenError(get_translation("errors.no_employee_profile", locale), locale=locale)
    return own.id


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    assignee_id: Optional[UUID] = None,
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    task_type: Optional[TaskType] = None,
    include_archived: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TASK_VIEW)),
    locale: str = Depends(get_locale),
):
    """List tasks by assignee, status and type."""
    return await task_crud.list_filtered(
        db,
        assignee_id=await _scope_assignee(db, current_user, assignee_id, locale),
        status=status_filter,
        task_type=task_type,
        include_archived=include_archived,
        skip=skip,
        limit=limit,
    )


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TASK_CREATE)),
):
    if payload.creator_id is None:
        creator = await employee_crud.get_by_user(db, user_id=current_user.id)
        if creator is not None:
            payload.creator_id = creator.id
    return await task_service.create_task(db, payload)


@router.get("/overdue", response_model=List[OverdueTaskResponse])
async def list_overdue_tasks(
    assignee_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TASK_VIEW)),
    locale: str = Depends(get_locale),
):
    """Overdue tasks with the number of days since their due date."""
    return await task_service.list_overdue_tasks(
        db, assignee_id=await _scope_assignee(db, current_user, assignee_id, locale)
    )


@router.get("/overdue/stats", response_model=OverdueStats)
async def get_overdue_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TASK_VIEW_ALL)),
):
    return await task_service.get_overdue_stats(db)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TASK_CREATE)),
    locale: str = Depends(get_locale),
):
    """Edit task fields; status changes go through the status endpoint."""
    task_obj = await task_crud.get(db, id=task_id)
    if task_obj is None:
        raise NotFoundError(get_translation("errors.task_not_found", locale), locale=locale)
    return await task_crud.update(db, db_obj=task_obj, obj_in=payload)


@router.patch("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: UUID,
    payload: TaskStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TASK_UPDATE)),
    locale: str = Depends(get_locale),
):
    task_obj = await task_crud.get(db, id=task_id)
    allowed = await _scope_assignee(db, current_user, None, locale)
    if task_obj is None or (allowed is not None and task_obj.assignee_id != allowed):
        raise NotFoundError(get_translation("errors.task_not_found", locale), locale=locale)
    return await task_service.set_status(db, task_obj, payload.status)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TASK_DELETE)),
    locale: str = Depends(get_locale),
):
    """Delete a task together with its comments, documents and time records."""
    await task_service.delete_task(db, task_id, locale=locale)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/maintenance/update-overdue", response_model=MaintenanceResult)
async def run_update_overdue(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TASK_MAINTAIN)),
):
    count = await task_service.update_overdue_tasks(db)
    return MaintenanceResult(message=f"Marked {count} tasks as overdue", affected=count)


@router.post("/maintenance/duplicate-daily", response_model=MaintenanceResult)
async def run_duplicate_daily(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TASK_MAINTAIN)),
):
    created = await task_service.duplicate_daily_tasks(db)
    return MaintenanceResult(message=f"Created {len(created)} daily tasks", affected=len(created))


@router.post("/maintenance/reset-daily", response_model=MaintenanceResult)
async def run_reset_daily(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TASK_MAINTAIN)),
):
    count = await task_service.reset_daily_tasks(db)
    return MaintenanceResult(message=f"Reset {count} daily tasks", affected=count)
