"""Worked hours reporting endpoints."""
from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.core.exceptions import ForbiddenError, NotFoundError
from timedesk.core.security import Permission
from timedesk.crud.employee import employee as employee_crud
from timedesk.database import get_db
from timedesk.dependencies import get_locale, require_permission
from timedesk.localization.helpers import get_translation
from timedesk.models.employee import Employee
from timedesk.models.user import User
from timedesk.schemas.time_record import CalendarDay, HoursStats
from timedesk.services.hours_service import hours_service
from timedesk.utils.permissions import has_permission

router = APIRouter()


async def resolve_employee(
    employee_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.HOURS_VIEW_OWN)),
    locale: str = Depends(get_locale),
) -> Employee:
    """Own profile by default; another employee's needs HOURS_VIEW_ALL."""
    if employee_id is None:
        target = await employee_crud.get_by_user(db, user_id=current_user.id)
        if target is None:
            raise ForbiddenError(get_translation("errors.no_employee_profile", locale), locale=locale)
        return target

    if not has_permission(current_user, Permission.HOURS_VIEW_ALL):
        own = await employee_crud.get_by_user(db, user_id=current_user.id)
        if own is None or own.id != employee_id:
            raise ForbiddenError(f"Permission required: {Permission.HOURS_VIEW_ALL.value}", locale=locale)
        return own

    target = await employee_crud.get(db, id=employee_id)
    if target is None:
        raise NotFoundError(get_translation("errors.employee_not_found", locale), locale=locale)
    return target


@router.get("/stats", response_model=HoursStats)
async def get_hours_stats(
    db: AsyncSession = Depends(get_db),
    target: Employee = Depends(resolve_employee),
):
    """Finished hours for today, this week and this month."""
    return await hours_service.hours_stats(db, target)


@router.get("/calendar", response_model=List[CalendarDay])
async def get_hours_calendar(
    start: date,
    end: date,
    db: AsyncSession = Depends(get_db),
    target: Employee = Depends(resolve_employee),
    locale: str = Depends(get_locale),
):
    return await hours_service.hours_calendar(db, target, start=start, end=end, locale=locale)
