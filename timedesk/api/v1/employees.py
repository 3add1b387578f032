"""Employees API endpoints."""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.core.exceptions import NotFoundError
from timedesk.core.security import Permission
from timedesk.crud.employee import employee as employee_crud
from timedesk.database import get_db
from timedesk.dependencies import get_current_active_user, get_locale, require_permission
from timedesk.localization.helpers import get_translation
from timedesk.models.user import User
from timedesk.schemas.employee import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from timedesk.services.employee_service import employee_service

router = APIRouter()


@router.get("", response_model=List[EmployeeResponse])
async def list_employees(
    department: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.EMPLOYEE_VIEW)),
):
    """List employees, optionally filtered by department."""
    return await employee_crud.list_by_department(
        db, department=department, skip=skip, limit=limit
    )


@router.get("/me", response_model=EmployeeResponse)
async def get_my_profile(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    locale: str = Depends(get_locale),
):
    """Employee profile linked to the current account."""
    profile = await employee_crud.get_by_user(db, user_id=current_user.id)
    if profile is None:
        raise NotFoundError(get_translation("errors.employee_not_found", locale), locale=locale)
    return profile


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.EMPLOYEE_VIEW)),
    locale: str = Depends(get_locale),
):
    profile = await employee_crud.get(db, id=employee_id)
    if profile is None:
        raise NotFoundError(get_translation("errors.employee_not_found", locale), locale=locale)
    return profile


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.EMPLOYEE_CREATE)),
):
    """Create an employee profile, with a login account when a password is given."""
    return await employee_service.create_employee(db, payload)


@router.patch("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: UUID,
    payload: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.EMPLOYEE_CREATE)),
    locale: str = Depends(get_locale),
):
    """Update profile fields such as department or daily hours."""
    profile = await employee_crud.get(db, id=employee_id)
    if profile is None:
        raise NotFoundError(get_translation("errors.employee_not_found", locale), locale=locale)
    return await employee_crud.update(db, db_obj=profile, obj_in=payload)
