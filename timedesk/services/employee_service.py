"""Employee onboarding."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.core.exceptions import ConflictError
from timedesk.crud.employee import employee as employee_crud
from timedesk.crud.user import user as user_crud
from timedesk.models.employee import Employee
from timedesk.models.user import Role, User
from timedesk.schemas.employee import EmployeeCreate
from timedesk.services.auth_service import AuthService

logger = logging.getLogger(__name__)


class EmployeeService:
    """Creates employee profiles and their login accounts together."""

    async def create_employee(self, db: AsyncSession, payload: EmployeeCreate) -> Employee:
        email = payload.email.strip().lower()
        if await employee_crud.get_by_email(db, email=email):
            raise ConflictError("Employee with this email already exists")

        profile = Employee(
            full_name=payload.full_name,
            email=email,
            department=payload.department,
            position=payload.position,
            daily_hours=payload.daily_hours,
        )

        if payload.password:
            if await user_crud.get_by_email(db, email=email):
                raise ConflictError("Email already registered")
            result = await db.execute(select(Role).where(Role.name.in_(payload.role_names)))
            account = User(
                email=email,
                password_hash=AuthService.hash_password(payload.password),
                full_name=payload.full_name,
                is_active=True,
            )
            account.roles = list(result.scalars().all())
            db.add(account)
            await db.flush()
            profile.user_id = account.id

        db.add(profile)
        await db.commit()
        await db.refresh(profile)
        logger.info(f"Created employee {profile.id} ({email})")
        return profile


employee_service = EmployeeService()
