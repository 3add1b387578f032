"""Bootstrap utilities for ensuring core roles and the default admin exist."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.config import settings
from timedesk.core.security import ROLE_PERMISSIONS
from timedesk.crud.employee import employee as employee_crud
from timedesk.crud.user import role as role_crud, user as user_crud
from timedesk.models.employee import Employee
from timedesk.models.user import Role, User
from timedesk.services.auth_service import AuthService

logger = logging.getLogger(__name__)

DEFAULT_ROLE_DESCRIPTIONS = {
    "admin": "Administrator with full access",
    "employee": "Employee tracking own time and tasks",
}

DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_ADMIN_NAME = "Administrator"


async def ensure_roles(
    db: AsyncSession,
    *,
    role_names: Iterable[str],
) -> Dict[str, Role]:
    """Ensure that the given roles exist with current permissions."""
    role_map: Dict[str, Role] = {}
    changed = False

    for role_name in role_names:
        desired = [permission.value for permission in ROLE_PERMISSIONS.get(role_name, [])]
        role_obj = await role_crud.get_by_name(db, name=role_name)
        if role_obj is None:
            role_obj = Role(
                name=role_name,
                permissions=desired,
                description=DEFAULT_ROLE_DESCRIPTIONS.get(role_name, f"Default role: {role_name}"),
            )
            db.add(role_obj)
            await db.flush()
            changed = True
            logger.info(f"Created role '{role_name}'")
        elif set(role_obj.permissions or []) != set(desired):
            role_obj.permissions = desired
            db.add(role_obj)
            changed = True
            logger.info(f"Updated permissions for role '{role_name}'")

        role_map[role_name] = role_obj

    if changed:
        await db.commit()

    return role_map


async def ensure_default_admin(
    db: AsyncSession,
    *,
    role_map: Optional[Dict[str, Role]] = None,
    email: str = DEFAULT_ADMIN_EMAIL,
    password: str = DEFAULT_ADMIN_PASSWORD,
    full_name: str = DEFAULT_ADMIN_NAME,
) -> User:
    """Ensure that the default administrator account and profile exist."""
    if role_map is None or "admin" not in role_map:
        role_map = await ensure_roles(db, role_names={"admin"})

    admin_role = role_map["admin"]

    admin_user = await user_crud.get_by_email(db, email=email)
    if admin_user is None:
        admin_user = User(
            email=email,
            password_hash=AuthService.hash_password(password),
            full_name=full_name,
            is_active=True,
        )
        admin_user.roles = [admin_role]
        db.add(admin_user)
        await db.flush()
        logger.info(f"Created default admin {email}")
    elif admin_role not in admin_user.roles:
        admin_user.roles.append(admin_role)

    if await employee_crud.get_by_user(db, user_id=admin_user.id) is None:
        db.add(
            Employee(
                user_id=admin_user.id,
                full_name=full_name,
                email=email,
                department="administration",
                position="Administrator",
                daily_hours=settings.DEFAULT_DAILY_HOURS,
            )
        )

    await db.commit()
    await db.refresh(admin_user)
    return admin_user
