"""User CRUD operations."""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from timedesk.crud.base import CRUDBase
from timedesk.models.user import User, Role


class CRUDUser(CRUDBase[User, dict, dict]):
    """CRUD operations for User."""

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        """Get user by email."""
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


class CRUDRole(CRUDBase[Role, dict, dict]):
    """CRUD operations for Role."""

    async def get_by_name(self, db: AsyncSession, *, name: str) -> Optional[Role]:
        """Get role by name."""
        result = await db.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()


user = CRUDUser(User)
role = CRUDRole(Role)
