"""Employee CRUD operations."""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.crud.base import CRUDBase
from timedesk.models.employee import Employee
from timedesk.schemas.employee import EmployeeCreate, EmployeeUpdate


class CRUDEmployee(CRUDBase[Employee, EmployeeCreate, EmployeeUpdate]):
    """CRUD operations for Employee."""

    async def get_by_user(self, db: AsyncSession, *, user_id: UUID) -> Optional[Employee]:
        """Get the employee profile linked to an account."""
        result = await db.execute(select(Employee).where(Employee.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[Employee]:
        result = await db.execute(select(Employee).where(Employee.email == email))
        return result.scalar_one_or_none()

    async def list_by_department(
        self,
        db: AsyncSession,
        *,
        department: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Employee]:
        query = select(Employee).order_by(Employee.full_name)
        if department:
            query = query.where(Employee.department == department)
        result = await db.execute(query.offset(skip).limit(limit))
        return list(result.scalars().all())


employee = CRUDEmployee(Employee)
