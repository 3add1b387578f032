"""Employee schemas."""
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator


class EmployeeBase(BaseModel):
    """Base employee schema."""

    full_name: str
    email: EmailStr
    department: str = "general"
    position: str = ""
    daily_hours: float = Field(default=8.0, gt=0, le=24)


class EmployeeCreate(EmployeeBase):
    """Employee creation schema.

    When ``password`` is given a login account is created alongside the
    profile and granted ``role_names`` (``employee`` by default).
    """

    password: Optional[str] = Field(default=None, min_length=6)
    role_names: List[str] = ["employee"]


class EmployeeUpdate(BaseModel):
    """Employee update schema."""

    full_name: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    daily_hours: Optional[float] = Field(default=None, gt=0, le=24)

    @field_validator("full_name", "department", "position", "daily_hours")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class EmployeeResponse(EmployeeBase):
    """Employee response schema."""

    id: UUID
    user_id: Optional[UUID] = None

    class Config:
        from_attributes = True
