"""Employee profile model."""
from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from timedesk.database import Base
from timedesk.db.types import GUID


class Employee(Base):
    """Employee profile, optionally linked to a login account."""

    __tablename__ = "employees"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(GUID(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    department = Column(String(255), nullable=False, default="general", index=True)
    position = Column(String(255), nullable=False, default="")
    daily_hours = Column(Numeric(5, 2), nullable=False, default=8)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="employee")
    tasks = relationship("Task", foreign_keys="Task.assignee_id", back_populates="assignee")
    time_records = relationship("TimeRecord", back_populates="employee")
