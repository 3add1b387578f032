"""Task models."""
from enum import Enum

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from timedesk.database import Base
from timedesk.db.types import GUID


class TaskStatus(str, Enum):
    """Task lifecycle status."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class TaskPriority(str, Enum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskType(str, Enum):
    """Task kind as used by planning and maintenance jobs."""

    DAILY = "daily"
    URGENT = "urgent"
    LONG_TERM = "long-term"
    REGULAR = "regular"


class Task(Base):
    """Task assigned to an employee."""

    __tablename__ = "tasks"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    assignee_id = Column(GUID(), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True)
    creator_id = Column(GUID(), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    department = Column(String(255), nullable=False, default="general")
    priority = Column(SQLEnum(TaskPriority), nullable=False, default=TaskPriority.MEDIUM)
    task_type = Column(SQLEnum(TaskType), nullable=False, default=TaskType.REGULAR, index=True)
    status = Column(SQLEnum(TaskStatus), nullable=False, default=TaskStatus.PENDING, index=True)
    start_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True, index=True)
    planned_date = Column(Date, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    archived = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    assignee = relationship("Employee", foreign_keys=[assignee_id], back_populates="tasks")
    comments = relationship("TaskComment", back_populates="task")
    documents = relationship("TaskDocument", back_populates="task")


class TaskComment(Base):
    """Comment left on a task."""

    __tablename__ = "task_comments"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    task_id = Column(GUID(), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(GUID(), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    task = relationship("Task", back_populates="comments")


class TaskDocument(Base):
    """File reference attached to a task."""

    __tablename__ = "task_documents"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    task_id = Column(GUID(), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    uploader_id = Column(GUID(), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    file_name = Column(String(255), nullable=False)
    file_url = Column(String(1024), nullable=False)
    file_size = Column(Integer, nullable=True)
    file_type = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    task = relationship("Task", back_populates="documents")
