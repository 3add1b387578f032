"""Time tracking models."""
from enum import Enum

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from timedesk.database import Base
from timedesk.db.types import GUID


class TimeRecordStatus(str, Enum):
    """Work session state."""

    NOT_STARTED = "not-started"
    WORKING = "working"
    PAUSED = "paused"
    FINISHED = "finished"


ACTIVE_STATUSES = (TimeRecordStatus.WORKING, TimeRecordStatus.PAUSED)


class TimeRecord(Base):
    """One work session of an employee on a date, optionally tied to a task.

    Timestamps are naive UTC.
    """

    __tablename__ = "time_records"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    employee_id = Column(GUID(), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    task_id = Column(GUID(), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True, index=True)
    date = Column(Date, nullable=False, index=True)
    status = Column(SQLEnum(TimeRecordStatus), nullable=False, default=TimeRecordStatus.NOT_STARTED, index=True)
    login_time = Column(DateTime, nullable=True)
    start_time = Column(DateTime, nullable=True)
    pause_duration = Column(Integer, nullable=False, default=0)  # minutes
    pause_started_at = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    total_hours = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    employee = relationship("Employee", back_populates="time_records")
    task = relationship("Task", lazy="selectin")
    pauses = relationship("TimePause", back_populates="time_record")


class TimePause(Base):
    """History entry for a single pause of a time record."""

    __tablename__ = "time_pauses"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    time_record_id = Column(GUID(), ForeignKey("time_records.id", ondelete="CASCADE"), nullable=False, index=True)
    pause_start = Column(DateTime, nullable=False)
    pause_end = Column(DateTime, nullable=True)
    worked_seconds_before_pause = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    time_record = relationship("TimeRecord", back_populates="pauses")
