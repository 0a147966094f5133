# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

from sqlalchemy import Column, String, Boolean, Float, BigInteger, Text
from dayplanner.models.database import Base
from dayplanner.models.task import new_id


class HistoricalTask(Base):
    """Snapshot of a Task taken when its day ends. Never updated afterwards."""

    __tablename__ = "task_history"

    id = Column(String, primary_key=True, default=new_id)
    task_id = Column(String, nullable=False)
    user_id = Column(String, nullable=False, index=True)
    date = Column(String(10), nullable=False)
    day_of_week = Column(String, nullable=False)

    start_time = Column(Float, nullable=False)
    duration = Column(Float, nullable=False)
    activity = Column(String, nullable=False, default="")
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)

    is_priority = Column(Boolean, default=False, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    reminder_sent = Column(Boolean, default=False, nullable=False)
    created_at = Column(BigInteger, nullable=True)

    # ✅ Archive metadata
    original_date = Column(String(10), nullable=False)
    actual_date = Column(String(10), nullable=False, index=True)
    archived_at = Column(BigInteger, nullable=False)

    @classmethod
    def from_task(cls, task, archived_on: str, archived_at: int) -> "HistoricalTask":
        return cls(
            task_id=task.id,
            user_id=task.user_id,
            date=task.date,
            day_of_week=task.day_of_week,
            start_time=task.start_time,
            duration=task.duration,
            activity=task.activity,
            description=task.description,
            category=task.category,
            is_priority=task.is_priority,
            completed=task.completed,
            reminder_sent=task.reminder_sent,
            created_at=task.created_at,
            original_date=archived_on,
            actual_date=archived_on,
            archived_at=archived_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "taskId": self.task_id,
            "userId": self.user_id,
            "date": self.date,
            "dayOfWeek": self.day_of_week,
            "startTime": self.start_time,
            "duration": self.duration,
            "activity": self.activity,
            "description": self.description,
            "category": self.category,
            "isPriority": self.is_priority,
            "completed": self.completed,
            "originalDate": self.original_date,
            "actualDate": self.actual_date,
            "archivedAt": self.archived_at,
        }
