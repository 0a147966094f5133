# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import time
import uuid
from sqlalchemy import Column, String, Boolean, Float, BigInteger, Text, Index
from dayplanner.models.database import Base


def new_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_date", "user_id", "date"),
        Index("ix_tasks_reminder", "reminder_sent", "date"),
    )

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, nullable=False, index=True)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD in the user's timezone
    day_of_week = Column(String, nullable=False)  # e.g. "monday"

    start_time = Column(Float, nullable=False)  # fractional hour, 15-min steps
    duration = Column(Float, nullable=False, default=1.0)  # hours
    activity = Column(String, nullable=False, default="")
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)

    is_priority = Column(Boolean, default=False, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    reminder_sent = Column(Boolean, default=False, nullable=False)

    created_at = Column(BigInteger, default=now_ms)  # epoch ms
    last_updated = Column(BigInteger, nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
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
            "reminderSent": self.reminder_sent,
            "createdAt": self.created_at,
        }

    def __repr__(self):
        return f"<Task id={self.id} user={self.user_id} date={self.date} start={self.start_time}>"
