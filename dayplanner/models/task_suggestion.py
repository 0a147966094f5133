# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

from sqlalchemy import Column, String, Boolean, Float, Integer, BigInteger, Text, Index
from dayplanner.models.database import Base
from dayplanner.models.task import new_id, now_ms


class TaskSuggestion(Base):
    __tablename__ = "task_suggestions"
    __table_args__ = (Index("ix_suggestions_user_day", "user_id", "day", "processed"),)

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, nullable=False, index=True)
    day = Column(String(10), nullable=False)  # target date YYYY-MM-DD

    activity = Column(String, nullable=False)
    description = Column(Text, default="")
    start_time = Column(Float, nullable=False)
    duration = Column(Float, nullable=False)
    category = Column(String, default="General")
    confidence = Column(Integer, default=0)
    reasoning = Column(Text, nullable=True)

    processed = Column(Boolean, default=False, nullable=False)
    created_at = Column(BigInteger, default=now_ms)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "day": self.day,
            "activity": self.activity,
            "description": self.description,
            "startTime": self.start_time,
            "duration": self.duration,
            "category": self.category,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "processed": self.processed,
            "createdAt": self.created_at,
        }
