# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import enum
from sqlalchemy import Column, String, BigInteger, Enum, Text
from dayplanner.models.database import Base
from dayplanner.models.task import new_id, now_ms


class ChannelType(enum.Enum):
    email = "email"
    sms = "sms"
    push = "push"


class AttemptStatus(enum.Enum):
    success = "success"
    failed = "failed"


class NotificationAttempt(Base):
    """Append-only log of reminder sends, one row per channel per task."""

    __tablename__ = "notification_history"

    id = Column(String, primary_key=True, default=new_id)
    task_id = Column(String, nullable=False, index=True)
    user_id = Column(String, nullable=True, index=True)
    type = Column(Enum(ChannelType), nullable=False)
    status = Column(Enum(AttemptStatus), nullable=False)
    recipient = Column(String, nullable=True)
    timestamp = Column(BigInteger, default=now_ms, index=True)
    error = Column(Text, nullable=True)

    def to_dict(self) -> dict:
        data = {
            "taskId": self.task_id,
            "type": self.type.value,
            "status": self.status.value,
            "timestamp": self.timestamp,
        }
        if self.error:
            data["error"] = self.error
        return data
