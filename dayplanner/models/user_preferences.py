# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

from sqlalchemy import Column, String, Boolean, Integer, JSON
from dayplanner.models.database import Base
from dayplanner.models.task import new_id
from dayplanner.utils.encryption import EncryptedContact

DEFAULT_REMINDER_MINUTES = 10
DEFAULT_TIMEZONE = "UTC"


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, nullable=False, unique=True, index=True)
    email = Column(String, default="")
    phone_number = Column(EncryptedContact, nullable=True)  # 🔐 E.164, encrypted at rest
    timezone = Column(String, default=DEFAULT_TIMEZONE)

    # ✅ Channel toggles
    email_reminders = Column(Boolean, default=True)
    sms_reminders = Column(Boolean, default=False)
    push_reminders = Column(Boolean, default=False)
    push_subscription = Column(JSON, nullable=True)  # {"endpoint": ..., "keys": {"p256dh": ..., "auth": ...}}

    reminder_time = Column(Integer, default=DEFAULT_REMINDER_MINUTES)  # minutes before start
    default_view = Column(String, default="today")
    has_completed_tour = Column(Boolean, default=False)
    last_rollover_date = Column(String(10), nullable=True)  # local YYYY-MM-DD of the last midnight transition

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "timezone": self.timezone or DEFAULT_TIMEZONE,
            "emailReminders": self.email_reminders,
            "smsReminders": self.sms_reminders,
            "pushReminders": self.push_reminders,
            "pushSubscription": self.push_subscription,
            "reminderTime": self.reminder_time,
            "defaultView": self.default_view,
            "hasCompletedTour": self.has_completed_tour,
        }
