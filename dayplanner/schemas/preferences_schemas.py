# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from pydantic import BaseModel
from typing import Optional, Dict, Any


class PreferencesUpdateRequest(BaseModel):
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    timezone: Optional[str] = None
    emailReminders: Optional[bool] = None
    smsReminders: Optional[bool] = None
    pushReminders: Optional[bool] = None
    reminderTime: Optional[int] = None
    defaultView: Optional[str] = None
    hasCompletedTour: Optional[bool] = None


class PushSubscribeRequest(BaseModel):
    userId: str
    subscription: Dict[str, Any]


class PushUnsubscribeRequest(BaseModel):
    userId: str
