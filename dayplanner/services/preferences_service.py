# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from typing import Optional

from sqlalchemy.orm import Session

from dayplanner.models.user_preferences import UserPreferences
from dayplanner.utils.errors import ValidationError
from dayplanner.utils.phone import format_phone_number
from dayplanner.utils.tier_logic import get_or_create_user
from dayplanner.utils.time_buckets import is_valid_timezone

logger = logging.getLogger(__name__)

MAX_REMINDER_MINUTES = 24 * 60
VIEWS = ("today", "tomorrow")

# request field -> column
UPDATABLE_FIELDS = {
    "email": "email",
    "phoneNumber": "phone_number",
    "timezone": "timezone",
    "emailReminders": "email_reminders",
    "smsReminders": "sms_reminders",
    "pushReminders": "push_reminders",
    "reminderTime": "reminder_time",
    "defaultView": "default_view",
    "hasCompletedTour": "has_completed_tour",
}


def get_preferences(db: Session, user_id: str) -> Optional[UserPreferences]:
    return db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()


def get_or_create_preferences(db: Session, user_id: str, email: Optional[str] = None) -> UserPreferences:
    """Signup path: one record per user, created with defaults."""
    prefs = get_preferences(db, user_id)
    if prefs:
        return prefs

    get_or_create_user(db, user_id, email)
    prefs = UserPreferences(
        user_id=user_id,
        email=email or "",
        timezone="UTC",
        email_reminders=True,
        sms_reminders=False,
        push_reminders=False,
        reminder_time=10,
        default_view="today",
        has_completed_tour=False,
    )
    db.add(prefs)
    db.commit()
    logger.info(f"🆕 Created default preferences for user {user_id}")
    return prefs


def _clean(field: str, value):
    if field == "timezone":
        if not value or not is_valid_timezone(value):
            raise ValidationError(f"Unknown timezone: {value}")
    elif field == "phone_number":
        return format_phone_number(value) if value else None
    elif field == "reminder_time":
        if value is None or not (1 <= int(value) <= MAX_REMINDER_MINUTES):
            raise ValidationError(f"reminderTime must be between 1 and {MAX_REMINDER_MINUTES} minutes")
        return int(value)
    elif field == "default_view":
        if value not in VIEWS:
            raise ValidationError("defaultView must be 'today' or 'tomorrow'")
    elif field == "email":
        if value and "@" not in value:
            raise ValidationError("Invalid email address")
    return value


def update_preferences(db: Session, user_id: str, changes: dict) -> UserPreferences:
    prefs = get_or_create_preferences(db, user_id, changes.get("email"))

    cleaned = {}
    for key, value in changes.items():
        column = UPDATABLE_FIELDS.get(key)
        if column is None:
            continue
        cleaned[column] = _clean(column, value)

    if cleaned.get("sms_reminders") and not (cleaned.get("phone_number") or prefs.phone_number):
        raise ValidationError("A phone number is required for SMS reminders")

    for column, value in cleaned.items():
        setattr(prefs, column, value)

    db.commit()
    logger.info(f"⚙️ Updated preferences for user {user_id}: {sorted(cleaned)}")
    return prefs


def save_push_subscription(db: Session, user_id: str, subscription: dict) -> UserPreferences:
    if not subscription.get("endpoint") or not isinstance(subscription.get("keys"), dict):
        raise ValidationError("Push subscription needs an endpoint and keys")

    prefs = get_or_create_preferences(db, user_id)
    prefs.push_subscription = {"endpoint": subscription["endpoint"], "keys": subscription["keys"]}
    prefs.push_reminders = True
    db.commit()
    logger.info(f"🔔 Push subscription stored for user {user_id}")
    return prefs


def remove_push_subscription(db: Session, user_id: str) -> None:
    prefs = get_preferences(db, user_id)
    if not prefs:
        return
    prefs.push_subscription = None
    prefs.push_reminders = False
    db.commit()
    logger.info(f"🔕 Push subscription removed for user {user_id}")
