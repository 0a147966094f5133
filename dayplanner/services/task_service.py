# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from dayplanner.models.task import Task, now_ms
from dayplanner.models.task_history import HistoricalTask
from dayplanner.services.preferences_service import get_or_create_preferences
from dayplanner.utils.errors import NotFoundError, TaskValidationError
from dayplanner.utils.task_rules import ensure_no_overlap, ensure_priority_capacity, validate_slot
from dayplanner.utils.time_buckets import resolve_day, weekday_name

logger = logging.getLogger(__name__)


def tasks_for_day(db: Session, user_id: str, day: str) -> List[Task]:
    return (
        db.query(Task)
        .filter(Task.user_id == user_id, Task.date == day)
        .order_by(Task.start_time.asc())
        .all()
    )


def list_tasks(db: Session, user_id: str, when: str, now: datetime) -> List[Task]:
    prefs = get_or_create_preferences(db, user_id)
    return tasks_for_day(db, user_id, resolve_day(now, prefs.timezone, when))


def list_history(db: Session, user_id: str, limit: int = 50) -> List[HistoricalTask]:
    return (
        db.query(HistoricalTask)
        .filter(HistoricalTask.user_id == user_id)
        .order_by(HistoricalTask.archived_at.desc(), HistoricalTask.start_time.asc())
        .limit(limit)
        .all()
    )


def get_task(db: Session, user_id: str, task_id: str) -> Task:
    task = db.query(Task).filter(Task.id == task_id, Task.user_id == user_id).first()
    if not task:
        raise NotFoundError("Task not found")
    return task


def create_task(db: Session, user_id: str, data: dict, now: datetime) -> Task:
    """
    Validates the slot and both per-day rules before anything is written.
    `data` carries startTime/duration/activity/... plus `when` (today|tomorrow).
    """
    prefs = get_or_create_preferences(db, user_id)
    try:
        day = resolve_day(now, prefs.timezone, data.get("when", "today"))
    except ValueError as e:
        raise TaskValidationError(str(e))

    start_time = float(data["startTime"])
    duration = float(data.get("duration", 1))
    validate_slot(start_time, duration)

    activity = (data.get("activity") or "").strip()
    if not activity:
        raise TaskValidationError("activity is required")

    siblings = tasks_for_day(db, user_id, day)
    ensure_no_overlap(start_time, duration, siblings)
    if data.get("isPriority"):
        ensure_priority_capacity(siblings)

    task = Task(
        user_id=user_id,
        date=day,
        day_of_week=weekday_name(day),
        start_time=start_time,
        duration=duration,
        activity=activity,
        description=data.get("description") or "",
        category=data.get("category"),
        is_priority=bool(data.get("isPriority")),
        completed=False,
        reminder_sent=False,
        created_at=now_ms(),
    )
    db.add(task)
    db.commit()
    logger.info(f"📝 Task {task.id} created for user {user_id} on {day} at {start_time}")
    return task


def update_task(db: Session, user_id: str, task_id: str, changes: dict) -> Task:
    task = get_task(db, user_id, task_id)

    start_time = float(changes.get("startTime", task.start_time))
    duration = float(changes.get("duration", task.duration))
    is_priority = changes.get("isPriority", task.is_priority)

    slot_changed = start_time != task.start_time or duration != task.duration
    siblings = tasks_for_day(db, user_id, task.date)

    if slot_changed:
        validate_slot(start_time, duration)
        ensure_no_overlap(start_time, duration, siblings, ignore_id=task.id)
    if is_priority and not task.is_priority:
        ensure_priority_capacity(siblings, ignore_id=task.id)

    if "activity" in changes:
        activity = (changes["activity"] or "").strip()
        if not activity:
            raise TaskValidationError("activity is required")
        task.activity = activity
    if "description" in changes:
        task.description = changes["description"] or ""
    if "category" in changes:
        task.category = changes["category"]
    if "completed" in changes:
        task.completed = bool(changes["completed"])

    if start_time != task.start_time:
        # A moved task gets a fresh reminder
        task.reminder_sent = False
    task.start_time = start_time
    task.duration = duration
    task.is_priority = bool(is_priority)
    task.last_updated = now_ms()

    db.commit()
    return task


def toggle_priority(db: Session, user_id: str, task_id: str) -> Task:
    task = get_task(db, user_id, task_id)
    return update_task(db, user_id, task_id, {"isPriority": not task.is_priority})


def toggle_complete(db: Session, user_id: str, task_id: str) -> Task:
    task = get_task(db, user_id, task_id)
    task.completed = not task.completed
    task.last_updated = now_ms()
    db.commit()
    return task


def delete_task(db: Session, user_id: str, task_id: Optional[str]) -> None:
    task = get_task(db, user_id, task_id)
    db.delete(task)
    db.commit()
    logger.info(f"🗑️ Task {task_id} deleted for user {user_id}")
