# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from dayplanner.models.task import Task
from dayplanner.models.task_history import HistoricalTask
from dayplanner.models.task_suggestion import TaskSuggestion
from dayplanner.models.user_preferences import UserPreferences
from dayplanner.utils.time_buckets import local_day_bounds, should_run_rollover, weekday_name

logger = logging.getLogger(__name__)


def rollover_user(db: Session, user_id: str, tz_name: str, now: datetime) -> dict:
    """
    Archive yesterday, promote the tasks that were booked as "tomorrow",
    drop stale suggestions. Only stages changes; the caller commits.
    """
    yesterday, today, _ = local_day_bounds(now, tz_name)
    archived_at = int(now.timestamp() * 1000)

    # 1. Yesterday's tasks -> history
    expired = db.query(Task).filter(Task.user_id == user_id, Task.date == yesterday).all()
    for task in expired:
        db.add(HistoricalTask.from_task(task, archived_on=yesterday, archived_at=archived_at))
        db.delete(task)

    # 2. Tasks booked for "tomorrow" yesterday are dated today now
    promoted = db.query(Task).filter(Task.user_id == user_id, Task.date == today).all()
    for task in promoted:
        task.completed = False
        task.day_of_week = weekday_name(today)
        task.last_updated = archived_at

    # 3. Suggestions never survive a day boundary
    purged = (
        db.query(TaskSuggestion)
        .filter(TaskSuggestion.user_id == user_id)
        .delete(synchronize_session=False)
    )

    return {"archived": len(expired), "promoted": len(promoted), "suggestionsCleared": purged}


def run_midnight_rollover(context) -> dict:
    now = context.now()
    logger.info(f"🚀 Starting midnight transition at {now.isoformat()}")

    db = context.session_factory()
    try:
        users = [(p.user_id, p.timezone or "UTC") for p in db.query(UserPreferences).all()]
    finally:
        db.close()

    logger.info(f"📋 Found {len(users)} users to check")
    summary = {"processed": [], "skipped": 0, "failed": []}

    for user_id, tz_name in users:
        if not should_run_rollover(now, tz_name):
            summary["skipped"] += 1
            continue

        db = context.session_factory()
        try:
            prefs = db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()
            _, today, _ = local_day_bounds(now, tz_name)
            if prefs.last_rollover_date == today:
                # A second trigger inside the same window must not re-open today's tasks
                logger.info(f"⏭️ User {user_id} already rolled over for {today}")
                summary["skipped"] += 1
                continue

            counts = rollover_user(db, user_id, tz_name, now)
            prefs.last_rollover_date = today
            db.commit()
            logger.info(
                f"✨ Rolled over user {user_id} ({tz_name}): "
                f"{counts['archived']} archived, {counts['promoted']} promoted, "
                f"{counts['suggestionsCleared']} suggestions cleared"
            )
            summary["processed"].append({"userId": user_id, **counts})
        except Exception as e:
            db.rollback()
            logger.error(f"🛑 Midnight transition failed for user {user_id}: {e}", exc_info=True)
            summary["failed"].append(user_id)
        finally:
            db.close()

    logger.info(
        f"🎉 Midnight transition done: {len(summary['processed'])} processed, "
        f"{summary['skipped']} outside their window, {len(summary['failed'])} failed"
    )
    return summary
