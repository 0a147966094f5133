# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import asyncio
import logging
from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from dayplanner.models.task import Task
from dayplanner.models.task_history import HistoricalTask
from dayplanner.models.user_preferences import UserPreferences
from dayplanner.utils.time_buckets import format_day, local_now

logger = logging.getLogger(__name__)

ANALYTICS_WINDOW_DAYS = 30
DEFAULT_PRODUCTIVE_HOUR = 9
WEEKLY_SUBJECT = "Your Weekly Progress Report"


def _percent(part: int, whole: int) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


def compute_analytics(history: Iterable[HistoricalTask], days: int = ANALYTICS_WINDOW_DAYS) -> dict:
    """
    Summarise archived tasks. Pure: the caller decides which rows go in.

    The most productive hour is the start hour with the most completed
    tasks; with nothing completed it falls back to 9 AM.
    """
    tasks = list(history)
    completed = [t for t in tasks if t.completed]
    priority = [t for t in tasks if t.is_priority]
    priority_done = [t for t in priority if t.completed]

    per_day = defaultdict(lambda: {"total": 0, "completed": 0})
    for t in tasks:
        bucket = per_day[t.actual_date]
        bucket["total"] += 1
        bucket["completed"] += int(bool(t.completed))

    hours = Counter(int(t.start_time) for t in completed)
    most_productive = hours.most_common(1)[0][0] if hours else DEFAULT_PRODUCTIVE_HOUR

    return {
        "totalTasks": len(tasks),
        "completedTasks": len(completed),
        "completionRate": _percent(len(completed), len(tasks)),
        "priorityCompletion": _percent(len(priority_done), len(priority)),
        "averageTasksPerDay": round(len(tasks) / days, 1) if days else 0.0,
        "mostProductiveHour": most_productive,
        "dailyTotals": [
            {"date": day, **counts} for day, counts in sorted(per_day.items())
        ],
        "hourDistribution": {str(h): n for h, n in sorted(hours.items())},
        "taskSplit": {"priority": len(priority), "standard": len(tasks) - len(priority)},
    }


def load_history(db: Session, user_id: str, since: str) -> List[HistoricalTask]:
    return (
        db.query(HistoricalTask)
        .filter(HistoricalTask.user_id == user_id, HistoricalTask.actual_date >= since)
        .order_by(HistoricalTask.actual_date.asc())
        .all()
    )


def user_analytics(db: Session, user_id: str, now: datetime, days: int = ANALYTICS_WINDOW_DAYS) -> dict:
    since = format_day((now - timedelta(days=days)).date())
    return compute_analytics(load_history(db, user_id, since), days)


def weekly_summary(db: Session, user_id: str, now: datetime, tz_name: Optional[str] = None) -> dict:
    today = format_day(local_now(now, tz_name).date())
    week_start_ms = int((now - timedelta(days=7)).timestamp() * 1000)

    archived = (
        db.query(HistoricalTask)
        .filter(HistoricalTask.user_id == user_id, HistoricalTask.archived_at >= week_start_ms)
        .all()
    )
    open_today = db.query(Task).filter(Task.user_id == user_id, Task.date == today).all()

    done = sum(1 for t in archived if t.completed) + sum(1 for t in open_today if t.completed)
    total = len(archived) + len(open_today)
    return {
        "completedTasks": done,
        "totalTasks": total,
        "completionRate": f"{done / total * 100:.1f}%" if total else "0%",
    }


def weekly_email_text(summary: dict, app_url: str) -> str:
    app_url = app_url.rstrip("/")
    return (
        "Hey there! 👋\n\n"
        "It's time for your weekly progress check-in!\n\n"
        f"Check out your analytics dashboard to see how you're doing:\n{app_url}/analytics\n\n"
        "This week's summary:\n"
        f"- Completed Tasks: {summary['completedTasks']}\n"
        f"- Total Tasks Created: {summary['totalTasks']}\n"
        f"- Completion Rate: {summary['completionRate']}\n\n"
        "Keep up the great work! 💪\n\n"
        f"Want to change your notification preferences? Visit:\n{app_url}/preferences"
    )


async def send_weekly_analytics_emails(context, user_id: Optional[str] = None) -> List[dict]:
    now = context.now()
    logger.info("🔄 Weekly analytics email job started")

    results: List[dict] = []
    db = context.session_factory()
    try:
        query = db.query(UserPreferences).filter(UserPreferences.email_reminders == True)  # noqa: E712
        if user_id:
            query = query.filter(UserPreferences.user_id == user_id)

        for prefs in query.all():
            if not prefs.email:
                continue
            try:
                summary = weekly_summary(db, prefs.user_id, now, prefs.timezone)
                text = weekly_email_text(summary, context.settings.APP_URL)
                result = await context.email.send_message(prefs.email, WEEKLY_SUBJECT, text)
                results.append({"userId": prefs.user_id, **summary, **result.to_dict()})
            except Exception as e:
                logger.error(f"📧 Weekly email failed for user {prefs.user_id}: {e}", exc_info=True)
                results.append({"userId": prefs.user_id, "success": False, "error": str(e)})
    finally:
        db.close()

    logger.info(f"🏁 Weekly analytics emails processed for {len(results)} users")
    return results


def run_weekly_analytics_emails(context, user_id: Optional[str] = None) -> List[dict]:
    return asyncio.run(send_weekly_analytics_emails(context, user_id=user_id))
