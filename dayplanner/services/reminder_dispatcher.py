# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import asyncio
import logging
from datetime import datetime, timedelta
from typing import List

from sqlalchemy.orm import Session

from dayplanner.models.notification import AttemptStatus, ChannelType, NotificationAttempt
from dayplanner.models.task import Task
from dayplanner.models.user_preferences import UserPreferences
from dayplanner.services.channels.base import ChannelResult, failure
from dayplanner.utils.tier_logic import is_premium_user
from dayplanner.utils.time_buckets import format_day, is_reminder_due, local_now, reminder_target

logger = logging.getLogger(__name__)


async def _safe_send(sender, channel: str, task: Task, destination) -> ChannelResult:
    # A sender that raises still yields a failed result
    try:
        return await sender.send(task, destination)
    except Exception as e:
        logger.error(f"⚠️ {channel} sender raised for task {task.id}: {e}", exc_info=True)
        recipient = destination.get("endpoint") if isinstance(destination, dict) else destination
        return failure(channel, recipient, e)


async def _premium_only(channel: str, recipient: str) -> ChannelResult:
    return ChannelResult(
        success=False,
        type=channel,
        recipient=recipient,
        error="SMS notifications are a premium feature",
    )


def _candidate_tasks(db: Session, now: datetime) -> List[Task]:
    # Any zone is at most a day away from UTC, so the exact local "today" is
    # one of these three days; it is checked per user below.
    today = now.date()
    days = [format_day(today + timedelta(days=offset)) for offset in (-1, 0, 1)]
    return db.query(Task).filter(Task.reminder_sent == False, Task.date.in_(days)).all()  # noqa: E712


def _channel_calls(context, db: Session, task: Task, prefs: UserPreferences) -> list:
    calls = []
    if prefs.email_reminders and prefs.email:
        calls.append(_safe_send(context.email, "email", task, prefs.email))

    if prefs.sms_reminders and prefs.phone_number:
        if is_premium_user(db, task.user_id):
            calls.append(_safe_send(context.sms, "sms", task, prefs.phone_number))
        else:
            calls.append(_premium_only("sms", prefs.phone_number))

    if prefs.push_reminders and prefs.push_subscription:
        calls.append(_safe_send(context.push, "push", task, prefs.push_subscription))
    return calls


def _record_attempts(db: Session, task: Task, results: List[ChannelResult], timestamp: int) -> None:
    for result in results:
        db.add(NotificationAttempt(
            task_id=task.id,
            user_id=task.user_id,
            type=ChannelType(result.type),
            status=AttemptStatus.success if result.success else AttemptStatus.failed,
            recipient=result.recipient,
            timestamp=timestamp,
            error=result.error,
        ))


async def dispatch_task(context, db: Session, task: Task, prefs: UserPreferences, now: datetime) -> List[ChannelResult]:
    results = list(await asyncio.gather(*_channel_calls(context, db, task, prefs)))
    timestamp = int(now.timestamp() * 1000)

    _record_attempts(db, task, results, timestamp)

    # Attempted means done: failed sends are not retried on a later run
    task.reminder_sent = True
    task.last_updated = timestamp

    if any(r.type == "push" and r.permanent for r in results):
        logger.info(f"🔕 Disabling push for user {task.user_id}: subscription no longer valid")
        prefs.push_reminders = False
        prefs.push_subscription = None

    db.commit()
    return results


async def process_notifications(context) -> List[dict]:
    now = context.now()
    logger.info(f"🔔 Starting notification check at {now.isoformat()}")

    sent: List[dict] = []
    db = context.session_factory()
    try:
        tasks = _candidate_tasks(db, now)
        prefs_cache = {}

        for task in tasks:
            try:
                if task.user_id not in prefs_cache:
                    prefs_cache[task.user_id] = (
                        db.query(UserPreferences).filter(UserPreferences.user_id == task.user_id).first()
                    )
                prefs = prefs_cache[task.user_id]
                if not prefs:
                    continue

                local = local_now(now, prefs.timezone)
                if task.date != format_day(local.date()):
                    continue

                target = reminder_target(task.start_time, prefs.reminder_time)
                if not is_reminder_due(local, target):
                    continue

                results = await dispatch_task(context, db, task, prefs, now)
                logger.info(
                    f"📨 Reminder for task {task.id} ({task.activity}) -> "
                    + (", ".join(f"{r.type}:{'ok' if r.success else 'failed'}" for r in results) or "no channels")
                )
                sent.extend(r.to_dict() for r in results)
            except Exception as e:
                db.rollback()
                logger.error(f"🛑 Reminder dispatch failed for task {task.id}: {e}", exc_info=True)
    finally:
        db.close()

    logger.info(f"✅ Notification check complete. Sent {len(sent)} notifications")
    return sent


def run_reminder_dispatch(context) -> List[dict]:
    """Blocking entry point for worker threads; each call runs on its own event loop."""
    return asyncio.run(process_notifications(context))
