"""Tests for dayplanner.services.analytics_service."""

from datetime import datetime, timedelta

import pytest

from dayplanner.models.task_history import HistoricalTask
from dayplanner.services.analytics_service import (
    WEEKLY_SUBJECT,
    compute_analytics,
    send_weekly_analytics_emails,
    user_analytics,
    weekly_summary,
)

from .conftest import DEFAULT_NOW


def archived(day="2026-03-01", start=9, completed=False, priority=False, user_id="user-1", archived_at=None):
    return HistoricalTask(
        task_id=f"{day}-{start}", user_id=user_id, date=day, day_of_week="sunday",
        start_time=start, duration=1, activity="Old", is_priority=priority, completed=completed,
        original_date=day, actual_date=day,
        archived_at=archived_at if archived_at is not None else int(DEFAULT_NOW.timestamp() * 1000),
    )


class TestComputeAnalytics:
    def test_empty_history(self):
        result = compute_analytics([])
        assert result["totalTasks"] == 0
        assert result["completionRate"] == 0.0
        assert result["priorityCompletion"] == 0.0
        assert result["mostProductiveHour"] == 9
        assert result["dailyTotals"] == []

    def test_rates_and_buckets(self):
        history = [
            archived(start=9, completed=True, priority=True),
            archived(start=9.5, completed=True),
            archived(start=14, completed=False, priority=True),
            archived(day="2026-02-28", start=14, completed=True),
        ]
        result = compute_analytics(history, days=30)

        assert result["totalTasks"] == 4
        assert result["completedTasks"] == 3
        assert result["completionRate"] == 75.0
        assert result["priorityCompletion"] == 50.0
        assert result["averageTasksPerDay"] == 0.1
        assert result["mostProductiveHour"] == 9
        assert result["hourDistribution"] == {"9": 2, "14": 1}
        assert result["taskSplit"] == {"priority": 2, "standard": 2}
        assert result["dailyTotals"] == [
            {"date": "2026-02-28", "total": 1, "completed": 1},
            {"date": "2026-03-01", "total": 3, "completed": 2},
        ]

    def test_user_analytics_window(self, db):
        db.add_all([archived(day="2026-03-01", completed=True), archived(day="2026-01-01")])
        db.commit()
        assert user_analytics(db, "user-1", DEFAULT_NOW, days=30)["totalTasks"] == 1


class TestWeeklySummary:
    def test_counts_last_week_and_today(self, db, make_task):
        week_ago = int((DEFAULT_NOW - timedelta(days=8)).timestamp() * 1000)
        db.add_all([
            archived(completed=True),
            archived(start=10),
            archived(start=11, completed=True, archived_at=week_ago),
        ])
        db.commit()
        make_task(start_time=9, completed=True)

        summary = weekly_summary(db, "user-1", DEFAULT_NOW)

        assert summary == {"completedTasks": 2, "totalTasks": 3, "completionRate": "66.7%"}

    def test_nothing_scheduled(self, db):
        assert weekly_summary(db, "nobody", DEFAULT_NOW)["completionRate"] == "0%"


class TestWeeklyEmails:
    @pytest.mark.asyncio
    async def test_only_opted_in_users(self, context, db, make_prefs):
        make_prefs(user_id="opted-in", email="a@example.com", email_reminders=True)
        make_prefs(user_id="opted-out", email="b@example.com", email_reminders=False)
        make_prefs(user_id="no-address", email="", email_reminders=True)

        results = await send_weekly_analytics_emails(context)

        assert [r["userId"] for r in results] == ["opted-in"]
        to, subject, text = context.email.messages[0]
        assert to == "a@example.com"
        assert subject == WEEKLY_SUBJECT
        assert "https://planner.test/analytics" in text

    @pytest.mark.asyncio
    async def test_single_user(self, context, db, make_prefs):
        make_prefs(user_id="a", email="a@example.com", email_reminders=True)
        make_prefs(user_id="b", email="b@example.com", email_reminders=True)

        results = await send_weekly_analytics_emails(context, user_id="b")

        assert [r["userId"] for r in results] == ["b"]
        assert results[0]["success"] is True
