# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import json
import logging
from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from dayplanner.models.task_history import HistoricalTask
from dayplanner.models.task_suggestion import TaskSuggestion
from dayplanner.services import task_service
from dayplanner.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SUGGESTION_COUNT = 2
HISTORY_LIMIT = 30
MAX_DESCRIPTION_LENGTH = 100

# Offered when the user has no history yet
DEFAULT_SUGGESTIONS = [
    {
        "activity": "Morning Planning Session",
        "description": "Review and plan your day's priorities",
        "startTime": 8,
        "duration": 1,
        "category": "Planning",
        "confidence": 90,
        "reasoning": "Starting the day with planning helps increase productivity",
    },
    {
        "activity": "Focus Work Block",
        "description": "Dedicated time for your most important task",
        "startTime": 9,
        "duration": 2,
        "category": "Work",
        "confidence": 85,
        "reasoning": "Peak productivity hours for most people are in the morning",
    },
    {
        "activity": "Review & Wrap-up",
        "description": "Review day's progress and plan for tomorrow",
        "startTime": 16,
        "duration": 1,
        "category": "Planning",
        "confidence": 80,
        "reasoning": "End-of-day review helps maintain productivity momentum",
    },
]

# Returned when the completion API is down or answers with garbage
FALLBACK_SUGGESTIONS = [
    {
        "activity": "Deep Work Session",
        "description": "Block distraction-free time for your hardest task",
        "startTime": 10,
        "duration": 2,
        "category": "Work",
        "confidence": 70,
        "reasoning": "Protected focus time is the most reliable productivity habit",
    },
    {
        "activity": "Walk & Recharge",
        "description": "Short walk away from screens to reset your energy",
        "startTime": 15,
        "duration": 1,
        "category": "Health",
        "confidence": 65,
        "reasoning": "An afternoon break counters the post-lunch energy dip",
    },
]


def build_prompt(history: List[HistoricalTask]) -> str:
    rows = [
        {
            "activity": t.activity,
            "description": t.description,
            "startTime": t.start_time,
            "duration": t.duration,
            "isPriority": t.is_priority,
            "completed": t.completed,
            "date": t.actual_date,
        }
        for t in history
    ]
    return f"""
You are a productivity AI assistant. Based on these historical tasks:
{json.dumps(rows, indent=2)}

Generate exactly {SUGGESTION_COUNT} suggested tasks. Format your response as a JSON object with this exact structure:
{{
  "suggestions": [
    {{
      "activity": "Task name",
      "description": "Brief description",
      "startTime": 9,
      "duration": 2,
      "category": "Work",
      "confidence": 85,
      "reasoning": "Why this task is suggested"
    }}
  ]
}}

Rules:
- startTime must be an integer between 0 and 23
- duration must be between 1 and 4
- confidence must be between 0 and 100
- description must be under {MAX_DESCRIPTION_LENGTH} characters
"""


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_suggestions(raw: str) -> List[dict]:
    """
    Parse and strictly check the completion output. Raises ValueError on
    anything that does not match the requested shape.
    """
    parsed = json.loads(raw)
    items = parsed.get("suggestions") if isinstance(parsed, dict) else None
    if not isinstance(items, list) or len(items) != SUGGESTION_COUNT:
        raise ValueError("Expected a 'suggestions' list with exactly two entries")

    cleaned = []
    for item in items:
        if not isinstance(item, dict):
            raise ValueError("Suggestion must be an object")

        activity = item.get("activity")
        description = item.get("description", "")
        start_time = item.get("startTime")
        duration = item.get("duration")
        confidence = item.get("confidence", 50)

        if not isinstance(activity, str) or not activity.strip():
            raise ValueError("Suggestion activity missing")
        if not isinstance(description, str) or len(description) >= MAX_DESCRIPTION_LENGTH:
            raise ValueError("Suggestion description invalid")
        if not _is_number(start_time) or int(start_time) != start_time or not 0 <= start_time <= 23:
            raise ValueError(f"Suggestion startTime out of range: {start_time}")
        if not _is_number(duration) or not 1 <= duration <= 4:
            raise ValueError(f"Suggestion duration out of range: {duration}")
        if not _is_number(confidence) or not 0 <= confidence <= 100:
            raise ValueError(f"Suggestion confidence out of range: {confidence}")

        cleaned.append({
            "activity": activity.strip(),
            "description": description,
            "startTime": int(start_time),
            "duration": float(duration),
            "category": item.get("category") or "General",
            "confidence": int(confidence),
            "reasoning": item.get("reasoning"),
        })
    return cleaned


def _persist(db: Session, user_id: str, day: str, items: List[dict]) -> List[TaskSuggestion]:
    rows = [
        TaskSuggestion(
            user_id=user_id,
            day=day,
            activity=item["activity"],
            description=item["description"],
            start_time=item["startTime"],
            duration=item["duration"],
            category=item.get("category") or "General",
            confidence=item.get("confidence", 0),
            reasoning=item.get("reasoning"),
            processed=False,
        )
        for item in items
    ]
    db.add_all(rows)
    db.commit()
    return rows


def _unsaved(user_id: str, day: str, items: List[dict]) -> List[dict]:
    return [{"id": None, "userId": user_id, "day": day, "processed": False, **item} for item in items]


def generate_suggestions(db: Session, completion, user_id: str, day: str) -> List[dict]:
    existing = (
        db.query(TaskSuggestion)
        .filter(
            TaskSuggestion.user_id == user_id,
            TaskSuggestion.day == day,
            TaskSuggestion.processed == False,  # noqa: E712
        )
        .order_by(TaskSuggestion.start_time.asc())
        .all()
    )
    if existing:
        logger.info(f"♻️ Returning {len(existing)} stored suggestions for user {user_id} on {day}")
        return [s.to_dict() for s in existing]

    history = (
        db.query(HistoricalTask)
        .filter(HistoricalTask.user_id == user_id)
        .order_by(HistoricalTask.archived_at.desc())
        .limit(HISTORY_LIMIT)
        .all()
    )

    if not history:
        logger.info(f"🌱 No history for user {user_id}, using default suggestions")
        return [s.to_dict() for s in _persist(db, user_id, day, DEFAULT_SUGGESTIONS)]

    try:
        raw = completion.complete_json(build_prompt(history))
        items = validate_suggestions(raw)
    except Exception as e:
        # Best effort: never surface provider trouble to the caller
        logger.warning(f"⚠️ Suggestion generation failed for user {user_id}: {e}")
        return _unsaved(user_id, day, FALLBACK_SUGGESTIONS)

    logger.info(f"🤖 Generated {len(items)} suggestions for user {user_id} on {day}")
    return [s.to_dict() for s in _persist(db, user_id, day, items)]


def _get_suggestion(db: Session, user_id: str, suggestion_id: str) -> TaskSuggestion:
    suggestion = (
        db.query(TaskSuggestion)
        .filter(TaskSuggestion.id == suggestion_id, TaskSuggestion.user_id == user_id)
        .first()
    )
    if not suggestion:
        raise NotFoundError("Suggestion not found")
    if suggestion.processed:
        raise ValidationError("Suggestion was already handled")
    return suggestion


def accept_suggestion(db: Session, user_id: str, suggestion_id: str, when: str, now: datetime):
    suggestion = _get_suggestion(db, user_id, suggestion_id)
    task = task_service.create_task(db, user_id, {
        "when": when,
        "startTime": suggestion.start_time,
        "duration": suggestion.duration,
        "activity": suggestion.activity,
        "description": suggestion.description,
        "category": suggestion.category,
    }, now)
    suggestion.processed = True
    db.commit()
    return task


def dismiss_suggestion(db: Session, user_id: str, suggestion_id: str) -> None:
    suggestion = _get_suggestion(db, user_id, suggestion_id)
    suggestion.processed = True
    db.commit()
